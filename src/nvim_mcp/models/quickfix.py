"""Quickfix entries as accepted from MCP clients."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class QuickfixItem(BaseModel):
    """One location + message for Neovim's quickfix list."""

    filename: str = Field(description="File path")
    line: int = Field(ge=1, description="Line number (1-based)")
    column: int = Field(0, description="Column number (optional, omitted when 0)")
    text: str = Field(description="Error or warning message")
    type: Literal["E", "W", "I", ""] = Field(
        "", description="Type of entry (E for error, W for warning, I for info)"
    )
