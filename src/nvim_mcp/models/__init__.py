"""Domain models for the Neovim MCP server."""

from nvim_mcp.models.context import BufferContext
from nvim_mcp.models.quickfix import QuickfixItem

__all__ = [
    "BufferContext",
    "QuickfixItem",
]
