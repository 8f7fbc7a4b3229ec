"""Shared settings loaded from environment / .env file."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the Neovim MCP server.

    Values are read from environment variables and from a ``.env`` file
    in the working directory.  Session discovery itself is driven by the
    ``NVIM`` and ``XDG_CACHE_HOME`` variables, not by these settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shared
    log_level: str = "INFO"

    # Remote channel
    nvim_executable: str = "nvim"
    channel_timeout_seconds: float = 10.0

    # MCP transport
    mcp_transport: Literal["stdio", "http", "sse"] = "stdio"
    mcp_server_host: str = "localhost"
    mcp_server_port: int = 9000
