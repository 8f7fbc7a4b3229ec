"""Neovim MCP server — bridges an MCP agent to a live Neovim session."""

__version__ = "1.0.0"
