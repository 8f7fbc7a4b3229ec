"""Remote session layer: socket discovery, ``nvim --server`` channel, client."""

from nvim_mcp.client.channel import Channel, SubprocessChannel
from nvim_mcp.client.errors import (
    ChannelError,
    CommandValidationError,
    NvimError,
    RemoteCommandError,
    SessionNotFoundError,
    SessionUnresponsiveError,
)
from nvim_mcp.client.locator import locate_socket
from nvim_mcp.client.nvim import NvimClient, QuickfixResult

__all__ = [
    "Channel",
    "ChannelError",
    "CommandValidationError",
    "NvimClient",
    "NvimError",
    "QuickfixResult",
    "RemoteCommandError",
    "SessionNotFoundError",
    "SessionUnresponsiveError",
    "SubprocessChannel",
    "locate_socket",
]
