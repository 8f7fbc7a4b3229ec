"""Tool-facing service layer — owns the Neovim client and formats results.

Reusable by any dispatcher; the MCP server is a thin wrapper around it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence

from nvim_mcp.client.channel import Channel, SubprocessChannel
from nvim_mcp.client.errors import SessionNotFoundError
from nvim_mcp.client.locator import locate_socket
from nvim_mcp.client.nvim import NvimClient
from nvim_mcp.models.quickfix import QuickfixItem

logger = logging.getLogger("nvim_mcp.toolbox")


class NvimToolbox:
    """Holds the (single) Neovim connection for the lifetime of the process.

    Construction never fails: if no session can be found yet, the toolbox
    starts disconnected and retries discovery on the next tool call.
    """

    def __init__(
        self,
        channel: Channel | None = None,
        locate: Callable[[], str] = locate_socket,
    ) -> None:
        self._channel: Channel = channel if channel is not None else SubprocessChannel()
        self._locate = locate
        self._lock = threading.Lock()
        self._client: NvimClient | None = None
        try:
            self._client = NvimClient.connect(self._channel, self._locate)
        except SessionNotFoundError as exc:
            logger.warning("%s; will retry on the next tool call", exc)

    @property
    def connected(self) -> bool:
        return self._client is not None

    def ensure_connection(self) -> NvimClient:
        """Return the client, discovering the session first if needed.

        Raises :class:`SessionNotFoundError` when discovery still fails.
        """
        with self._lock:
            if self._client is None:
                self._client = NvimClient.connect(self._channel, self._locate)
            return self._client

    # -- operations ----------------------------------------------------------

    def populate_quickfix(self, items: Sequence[QuickfixItem]) -> str:
        client = self.ensure_connection()
        logger.info("populate_quickfix: %d item(s)", len(items))
        result = client.set_quickfix_and_show(items)
        lines = [f"Successfully populated quickfix list with {result.count} items"]
        lines.extend(f"Warning: {w}" for w in result.warnings)
        return "\n".join(lines)

    def execute_command(self, command: str) -> str:
        return self.ensure_connection().execute_command(command)

    def get_buffer_context(self) -> str:
        return self.ensure_connection().get_buffer_context()

    def get_diagnostics(self) -> str:
        return self.ensure_connection().get_diagnostics()

    def cancel(self) -> int:
        """Kill the channel calls still in flight; returns how many were killed."""
        return self._channel.cancel()
