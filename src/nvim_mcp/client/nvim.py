"""Neovim client — command execution, context extraction, diagnostics, quickfix.

Built purely from the two :class:`~nvim_mcp.client.channel.Channel`
primitives.  ``v:errmsg`` inside the session is shared, externally owned
state, so every operation holds a per-socket lock for its whole sequence of
channel calls.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from nvim_mcp.client import queries
from nvim_mcp.client.channel import Channel, SubprocessChannel
from nvim_mcp.client.errors import (
    ChannelError,
    CommandValidationError,
    RemoteCommandError,
    SessionNotFoundError,
    SessionUnresponsiveError,
    wrap_channel_error,
)
from nvim_mcp.client.locator import locate_socket
from nvim_mcp.client.quickfix import escape_vim_string, setqflist_command
from nvim_mcp.models.context import BufferContext
from nvim_mcp.models.quickfix import QuickfixItem

logger = logging.getLogger("nvim_mcp.client")

COMMAND_PREFIX = ":"

# ---------------------------------------------------------------------------
# Per-socket locks
# ---------------------------------------------------------------------------

_registry_lock = threading.Lock()
_socket_locks: dict[str, threading.RLock] = {}


def socket_lock(socket_path: str) -> threading.RLock:
    """Return the process-wide lock guarding *socket_path*."""
    with _registry_lock:
        lock = _socket_locks.get(socket_path)
        if lock is None:
            lock = _socket_locks[socket_path] = threading.RLock()
        return lock


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


@dataclass
class QuickfixResult:
    """Outcome of :meth:`NvimClient.set_quickfix_and_show`.

    ``warnings`` lists secondary steps that failed after the list itself
    was installed.
    """

    count: int
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class NvimClient:
    """Talks to one Neovim session through its control socket."""

    def __init__(self, socket_path: str, channel: Channel | None = None) -> None:
        if not socket_path:
            raise SessionNotFoundError("no Neovim socket path given")
        self.socket_path = socket_path
        self._channel: Channel = channel if channel is not None else SubprocessChannel()

    @classmethod
    def connect(
        cls,
        channel: Channel | None = None,
        locate: Callable[[], str] = locate_socket,
    ) -> NvimClient:
        """Discover the current session and return a client bound to it."""
        socket_path = locate()
        logger.info(
            "Connected to Neovim at %s (query set v%d)", socket_path, queries.QUERY_VERSION
        )
        return cls(socket_path, channel)

    def _eval(self, expr: str, context: str) -> str:
        try:
            return self._channel.eval_expr(self.socket_path, expr)
        except ChannelError as exc:
            raise wrap_channel_error(context, exc) from exc

    # -- commands ------------------------------------------------------------

    def execute_command(self, command: str) -> str:
        """Run an Ex command and return its captured output.

        The remote channel only reports that Neovim *accepted* the
        expression, so failures are detected by clearing ``v:errmsg``,
        running the command through ``execute()`` and reading ``v:errmsg``
        back.

        Raises :class:`CommandValidationError` for a blank command,
        :class:`ChannelError` if the transport fails and
        :class:`RemoteCommandError` if Neovim reported an error.
        """
        if not command.strip():
            raise CommandValidationError("command cannot be empty")

        normalized = command[1:] if command.startswith(COMMAND_PREFIX) else command
        logger.info("execute_command: %s", normalized)

        with socket_lock(self.socket_path):
            self._eval(queries.CLEAR_ERRMSG, "failed to clear error message")
            output = self._eval(
                queries.execute_expr(escape_vim_string(normalized)),
                "failed to execute command",
            )
            try:
                errmsg = self._channel.eval_expr(self.socket_path, queries.READ_ERRMSG)
            except SessionUnresponsiveError:
                raise
            except ChannelError as exc:
                logger.warning("could not read v:errmsg after %r: %s", normalized, exc)
                errmsg = ""

        if errmsg.strip():
            raise RemoteCommandError(errmsg)
        if not output.strip():
            return f"Command executed successfully: {command}"
        return output

    def send_keys(self, keys: str) -> None:
        """Type *keys* into the session as if the user pressed them."""
        with socket_lock(self.socket_path):
            try:
                self._channel.send_keys(self.socket_path, keys)
            except ChannelError as exc:
                raise wrap_channel_error("failed to send keys", exc) from exc

    # -- context -------------------------------------------------------------

    def read_buffer_context(self) -> BufferContext:
        """Collect file, cursor, mode and line/selection in one locked pass."""
        with socket_lock(self.socket_path):
            file_path = self._eval(queries.FILE_PATH, "failed to get file path")
            cursor = self._eval(queries.CURSOR_POSITION, "failed to get cursor position")
            mode = self._eval(queries.MODE, "failed to get mode")

            if queries.is_visual_mode(mode):
                visual_selection = self._eval(
                    queries.VISUAL_SELECTION, "failed to get visual range"
                )
                selected_text = self._eval(queries.SELECTED_TEXT, "failed to get selected text")
                return BufferContext(
                    file_path=file_path,
                    cursor=cursor,
                    mode=mode,
                    visual_selection=visual_selection,
                    selected_text=selected_text,
                )
            current_line = self._eval(queries.CURRENT_LINE, "failed to get current line")
        return BufferContext(
            file_path=file_path, cursor=cursor, mode=mode, current_line=current_line
        )

    def get_buffer_context(self) -> str:
        return self.read_buffer_context().render()

    # -- diagnostics ---------------------------------------------------------

    def get_diagnostics(self) -> str:
        """Diagnostics of the current buffer as ``DIAGNOSTIC:`` lines, or ``NO_DIAGNOSTICS``."""
        with socket_lock(self.socket_path):
            return self._eval(queries.DIAGNOSTICS, "failed to get diagnostics")

    # -- quickfix ------------------------------------------------------------

    def set_quickfix_list(self, items: Sequence[QuickfixItem]) -> None:
        self.execute_command(setqflist_command(items))

    def open_quickfix_window(self) -> None:
        self.execute_command("copen")

    def set_quickfix_and_show(self, items: Sequence[QuickfixItem]) -> QuickfixResult:
        """Install *items* as the quickfix list, then open the quickfix window.

        A failure to install the list propagates.  A failure to open the
        window is only recorded as a warning: the list is already in place.
        """
        with socket_lock(self.socket_path):
            self.set_quickfix_list(items)
            result = QuickfixResult(count=len(items))
            try:
                self.open_quickfix_window()
            except (ChannelError, RemoteCommandError) as exc:
                logger.warning("Could not open quickfix window: %s", exc)
                result.warnings.append(f"could not open quickfix window: {exc}")
        return result
