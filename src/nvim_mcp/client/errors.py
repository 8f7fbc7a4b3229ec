"""Error hierarchy for the Neovim remote session layer."""

from __future__ import annotations


def _one_line(text: str) -> str:
    return " ".join(text.split())


class NvimError(Exception):
    """Base class for every failure surfaced by the Neovim client."""


class SessionNotFoundError(NvimError):
    """Raised when no Neovim control socket can be discovered."""


class ChannelError(NvimError):
    """Raised when a ``nvim --server`` child process fails.

    ``stderr`` holds whatever the child wrote to standard error, collapsed
    to a single line.
    """

    def __init__(self, message: str, stderr: str = "") -> None:
        self.stderr = _one_line(stderr)
        detail = f"{message}, stderr: {self.stderr}" if self.stderr else message
        super().__init__(detail)


class SessionUnresponsiveError(ChannelError):
    """Raised when a channel call exceeds its timeout and is killed."""

    def __init__(self, socket_path: str, timeout: float) -> None:
        self.socket_path = socket_path
        self.timeout = timeout
        super().__init__(f"Neovim session at {socket_path} did not respond within {timeout:g}s")


class CommandValidationError(NvimError, ValueError):
    """Raised when a command is empty or whitespace only."""


class RemoteCommandError(NvimError):
    """Raised when Neovim accepted a command but reported it in ``v:errmsg``."""

    def __init__(self, errmsg: str) -> None:
        self.errmsg = errmsg.strip()
        super().__init__(f"vim error: {_one_line(self.errmsg)}")


def wrap_channel_error(context: str, exc: ChannelError) -> ChannelError:
    """Prefix a channel failure with what the caller was trying to do.

    Timeouts keep their own type so callers can still tell an unresponsive
    session apart from a failed call.
    """
    if isinstance(exc, SessionUnresponsiveError):
        return exc
    wrapped = ChannelError(f"{context}: {exc}")
    wrapped.stderr = exc.stderr
    return wrapped
