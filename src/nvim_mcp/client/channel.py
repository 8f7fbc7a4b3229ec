"""Subprocess transport to a Neovim session via ``nvim --server``.

Every call spawns one ``nvim --server <socket> --remote-expr|--remote-send``
child process and waits for it.  There is no connection reuse and no retry:
Neovim commands are not guaranteed idempotent.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import Protocol

from nvim_mcp.client.errors import ChannelError, SessionUnresponsiveError

logger = logging.getLogger("nvim_mcp.channel")

DEFAULT_TIMEOUT_SECONDS = 10.0


class Channel(Protocol):
    """The two primitives everything else is built from, plus cancellation."""

    def send_keys(self, socket_path: str, keys: str) -> None: ...

    def eval_expr(self, socket_path: str, expr: str) -> str: ...

    def cancel(self) -> int: ...


class SubprocessChannel:
    """:class:`Channel` backed by the ``nvim`` remote client.

    Thread-safe.  :meth:`cancel` kills every child that is still running,
    which makes the blocked caller fail with :class:`ChannelError`.
    """

    def __init__(
        self, executable: str = "nvim", timeout: float = DEFAULT_TIMEOUT_SECONDS
    ) -> None:
        self._executable = executable
        self._timeout = timeout
        self._lock = threading.Lock()
        self._active: set[subprocess.Popen[str]] = set()
        # Bumped by cancel(); a call spawned across a bump is cancelled too.
        self._generation = 0

    def send_keys(self, socket_path: str, keys: str) -> None:
        """Send raw keystrokes, as if typed by the user."""
        self._run(socket_path, "--remote-send", keys)

    def eval_expr(self, socket_path: str, expr: str) -> str:
        """Evaluate a Vimscript expression and return its whitespace-trimmed value."""
        return self._run(socket_path, "--remote-expr", expr).strip()

    def cancel(self) -> int:
        """Kill all in-flight child processes.  Returns how many were killed."""
        with self._lock:
            self._generation += 1
            procs = list(self._active)
        for proc in procs:
            proc.kill()
        if procs:
            logger.info("Cancelled %d in-flight channel call(s)", len(procs))
        return len(procs)

    def _run(self, socket_path: str, flag: str, payload: str) -> str:
        argv = [self._executable, "--server", socket_path, flag, payload]
        logger.debug("channel %s (%d chars) -> %s", flag, len(payload), socket_path)

        with self._lock:
            generation = self._generation
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as exc:
            raise ChannelError(f"failed to start {self._executable}: {exc}") from exc

        with self._lock:
            cancelled = generation != self._generation
            if not cancelled:
                self._active.add(proc)
        if cancelled:
            proc.kill()
            proc.communicate()
            raise ChannelError(f"nvim {flag} cancelled")
        try:
            stdout, stderr = proc.communicate(timeout=self._timeout)
        except subprocess.TimeoutExpired as exc:
            proc.kill()
            proc.communicate()
            logger.warning("channel call to %s timed out after %gs", socket_path, self._timeout)
            raise SessionUnresponsiveError(socket_path, self._timeout) from exc
        except BaseException:
            # Interrupted by the caller: never leave the child behind.
            proc.kill()
            proc.wait()
            raise
        finally:
            with self._lock:
                self._active.discard(proc)

        if proc.returncode != 0:
            raise ChannelError(
                f"nvim {flag} exited with status {proc.returncode}", stderr=stderr
            )
        return stdout
