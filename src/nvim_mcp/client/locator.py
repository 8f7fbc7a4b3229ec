"""Discover the control socket of the Neovim instance for this project."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from nvim_mcp.client.errors import SessionNotFoundError

logger = logging.getLogger("nvim_mcp.locator")


def user_cache_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the per-user cache root, honouring ``XDG_CACHE_HOME``."""
    env = os.environ if environ is None else environ
    if xdg := env.get("XDG_CACHE_HOME"):
        return Path(xdg)
    if sys.platform == "win32":
        if local := env.get("LOCALAPPDATA"):
            return Path(local)
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"
    return Path.home() / ".cache"


def project_socket_path(
    cwd: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Socket path a project-scoped Neovim listens on: ``<cache>/nvim/<dir>.sock``."""
    project = Path(os.getcwd() if cwd is None else cwd).name
    return user_cache_dir(environ) / "nvim" / f"{project}.sock"


def locate_socket(
    cwd: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Find the socket of the "current" Neovim instance.

    Checks, in order:

    1. ``$NVIM``, set when running inside a Neovim terminal.
    2. ``<cache>/nvim/<basename of cwd>.sock``.

    Each candidate is accepted only if it exists on disk.

    Raises :class:`SessionNotFoundError` if neither is present.
    """
    env = os.environ if environ is None else environ

    override = env.get("NVIM")
    if override and os.path.exists(override):
        logger.debug("Using $NVIM socket %s", override)
        return override

    candidate = project_socket_path(cwd, env)
    if candidate.exists():
        logger.debug("Using project socket %s", candidate)
        return str(candidate)

    raise SessionNotFoundError(
        f"no Neovim instance found for current directory (looked for {candidate})"
    )
