"""FastMCP server exposing a live Neovim session as MCP tools.

Run via::

    nvim-mcp                        # reads .env (default: stdio)
    MCP_TRANSPORT=http nvim-mcp     # streamable HTTP on port 9000

The server talks to the Neovim instance found through ``$NVIM`` or
``$XDG_CACHE_HOME/nvim/<project>.sock``.  If none is running yet, tools
retry discovery on every call until one appears.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Callable
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from nvim_mcp import __version__
from nvim_mcp.client.channel import SubprocessChannel
from nvim_mcp.client.errors import ChannelError, NvimError
from nvim_mcp.models.quickfix import QuickfixItem
from nvim_mcp.service.toolbox import NvimToolbox
from nvim_mcp.settings import Settings

# ---------------------------------------------------------------------------
# Server + shared state
# ---------------------------------------------------------------------------

logger = logging.getLogger("nvim_mcp.mcp")

INSTRUCTIONS = (
    "This MCP server provides access to the user's live Neovim editing session. "
    "Use get_buffer_context first to see what code the user is currently working on, "
    "get_diagnostics to understand any issues, and populate_quickfix to send your "
    "analysis results back to their editor."
)

mcp = FastMCP("neovim-mcp", instructions=INSTRUCTIONS)
_toolbox: NvimToolbox | None = None


def _require_toolbox() -> NvimToolbox:
    if _toolbox is None:
        raise ToolError("Neovim toolbox not initialised")
    return _toolbox


async def _offload(toolbox: NvimToolbox, call: Callable[..., str], *args: Any) -> str:
    """Run a blocking toolbox call in a worker thread.

    If the request is cancelled while waiting, the channel calls it started
    are killed so the worker thread returns promptly.
    """
    try:
        return await asyncio.to_thread(call, *args)
    except asyncio.CancelledError:
        killed = toolbox.cancel()
        logger.info("Request cancelled; killed %d in-flight channel call(s)", killed)
        raise


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool
async def populate_quickfix(items: list[QuickfixItem]) -> str:
    """Populate Neovim's quickfix list with code analysis results or errors.

    The list replaces the current quickfix list and the quickfix window is
    opened.  Items keep the order given.

    Args:
        items: Quickfix entries: filename, 1-based line, optional column,
            message text, and optional type (E, W or I).
    """
    toolbox = _require_toolbox()
    try:
        return await _offload(toolbox, toolbox.populate_quickfix, items)
    except NvimError as exc:
        raise ToolError(f"failed to set quickfix list: {exc}") from exc


@mcp.tool
async def execute_command(command: str) -> str:
    """Execute a Vim command in the connected Neovim instance.

    Returns the command's output, or a confirmation if it printed nothing.
    A leading ``:`` is optional.

    Args:
        command: Vim command to execute (e.g. 'set number', 'vsplit', 'wq').
    """
    toolbox = _require_toolbox()
    try:
        return await _offload(toolbox, toolbox.execute_command, command)
    except ChannelError as exc:
        # Already carries the failing step, e.g. "failed to execute command: ...".
        logger.warning("execute_command failed: %s", exc)
        raise ToolError(str(exc)) from exc
    except NvimError as exc:
        logger.warning("execute_command failed: %s", exc)
        raise ToolError(f"failed to execute command: {exc}") from exc


@mcp.tool
async def get_buffer_context() -> str:
    """Get what the user is currently looking at in Neovim.

    Returns ``LABEL:value`` lines: FILE_PATH, CURSOR (line:col), MODE, then
    either CURRENT_LINE, or VISUAL_SELECTION and SELECTED_TEXT when a visual
    mode is active.  SELECTED_TEXT covers whole lines.
    """
    toolbox = _require_toolbox()
    try:
        return await _offload(toolbox, toolbox.get_buffer_context)
    except NvimError as exc:
        raise ToolError(str(exc)) from exc


@mcp.tool
async def get_diagnostics() -> str:
    """Get diagnostics (LSP errors, warnings, ...) for the current buffer.

    Returns ``NO_DIAGNOSTICS`` or one ``DIAGNOSTIC:<line>:<col>:<severity>:<message>``
    line per diagnostic, with severity one of ERROR, WARN, INFO, HINT.
    """
    toolbox = _require_toolbox()
    try:
        return await _offload(toolbox, toolbox.get_diagnostics)
    except NvimError as exc:
        raise ToolError(str(exc)) from exc


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    # stdout carries the stdio transport; logs go to stderr.
    logging.basicConfig(level=settings.log_level.upper(), stream=sys.stderr)
    logger.info(
        "Neovim MCP Server v%s starting (transport=%s)",
        __version__,
        settings.mcp_transport,
    )

    channel = SubprocessChannel(
        executable=settings.nvim_executable,
        timeout=settings.channel_timeout_seconds,
    )
    global _toolbox  # noqa: PLW0603
    _toolbox = NvimToolbox(channel)

    try:
        if settings.mcp_transport == "stdio":
            mcp.run(transport="stdio")
        else:
            mcp.run(
                transport=settings.mcp_transport,
                host=settings.mcp_server_host,
                port=settings.mcp_server_port,
                log_level=settings.log_level.lower(),
            )
    finally:
        channel.cancel()


if __name__ == "__main__":
    main()
