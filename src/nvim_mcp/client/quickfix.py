"""Serialize quickfix entries into a Vimscript list-of-dictionaries literal."""

from __future__ import annotations

from collections.abc import Iterable

from nvim_mcp.models.quickfix import QuickfixItem


def escape_vim_string(value: str) -> str:
    """Escape *value* for a single-quoted Vim string: ``'`` becomes ``''``."""
    return value.replace("'", "''")


def quickfix_item_to_vim_dict(item: QuickfixItem) -> str:
    parts = [
        f"'filename': '{escape_vim_string(item.filename)}'",
        f"'lnum': {item.line}",
    ]
    if item.column > 0:
        parts.append(f"'col': {item.column}")
    parts.append(f"'text': '{escape_vim_string(item.text)}'")
    if item.type:
        parts.append(f"'type': '{escape_vim_string(item.type)}'")
    return "{" + ", ".join(parts) + "}"


def quickfix_items_to_vim_list(items: Iterable[QuickfixItem]) -> str:
    """Build ``[{...}, {...}]`` for ``setqflist()``, preserving item order."""
    return "[" + ", ".join(quickfix_item_to_vim_dict(item) for item in items) + "]"


def setqflist_command(items: Iterable[QuickfixItem]) -> str:
    return f"call setqflist({quickfix_items_to_vim_list(items)})"
