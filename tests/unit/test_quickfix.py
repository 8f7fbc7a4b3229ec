"""Tests for the quickfix list serializer."""

from __future__ import annotations

import pytest

from nvim_mcp.client.quickfix import (
    escape_vim_string,
    quickfix_item_to_vim_dict,
    quickfix_items_to_vim_list,
    setqflist_command,
)
from nvim_mcp.models.quickfix import QuickfixItem


def _item(**kwargs) -> QuickfixItem:
    base = {"filename": "main.go", "line": 1, "text": "msg"}
    base.update(kwargs)
    return QuickfixItem(**base)


class TestEscape:
    def test_quote_doubled(self) -> None:
        assert escape_vim_string("it's.go") == "it''s.go"

    def test_every_quote_doubled(self) -> None:
        assert escape_vim_string("'a''b'") == "''a''''b''"

    @pytest.mark.parametrize("value", ['say "hi"', "back\\slash", "tab\there", "new\nline", "|bar"])
    def test_other_characters_untouched(self, value: str) -> None:
        assert escape_vim_string(value) == value


class TestItemToDict:
    def test_full_item_key_order(self) -> None:
        item = _item(filename="a.py", line=10, column=4, text="bad", type="E")
        assert quickfix_item_to_vim_dict(item) == (
            "{'filename': 'a.py', 'lnum': 10, 'col': 4, 'text': 'bad', 'type': 'E'}"
        )

    def test_minimal_item(self) -> None:
        assert quickfix_item_to_vim_dict(_item()) == (
            "{'filename': 'main.go', 'lnum': 1, 'text': 'msg'}"
        )

    @pytest.mark.parametrize("column", [0, -1, -20])
    def test_non_positive_column_omitted(self, column: int) -> None:
        assert "'col'" not in quickfix_item_to_vim_dict(_item(column=column))

    def test_positive_column_kept(self) -> None:
        assert "'col': 1," in quickfix_item_to_vim_dict(_item(column=1))

    def test_empty_type_omitted(self) -> None:
        assert "'type'" not in quickfix_item_to_vim_dict(_item(type=""))

    @pytest.mark.parametrize("kind", ["E", "W", "I"])
    def test_type_kept(self, kind: str) -> None:
        assert quickfix_item_to_vim_dict(_item(type=kind)).endswith(f"'type': '{kind}'}}")

    def test_filename_and_text_escaped(self) -> None:
        result = quickfix_item_to_vim_dict(_item(filename="it's.go", text="can't parse"))
        assert "'filename': 'it''s.go'" in result
        assert "'text': 'can''t parse'" in result


class TestItemsToList:
    def test_empty(self) -> None:
        assert quickfix_items_to_vim_list([]) == "[]"

    def test_one_dict_per_item_in_order(self) -> None:
        items = [_item(line=n, text=f"t{n}") for n in (5, 1, 3)]
        result = quickfix_items_to_vim_list(items)
        assert result.startswith("[{") and result.endswith("}]")
        assert result.count("{") == 3
        assert result.index("'lnum': 5") < result.index("'lnum': 1") < result.index("'lnum': 3")

    def test_duplicates_preserved(self) -> None:
        item = _item()
        result = quickfix_items_to_vim_list([item, item])
        assert result == "[{0}, {0}]".format("{'filename': 'main.go', 'lnum': 1, 'text': 'msg'}")

    def test_setqflist_command(self) -> None:
        assert setqflist_command([_item()]) == (
            "call setqflist([{'filename': 'main.go', 'lnum': 1, 'text': 'msg'}])"
        )
