"""Shared test fixtures for the Neovim MCP server."""

from __future__ import annotations

from collections.abc import Mapping

import pytest

from nvim_mcp.client.nvim import NvimClient

SOCKET = "/tmp/nvim-test/project.sock"

Response = str | BaseException | list[str | BaseException]


class FakeChannel:
    """Recording :class:`~nvim_mcp.client.channel.Channel` test double.

    ``responses`` maps an exact expression to what ``eval_expr`` returns;
    ``matching`` maps a substring of the expression instead (first key
    wins) and is consulted only when no exact key matches.  An exception
    value is raised; a list is consumed one entry per call, repeating its
    last entry.  Unmatched expressions evaluate to ``""``.
    """

    def __init__(
        self,
        responses: Mapping[str, Response] | None = None,
        matching: Mapping[str, Response] | None = None,
    ) -> None:
        self.responses: dict[str, Response] = dict(responses or {})
        self.matching: dict[str, Response] = dict(matching or {})
        self.calls: list[tuple[str, str, str]] = []
        self.cancelled = 0

    @property
    def exprs(self) -> list[str]:
        return [payload for kind, _, payload in self.calls if kind == "expr"]

    def send_keys(self, socket_path: str, keys: str) -> None:
        self.calls.append(("keys", socket_path, keys))
        self._respond(keys)

    def eval_expr(self, socket_path: str, expr: str) -> str:
        self.calls.append(("expr", socket_path, expr))
        return self._respond(expr)

    def cancel(self) -> int:
        self.cancelled += 1
        return 0

    def _respond(self, payload: str) -> str:
        if payload in self.responses:
            value = self.responses[payload]
        else:
            key = next((k for k in self.matching if k in payload), None)
            if key is None:
                return ""
            value = self.matching[key]
        if isinstance(value, list):
            value = value.pop(0) if len(value) > 1 else value[0]
        if isinstance(value, BaseException):
            raise value
        return value


@pytest.fixture
def fake_channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def client(fake_channel: FakeChannel) -> NvimClient:
    """NvimClient bound to a fake socket and the recording channel."""
    return NvimClient(SOCKET, fake_channel)
