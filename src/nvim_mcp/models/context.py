"""Snapshot of what the user is looking at in Neovim."""

from __future__ import annotations

from dataclasses import dataclass

# Mode prefixes of the visual family; "\x16" is blockwise visual (CTRL-V).
VISUAL_MODE_PREFIXES = ("v", "V", "\x16")


def is_visual_mode(mode: str) -> bool:
    return mode.startswith(VISUAL_MODE_PREFIXES)


@dataclass(frozen=True)
class BufferContext:
    """Labeled editor state, rendered as ``LABEL:value`` lines for an LLM.

    ``mode`` decides the shape: a visual mode carries the
    ``visual_selection`` / ``selected_text`` pair, any other mode carries
    ``current_line``.  Values are not escaped: a value containing a newline
    spills onto following lines.
    """

    file_path: str
    cursor: str
    mode: str
    current_line: str | None = None
    visual_selection: str | None = None
    selected_text: str | None = None

    def __post_init__(self) -> None:
        if is_visual_mode(self.mode):
            if self.current_line is not None:
                raise ValueError(f"visual mode {self.mode!r} excludes current_line")
            if self.visual_selection is None or self.selected_text is None:
                raise ValueError(f"visual mode {self.mode!r} requires selection fields")
        else:
            if self.current_line is None:
                raise ValueError(f"mode {self.mode!r} requires current_line")
            if self.visual_selection is not None or self.selected_text is not None:
                raise ValueError(f"mode {self.mode!r} excludes selection fields")

    def render(self) -> str:
        fields = [
            ("FILE_PATH", self.file_path),
            ("CURSOR", self.cursor),
            ("MODE", self.mode),
        ]
        if is_visual_mode(self.mode):
            fields.append(("VISUAL_SELECTION", self.visual_selection))
            fields.append(("SELECTED_TEXT", self.selected_text))
        else:
            fields.append(("CURRENT_LINE", self.current_line))
        return "".join(f"{label}:{value}\n" for label, value in fields)
