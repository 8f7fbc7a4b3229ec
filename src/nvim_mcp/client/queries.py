"""Fixed expression templates sent to Neovim over ``--remote-expr``.

Each template is sent as literal text; its output shape is documented on the
constant.  ``QUERY_VERSION`` is bumped whenever a template's output shape
changes.

The Lua snippets are wrapped in ``luaeval('...')``, so they must never
contain a single quote.  Vim single-quoted strings keep backslashes as-is,
so the ``\\n`` escapes below reach Lua unchanged and join with real newlines.
"""

from __future__ import annotations

from nvim_mcp.models.context import VISUAL_MODE_PREFIXES, is_visual_mode  # noqa: F401

QUERY_VERSION = 1

# Resets the session's last-error variable; evaluates to "".
CLEAR_ERRMSG = "execute('let v:errmsg = \"\"')"

# Last error message reported by the session, or "".
READ_ERRMSG = "v:errmsg"

# Captured output of an Ex command; ``{command}`` must already be escaped.
EXECUTE_TEMPLATE = "execute('{command}')"

# Absolute path of the current buffer, "" for unnamed buffers.
FILE_PATH = "expand('%:p')"

# "<line>:<col>", both 1-based.
CURSOR_POSITION = "printf('%d:%d', line('.'), col('.'))"

# Raw mode() string: "n", "i", "v", "V", "\x16", "no", ...
MODE = "mode()"

# Text of the cursor line.
CURRENT_LINE = "getline('.')"

# "<anchor line>:<anchor col> to <cursor line>:<cursor col>", unordered.
VISUAL_SELECTION = (
    "printf('%d:%d to %d:%d', "
    "getpos('v')[1], getpos('v')[2], getpos('.')[1], getpos('.')[2])"
)

# Whole lines from the earlier of anchor/cursor to the later one, inclusive,
# joined with "\n".  Columns only decide ordering; no partial-line slicing.
SELECTED_TEXT = """luaeval('(function()
    local start_pos = vim.fn.getpos("v")
    local end_pos = vim.fn.getpos(".")
    local start_line, start_col = start_pos[2], start_pos[3]
    local end_line, end_col = end_pos[2], end_pos[3]
    if start_line > end_line or (start_line == end_line and start_col > end_col) then
        start_line, end_line = end_line, start_line
        start_col, end_col = end_col, start_col
    end
    local lines = vim.api.nvim_buf_get_lines(0, start_line - 1, end_line, false)
    return table.concat(lines, "\\n")
end)()')"""

NO_DIAGNOSTICS = "NO_DIAGNOSTICS"

# Either NO_DIAGNOSTICS, or one "DIAGNOSTIC:<line>:<col>:<SEVERITY>:<message>"
# line per diagnostic of the current buffer (1-based positions).
DIAGNOSTICS = """luaeval('(function()
    local diagnostics = vim.diagnostic.get(0)
    if #diagnostics == 0 then
        return "NO_DIAGNOSTICS"
    end
    local severity_map = {"ERROR", "WARN", "INFO", "HINT"}
    local result = {}
    for _, diag in ipairs(diagnostics) do
        local severity = severity_map[diag.severity] or "UNKNOWN"
        table.insert(result, "DIAGNOSTIC:" .. (diag.lnum + 1) .. ":" .. (diag.col + 1)
            .. ":" .. severity .. ":" .. (diag.message or ""))
    end
    return table.concat(result, "\\n")
end)()')"""


def execute_expr(escaped_command: str) -> str:
    return EXECUTE_TEMPLATE.format(command=escaped_command)
