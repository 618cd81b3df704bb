"""Rendering and parsing of field value files.

A value file holds bash declaration lines, one per map key or sequence
index, or a single line for scalars. Every line can be executed on its own
to re-declare the value it carries::

    declare -A room101_beds[$'king']=$'1'
    declare -a room101_bednum[0]=$'a'
    declare -- room101_occupied=true
    declare -i room101_mask=0x1f

Strings are written with ANSI-C quoting so that each value stays on one
line whatever characters it holds.
"""

from __future__ import annotations

import math
import re
from typing import Any

from typed_records.types import TypeTag

_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}

_UNESCAPES = {
    "\\": "\\",
    "'": "'",
    "n": "\n",
    "t": "\t",
    "r": "\r",
}

_DECLARE_RE = re.compile(r"declare (-A|-a|--|-i) ([A-Za-z0-9_]+)")
_INDEX_RE = re.compile(r"\d+")


def variable_name(instance_name: str, field_name: str) -> str:
    """Return the shell variable name a field's value is declared under."""
    return f"{instance_name}_{field_name}"


def ansi_quote(text: str) -> str:
    """Quote text as a single-line bash $'...' word."""
    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return "$'" + "".join(out) + "'"


def read_ansi_quoted(line: str, pos: int) -> tuple[str, int]:
    """Read a $'...' word starting at pos.

    Returns:
        Tuple of (decoded text, position after the closing quote).

    Raises:
        ValueError: If no well-formed quoted word starts at pos.
    """
    if not line.startswith("$'", pos):
        raise ValueError(f"Expected $'...' at column {pos}")
    pos += 2
    out = []
    while pos < len(line):
        ch = line[pos]
        if ch == "'":
            return "".join(out), pos + 1
        if ch == "\\":
            nxt = line[pos + 1 : pos + 2]
            if nxt in _UNESCAPES:
                out.append(_UNESCAPES[nxt])
                pos += 2
            elif nxt == "x":
                digits = line[pos + 2 : pos + 4]
                if len(digits) != 2:
                    raise ValueError(f"Truncated \\x escape at column {pos}")
                out.append(chr(int(digits, 16)))
                pos += 4
            else:
                raise ValueError(f"Unknown escape '\\{nxt}' at column {pos}")
        else:
            out.append(ch)
            pos += 1
    raise ValueError("Unterminated $'...' string")


def render_value(tag: TypeTag, var: str, value: Any) -> str:
    """Render a working value as the text of a value file.

    The value is assumed to have passed the tag's validator.
    """
    flag = tag.declare_flag
    if tag is TypeTag.MAP:
        lines = [
            f"declare {flag} {var}[{ansi_quote(k)}]={ansi_quote(v)}"
            for k, v in value.items()
        ]
    elif tag is TypeTag.SEQUENCE:
        lines = [
            f"declare {flag} {var}[{i}]={ansi_quote(v)}"
            for i, v in enumerate(value)
        ]
    elif tag is TypeTag.BOOL:
        lines = [f"declare {flag} {var}={'true' if value else 'false'}"]
    elif tag is TypeTag.FLOAT:
        lines = [f"declare {flag} {var}={float(value)!r}"]
    elif tag is TypeTag.HEXINT:
        lines = [f"declare {flag} {var}=0x{int(value):x}"]
    elif tag is TypeTag.INT:
        lines = [f"declare {flag} {var}={int(value)}"]
    else:
        lines = [f"declare {flag} {var}={ansi_quote(value)}"]
    return "".join(line + "\n" for line in lines)


def _split_line(line: str, tag: TypeTag, var: str) -> tuple[str | None, str]:
    """Split one declaration line into (subscript, raw value)."""
    m = _DECLARE_RE.match(line)
    if m is None:
        raise ValueError(f"Not a declaration: {line!r}")
    flag, name = m.groups()
    if flag != tag.declare_flag:
        raise ValueError(f"Expected 'declare {tag.declare_flag}', got 'declare {flag}'")
    if name != var:
        raise ValueError(f"Expected variable '{var}', got '{name}'")
    pos = m.end()

    subscript = None
    if tag is TypeTag.MAP:
        if line[pos : pos + 1] != "[":
            raise ValueError(f"Missing key subscript: {line!r}")
        subscript, pos = read_ansi_quoted(line, pos + 1)
        if line[pos : pos + 1] != "]":
            raise ValueError(f"Unterminated key subscript: {line!r}")
        pos += 1
    elif tag is TypeTag.SEQUENCE:
        m_index = _INDEX_RE.match(line, pos + 1) if line[pos : pos + 1] == "[" else None
        if m_index is None or line[m_index.end() : m_index.end() + 1] != "]":
            raise ValueError(f"Missing index subscript: {line!r}")
        subscript = m_index.group()
        pos = m_index.end() + 1

    if line[pos : pos + 1] != "=":
        raise ValueError(f"Missing '=': {line!r}")
    return subscript, line[pos + 1 :]


def _parse_quoted(raw: str) -> str:
    text, end = read_ansi_quoted(raw, 0)
    if end != len(raw):
        raise ValueError(f"Trailing text after value: {raw[end:]!r}")
    return text


def parse_value(tag: TypeTag, var: str, text: str) -> Any:
    """Parse value file text back into a working value.

    Lines are applied in order, so a repeated key or index keeps its last
    value, as re-executing the file would.

    Raises:
        ValueError: If the text is not a well-formed value file for the tag.
    """
    lines = [line for line in text.split("\n") if line.strip()]

    if tag is TypeTag.MAP:
        result: dict[str, str] = {}
        for line in lines:
            key, raw = _split_line(line, tag, var)
            result[key] = _parse_quoted(raw)  # type: ignore[index]
        return result

    if tag is TypeTag.SEQUENCE:
        items: dict[int, str] = {}
        for line in lines:
            index, raw = _split_line(line, tag, var)
            items[int(index)] = _parse_quoted(raw)  # type: ignore[arg-type]
        return [items[i] for i in sorted(items)]

    if len(lines) != 1:
        raise ValueError(f"Expected one declaration for '{var}', found {len(lines)}")
    _, raw = _split_line(lines[0], tag, var)

    if tag is TypeTag.BOOL:
        if raw not in ("true", "false"):
            raise ValueError(f"Not a boolean: {raw!r}")
        return raw == "true"
    if tag is TypeTag.FLOAT:
        value = float(raw)
        if not math.isfinite(value):
            raise ValueError(f"Not a finite float: {raw!r}")
        return value
    if tag is TypeTag.HEXINT:
        return int(raw, 16)
    if tag is TypeTag.INT:
        return int(raw, 10)
    return _parse_quoted(raw)
