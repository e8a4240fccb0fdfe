"""Shared text helpers for the TypeScript emitter and the skeleton builder."""

from __future__ import annotations

import re

INDENT_UNIT = "    "

_LINE_BREAK = re.compile(r"\r\n|\n|\r")


def lower_first(name: str) -> str:
    """Lowercase the first character: `GetValues` -> `getValues`."""
    return (name[0].lower() + name[1:]) if name else name


def escape_string(value: str) -> str:
    """Escape a string for use in a double-quoted literal (without quotes)."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\t", "\\t")
        .replace("\r", "\\r")
        .replace("\f", "\\f")
        .replace("\v", "\\v")
        .replace("\x00", "\\x00")
    )


def split_lines(text: str) -> list[str]:
    """Split on any of CRLF, LF or CR."""
    return _LINE_BREAK.split(text)


def indent_lines(text: str, indent: str) -> str:
    """Prefix every line of `text` with `indent`. Empty text stays empty."""
    if not text:
        return ""
    return "\n".join(indent + line for line in split_lines(text))


class Emitter:
    """Line buffer for assembling rendered fragments.

    Unlike a cursor-based emitter there is no indentation state here: callers
    pass the prefix explicitly.
    """

    def __init__(self) -> None:
        self.parts: list[str] = []

    def write(self, text: str) -> None:
        self.parts.append(text)

    def line(self, text: str = "") -> None:
        self.parts.append(text + "\n")

    def output(self) -> str:
        return "".join(self.parts)
