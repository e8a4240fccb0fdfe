"""Collected diagnostics for rendering and skeleton building."""

from __future__ import annotations


class Diagnostic:
    """A single reported problem."""

    def __init__(self, category: str, message: str, is_warning: bool):
        self.category: str = category
        self.message: str = message
        self.is_warning: bool = is_warning

    def __str__(self) -> str:
        level = "warning" if self.is_warning else "error"
        return level + ": [" + self.category + "] " + self.message

    def __repr__(self) -> str:
        return "Diagnostic(" + repr(self.category) + ", " + repr(self.message) + ")"


class Diagnostics:
    """Ordered list of diagnostics from one render or build."""

    def __init__(self) -> None:
        self.items: list[Diagnostic] = []

    def add_error(self, category: str, message: str) -> None:
        self.items.append(Diagnostic(category, message, False))

    def add_warning(self, category: str, message: str) -> None:
        self.items.append(Diagnostic(category, message, True))

    def extend(self, other: Diagnostics) -> None:
        self.items.extend(other.items)

    def errors(self) -> list[Diagnostic]:
        return [d for d in self.items if not d.is_warning]

    def warnings(self) -> list[Diagnostic]:
        return [d for d in self.items if d.is_warning]

    def ok(self) -> bool:
        return len(self.errors()) == 0

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
