from __future__ import annotations

from dataclasses import dataclass

from crunch.components.cookie import Cookie


@dataclass(slots=True, frozen=True, eq=False)
class Swap:
    """Proposed exchange of two cookies. Order does not matter: Swap(a, b) == Swap(b, a)."""
    cookie_a: Cookie
    cookie_b: Cookie

    def is_adjacent(self) -> bool:
        a, b = self.cookie_a, self.cookie_b
        return (abs(a.column - b.column) == 1 and a.row == b.row) or (
            abs(a.row - b.row) == 1 and a.column == b.column
        )

    def reversed(self) -> "Swap":
        return Swap(self.cookie_b, self.cookie_a)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Swap):
            return NotImplemented
        return {self.cookie_a, self.cookie_b} == {other.cookie_a, other.cookie_b}

    def __hash__(self) -> int:
        return hash(frozenset((self.cookie_a, self.cookie_b)))

    def __str__(self) -> str:
        return f"swap {self.cookie_a} with {self.cookie_b}"
