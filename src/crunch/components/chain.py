from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from crunch.components.cookie import Cookie
from crunch.constants import CHAIN_BASE_SCORE, MIN_CHAIN_LENGTH

Position = Tuple[int, int]


class ChainType(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


def chain_score(length: int) -> int:
    """3 cookies score 60, 4 score 120, 5 score 180 and so on."""
    return CHAIN_BASE_SCORE * (length - MIN_CHAIN_LENGTH + 1)


@dataclass(slots=True, eq=False)
class Chain:
    """A maximal run of same-typed cookies.

    Equality and hashing use the orientation plus the first and last cell,
    captured at construction. Cookies keep moving after a chain is found
    (or are deleted), so the live cookie positions cannot be the key.

    score depends only on length and is set at construction.
    combo: the level's combo multiplier at the moment this chain was resolved.
    """
    chain_type: ChainType
    cookies: List[Cookie]
    combo: int = 0
    score: int = field(init=False)
    span: Tuple[Position, Position] = field(init=False)

    def __post_init__(self) -> None:
        if len(self.cookies) < MIN_CHAIN_LENGTH:
            raise ValueError(f"A chain needs at least {MIN_CHAIN_LENGTH} cookies, got {len(self.cookies)}")
        self.span = (self.cookies[0].position, self.cookies[-1].position)
        self.score = chain_score(len(self.cookies))

    @property
    def length(self) -> int:
        return len(self.cookies)

    @property
    def cells(self) -> List[Position]:
        (start_column, start_row), _ = self.span
        if self.chain_type is ChainType.HORIZONTAL:
            return [(start_column + offset, start_row) for offset in range(self.length)]
        return [(start_column, start_row + offset) for offset in range(self.length)]

    def first_cookie(self) -> Cookie:
        return self.cookies[0]

    def last_cookie(self) -> Cookie:
        return self.cookies[-1]

    def sort_key(self) -> Tuple[str, Position, Position]:
        return self.chain_type.value, self.span[0], self.span[1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chain):
            return NotImplemented
        return self.chain_type is other.chain_type and self.span == other.span

    def __hash__(self) -> int:
        return hash((self.chain_type, self.span))

    def __str__(self) -> str:
        return f"type:{self.chain_type.value} cookies:[{', '.join(str(c) for c in self.cookies)}]"
