from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple


class CookieType(IntEnum):
    # UNKNOWN is a sentinel for "no previous type" and is never spawned.
    UNKNOWN = 0
    CROISSANT = 1
    CUPCAKE = 2
    DANISH = 3
    DONUT = 4
    MACAROON = 5
    SUGAR_COOKIE = 6

    @classmethod
    def spawnable(cls) -> List["CookieType"]:
        return [member for member in cls if member is not cls.UNKNOWN]

    @classmethod
    def random(cls, rng: random.Random | None = None) -> "CookieType":
        return (rng or random).choice(cls.spawnable())

    @property
    def sprite_name(self) -> str:
        if self is CookieType.UNKNOWN:
            raise ValueError("UNKNOWN cookie type has no sprite")
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def highlighted_sprite_name(self) -> str:
        return f"{self.sprite_name}-Highlighted"


@dataclass(slots=True, eq=False)
class Cookie:
    """A typed piece on the board.

    Identity is the owning entity id: column/row change whenever the cookie
    is swapped or falls, so they must not feed the hash.
    """
    entity: int
    column: int
    row: int
    cookie_type: CookieType

    @property
    def position(self) -> Tuple[int, int]:
        return self.column, self.row

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cookie):
            return NotImplemented
        return self.entity == other.entity

    def __hash__(self) -> int:
        return hash(self.entity)

    def __str__(self) -> str:
        return f"type:{self.cookie_type.name} square:({self.column},{self.row})"
