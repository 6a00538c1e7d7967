from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence

from crunch.components.cookie import CookieType
from crunch.events.bus import EventBus
from crunch.systems.level import LevelSystem
from crunch.world import create_level

LETTER_TYPES: Dict[str, CookieType] = {
    'A': CookieType.CROISSANT,
    'B': CookieType.CUPCAKE,
    'C': CookieType.DANISH,
    'D': CookieType.DONUT,
    'E': CookieType.MACAROON,
    'F': CookieType.SUGAR_COOKIE,
}


def seeded_level(layout: Sequence[str], *, bus: EventBus | None = None, seed: int = 0) -> LevelSystem:
    """Build a level from rows of letters, top row first.

    Letters are cookie types, '.' is an empty tile and ' ' is a cell without a tile.
    Rows are written without separators, e.g. ["AAB", "CDE"].
    """
    mask = [[0 if ch == ' ' else 1 for ch in line] for line in layout]
    level = create_level(bus or EventBus(), mask, target_score=1000, maximum_moves=20, rng=random.Random(seed))
    rows = len(layout)
    for mask_row, line in enumerate(layout):
        for column, ch in enumerate(line):
            if ch in LETTER_TYPES:
                level.place_cookie(column, rows - mask_row - 1, LETTER_TYPES[ch])
    return level


def type_grid(level: LevelSystem) -> List[List[Optional[CookieType]]]:
    """Snapshot of cookie types indexed [row][column], row 0 at the bottom."""
    grid: List[List[Optional[CookieType]]] = []
    for row in range(level.rows):
        line: List[Optional[CookieType]] = []
        for column in range(level.columns):
            cookie = level.cookie_at(column, row)
            line.append(cookie.cookie_type if cookie is not None else None)
        grid.append(line)
    return grid


def has_match(level: LevelSystem) -> bool:
    grid = type_grid(level)
    for row in range(level.rows):
        for column in range(level.columns):
            value = grid[row][column]
            if value is None:
                continue
            if column + 2 < level.columns and grid[row][column + 1] == value and grid[row][column + 2] == value:
                return True
            if row + 2 < level.rows and grid[row + 1][column] == value and grid[row + 2][column] == value:
                return True
    return False


def tiles_without_cookies(level: LevelSystem) -> List[tuple[int, int]]:
    return [
        (column, row)
        for row in range(level.rows)
        for column in range(level.columns)
        if level.tile_at(column, row) is not None and level.cookie_at(column, row) is None
    ]
