import random
from typing import List

from esper import World

from crunch.constants import NUM_COLUMNS, NUM_ROWS
from crunch.events.bus import EventBus
from crunch.systems.level import LevelSystem, TileMask


def create_world(*, rng: random.Random | None = None) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())
    return world


def full_mask(columns: int = NUM_COLUMNS, rows: int = NUM_ROWS) -> List[List[int]]:
    """A mask with every cell playable."""
    return [[1] * columns for _ in range(rows)]


def create_level(
    event_bus: EventBus,
    tiles: TileMask,
    target_score: int,
    maximum_moves: int,
    *,
    rng: random.Random | None = None,
) -> LevelSystem:
    """Build a fresh world and a level on it. The board starts empty; call fill_initial()."""
    world = create_world(rng=rng)
    return LevelSystem(world, event_bus, tiles, target_score, maximum_moves)
