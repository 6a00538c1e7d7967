import random

import pytest

from crunch.components.cookie import CookieType
from crunch.events.bus import EventBus, EVENT_COOKIES_FELL, EVENT_COOKIES_TOPPED_UP
from crunch.world import create_level, full_mask

from helpers import seeded_level, tiles_without_cookies


def test_collapse_moves_nearest_cookie_down():
    bus = EventBus()
    fell = []
    bus.subscribe(EVENT_COOKIES_FELL, lambda sender, **k: fell.append(k['columns']))
    level = seeded_level([
        "BC",
        "..",
        "D.",
        ".E",
    ], bus=bus)
    b, c, d, e = (level.cookie_at(0, 3), level.cookie_at(1, 3), level.cookie_at(0, 1), level.cookie_at(1, 0))
    columns = level.collapse()
    assert columns == [[d, b], [c]]
    assert d.position == (0, 0) and b.position == (0, 1)
    assert e.position == (1, 0) and c.position == (1, 1)
    assert level.cookie_at(0, 3) is None and level.cookie_at(1, 3) is None
    assert fell == [columns]


def test_collapse_skips_cells_without_tiles():
    level = seeded_level([
        "A",
        " ",
        ".",
    ])
    cookie = level.cookie_at(0, 2)
    assert level.collapse() == [[cookie]]
    assert cookie.position == (0, 0)
    assert level.tile_at(0, 1) is None and level.cookie_at(0, 1) is None


def test_collapse_with_nothing_to_do():
    level = seeded_level(["AB", "CD"])
    assert level.collapse() == []


def test_top_up_fills_every_empty_tile_top_down():
    bus = EventBus()
    topped = []
    bus.subscribe(EVENT_COOKIES_TOPPED_UP, lambda sender, **k: topped.append(k['columns']))
    level = seeded_level([
        ". .",
        "...",
        "A.B",
    ], bus=bus)
    columns = level.top_up()
    assert tiles_without_cookies(level) == []
    assert [[c.position for c in column] for column in columns] == [
        [(0, 2), (0, 1)],
        [(1, 1), (1, 0)],
        [(2, 2), (2, 1)],
    ]
    created = [cookie for column in columns for cookie in column]
    for previous, current in zip(created, created[1:]):
        assert previous.cookie_type != current.cookie_type
    assert all(cookie.cookie_type is not CookieType.UNKNOWN for cookie in created)
    assert topped == [columns]


def test_top_up_on_full_board_creates_nothing():
    level = seeded_level(["AB", "BA"])
    assert level.top_up() == []


@pytest.mark.parametrize("seed", range(8))
def test_resolve_collapse_top_up_leaves_no_gaps(seed):
    level = create_level(EventBus(), full_mask(6, 6), 1000, 20, rng=random.Random(seed))
    level.fill_initial()
    swap = sorted(level.possible_swaps, key=lambda s: (s.cookie_a.position, s.cookie_b.position))[0]
    level.apply_swap(swap)
    assert level.resolve_matches()
    level.collapse()
    columns = level.top_up()
    assert columns
    assert tiles_without_cookies(level) == []
    for column in columns:
        for upper, lower in zip(column, column[1:]):
            assert upper.cookie_type != lower.cookie_type
            assert upper.row > lower.row
    # every cookie sits on a tile and owns its slot
    for cookie in level.all_cookies():
        assert level.tile_at(cookie.column, cookie.row) is not None
        assert level.cookie_at(cookie.column, cookie.row) is cookie
