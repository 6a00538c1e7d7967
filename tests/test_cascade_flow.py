import random

import pytest

from crunch.events.bus import EventBus, EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE
from crunch.systems.cascade import resolve_cascade
from crunch.world import create_level, full_mask

from helpers import has_match, seeded_level, tiles_without_cookies


@pytest.mark.parametrize("seed", range(8))
def test_turn_settles_with_full_board_and_fresh_swaps(seed):
    bus = EventBus()
    steps, completed = [], []
    bus.subscribe(EVENT_CASCADE_STEP, lambda sender, **k: steps.append(k['depth']))
    bus.subscribe(EVENT_CASCADE_COMPLETE, lambda sender, **k: completed.append(k))
    level = create_level(bus, full_mask(), 1000, 20, rng=random.Random(seed))
    level.fill_initial()
    level.reset_combo_multiplier()
    swap = sorted(level.possible_swaps, key=lambda s: (s.cookie_a.position, s.cookie_b.position))[0]
    assert level.is_legal(swap)
    level.apply_swap(swap)

    result = resolve_cascade(level)

    assert result.depth >= 1
    assert steps == list(range(1, result.depth + 1))
    assert completed == [{'depth': result.depth, 'score': result.score}]
    assert result.score == sum(chain.score for chain in result.chains)
    assert result.score >= 60
    assert level.combo_multiplier == 1 + len(result.chains)
    assert not has_match(level)
    assert tiles_without_cookies(level) == []
    assert result.possible_swaps == set(level.possible_swaps)


def test_cascade_without_matches_only_refreshes_swaps():
    bus = EventBus()
    completed = []
    bus.subscribe(EVENT_CASCADE_COMPLETE, lambda sender, **k: completed.append(k))
    level = seeded_level(["ABA", "CAD"], bus=bus)
    result = resolve_cascade(level)
    assert result.steps == []
    assert result.score == 0
    assert completed == []
    assert len(result.possible_swaps) >= 1


def test_strip_of_three_matches_then_refills():
    level = seeded_level(["AAA"], seed=4)
    result = resolve_cascade(level)
    assert result.steps[0].score == 60
    assert result.steps[0].fallen == []
    assert [len(column) for column in result.steps[0].topped_up] == [1, 1, 1]
    assert tiles_without_cookies(level) == []
