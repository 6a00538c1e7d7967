from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Set

from crunch.components.chain import Chain
from crunch.components.cookie import Cookie
from crunch.components.swap import Swap
from crunch.events.bus import EVENT_CASCADE_COMPLETE, EVENT_CASCADE_STEP
from crunch.systems.level import LevelSystem

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CascadeStep:
    depth: int
    chains: Set[Chain]
    fallen: List[List[Cookie]] = field(default_factory=list)
    topped_up: List[List[Cookie]] = field(default_factory=list)

    @property
    def score(self) -> int:
        return sum(chain.score for chain in self.chains)


@dataclass(slots=True)
class CascadeResult:
    steps: List[CascadeStep]
    possible_swaps: Set[Swap]

    @property
    def depth(self) -> int:
        return len(self.steps)

    @property
    def score(self) -> int:
        return sum(step.score for step in self.steps)

    @property
    def chains(self) -> List[Chain]:
        return [chain for step in self.steps for chain in step.chains]


def resolve_cascade(level: LevelSystem) -> CascadeResult:
    """Run remove/collapse/top-up until the board is stable, without animation.

    Meant for headless callers (tools, simulations, tests); an animated
    client drives the same primitives one step at a time. The combo
    multiplier is left alone: resetting it is the caller's turn boundary.
    """
    steps: List[CascadeStep] = []
    while True:
        chains = level.resolve_matches()
        if not chains:
            break
        step = CascadeStep(depth=len(steps) + 1, chains=chains)
        level.event_bus.emit(EVENT_CASCADE_STEP, depth=step.depth, chains=chains)
        step.fallen = level.collapse()
        step.topped_up = level.top_up()
        steps.append(step)
    possible_swaps = level.detect_possible_swaps()
    result = CascadeResult(steps=steps, possible_swaps=possible_swaps)
    if steps:
        logger.debug("cascade settled after %d steps for %d points", result.depth, result.score)
        level.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=result.depth, score=result.score)
    return result
