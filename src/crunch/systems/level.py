from __future__ import annotations

import logging
import random
from typing import FrozenSet, List, Optional, Sequence, Set

from esper import World

from crunch.components.board import Board
from crunch.components.chain import Chain
from crunch.components.cookie import Cookie, CookieType
from crunch.components.level_state import LevelState
from crunch.components.swap import Swap
from crunch.components.tile import Tile
from crunch.constants import MAX_FILL_ATTEMPTS
from crunch.events.bus import (
    EventBus,
    EVENT_COMBO_RESET,
    EVENT_COOKIES_CREATED,
    EVENT_COOKIES_FELL,
    EVENT_COOKIES_TOPPED_UP,
    EVENT_FILL_RETRY,
    EVENT_MATCHES_REMOVED,
    EVENT_POSSIBLE_SWAPS_DETECTED,
    EVENT_SWAP_INVALID,
    EVENT_SWAP_PERFORMED,
    EVENT_SWAP_REQUEST,
)
from crunch.systems import board_ops
from crunch.utils.grid2d import Grid2D

logger = logging.getLogger(__name__)

TileMask = Sequence[Sequence[int]]


class LevelSystem:
    """Rules for one board: filling, swapping, matching, gravity and refill.

    Cookies and tiles are esper entities; the two grids index them by cell.
    Every call returns immediately with the board in a consistent state.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        tiles: TileMask,
        target_score: int,
        maximum_moves: int,
    ):
        self.world = world
        self.event_bus = event_bus
        candidate_rng = getattr(world, "random", None)
        self.random = candidate_rng if isinstance(candidate_rng, random.Random) else random.Random()
        rows, columns = _mask_dimensions(tiles)
        self.level_entity = self.world.create_entity(
            Board(columns=columns, rows=rows),
            LevelState(target_score=target_score, maximum_moves=maximum_moves),
        )
        self.tiles: Grid2D[Tile] = Grid2D(columns, rows)
        self.cookies: Grid2D[Cookie] = Grid2D(columns, rows)
        self._possible_swaps: Set[Swap] = set()
        # Mask row 0 is the top of the board; grid row 0 is the bottom.
        for mask_row, values in enumerate(tiles):
            tile_row = rows - mask_row - 1
            for column, value in enumerate(values):
                if value:
                    tile = Tile(column=column, row=tile_row)
                    self.world.create_entity(tile)
                    self.tiles.set(column, tile_row, tile)
        self.event_bus.subscribe(EVENT_SWAP_REQUEST, self.on_swap_request)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def columns(self) -> int:
        return self.tiles.columns

    @property
    def rows(self) -> int:
        return self.tiles.rows

    @property
    def state(self) -> LevelState:
        return self.world.component_for_entity(self.level_entity, LevelState)

    @property
    def target_score(self) -> int:
        return self.state.target_score

    @property
    def maximum_moves(self) -> int:
        return self.state.maximum_moves

    @property
    def combo_multiplier(self) -> int:
        return self.state.combo_multiplier

    @property
    def possible_swaps(self) -> FrozenSet[Swap]:
        return frozenset(self._possible_swaps)

    def cookie_at(self, column: int, row: int) -> Optional[Cookie]:
        return self.cookies.get(column, row)

    def tile_at(self, column: int, row: int) -> Optional[Tile]:
        return self.tiles.get(column, row)

    def all_cookies(self) -> List[Cookie]:
        return [cookie for _, _, cookie in self.cookies.cells() if cookie is not None]

    def format_board(self) -> str:
        """Text view, top row first: type number per cookie, '.' for an empty tile."""
        lines: List[str] = []
        for row in reversed(range(self.rows)):
            cells: List[str] = []
            for column in range(self.columns):
                cookie = self.cookies.get(column, row)
                if cookie is not None:
                    cells.append(str(int(cookie.cookie_type)))
                elif self.tiles.get(column, row) is not None:
                    cells.append(".")
                else:
                    cells.append(" ")
            lines.append(" ".join(cells))
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------
    def place_cookie(self, column: int, row: int, cookie_type: CookieType) -> Cookie:
        """Put a cookie of the given type on an empty tile, bypassing the fill rules."""
        if self.tiles.get(column, row) is None:
            raise ValueError(f"No tile at ({column}, {row})")
        if self.cookies.get(column, row) is not None:
            raise ValueError(f"Cell ({column}, {row}) already holds a cookie")
        if cookie_type is CookieType.UNKNOWN:
            raise ValueError("Cannot place a cookie of UNKNOWN type")
        return self._spawn_cookie(column, row, cookie_type)

    def fill_initial(self) -> Set[Cookie]:
        """Replace every cookie with a fresh layout that has no chains and at least one legal swap."""
        for attempt in range(1, MAX_FILL_ATTEMPTS + 1):
            created = self._create_initial_cookies()
            if self.detect_possible_swaps():
                self.event_bus.emit(EVENT_COOKIES_CREATED, cookies=created, reason="fill")
                return created
            logger.debug("fill attempt %d produced no legal swaps, retrying", attempt)
            self.event_bus.emit(EVENT_FILL_RETRY, attempt=attempt)
        raise RuntimeError("Unable to fill board without matches and valid swaps")

    def _create_initial_cookies(self) -> Set[Cookie]:
        self._clear_cookies()
        created: Set[Cookie] = set()
        choices = CookieType.spawnable()
        for column, row, tile in self.tiles.cells():
            if tile is None:
                continue
            available = [
                cookie_type
                for cookie_type in choices
                if not board_ops.completes_chain(self.cookies, column, row, cookie_type)
            ]
            created.add(self._spawn_cookie(column, row, self.random.choice(available)))
        return created

    def top_up(self) -> List[List[Cookie]]:
        """Spawn cookies in every empty tile, scanning each column from the top.

        Consecutive new cookies never share a type; the previous type carries
        over from one column to the next. Returns the new cookies per column,
        top to bottom, leaving out columns that needed none.
        """
        columns: List[List[Cookie]] = []
        choices = CookieType.spawnable()
        cookie_type = CookieType.UNKNOWN
        for column in range(self.columns):
            created: List[Cookie] = []
            for row in reversed(range(self.rows)):
                if self.tiles.get(column, row) is None or self.cookies.get(column, row) is not None:
                    continue
                cookie_type = self.random.choice([t for t in choices if t != cookie_type])
                created.append(self._spawn_cookie(column, row, cookie_type))
            if created:
                columns.append(created)
        if columns:
            self.event_bus.emit(EVENT_COOKIES_TOPPED_UP, columns=columns)
        return columns

    def _spawn_cookie(self, column: int, row: int, cookie_type: CookieType) -> Cookie:
        entity = self.world.create_entity()
        cookie = Cookie(entity=entity, column=column, row=row, cookie_type=cookie_type)
        self.world.add_component(entity, cookie)
        self.cookies.set(column, row, cookie)
        return cookie

    def _remove_cookie(self, cookie: Cookie) -> None:
        # A cookie on a cross belongs to two chains; the second visit finds the slot empty.
        if self.cookies.get(cookie.column, cookie.row) is not cookie:
            return
        self.cookies.set(cookie.column, cookie.row, None)
        self.world.delete_entity(cookie.entity, immediate=True)

    def _clear_cookies(self) -> None:
        for cookie in self.all_cookies():
            self._remove_cookie(cookie)
        self._possible_swaps = set()

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------
    def detect_possible_swaps(self) -> Set[Swap]:
        self._possible_swaps = board_ops.find_possible_swaps(self.cookies)
        logger.debug("possible swaps: %d", len(self._possible_swaps))
        self.event_bus.emit(EVENT_POSSIBLE_SWAPS_DETECTED, swaps=set(self._possible_swaps))
        return set(self._possible_swaps)

    def is_legal(self, swap: Swap) -> bool:
        return swap in self._possible_swaps

    def apply_swap(self, swap: Swap) -> None:
        """Exchange two cookies. Legality is the caller's job; see is_legal."""
        a, b = swap.cookie_a, swap.cookie_b
        if self.cookies.get(a.column, a.row) is not a or self.cookies.get(b.column, b.row) is not b:
            raise ValueError(f"Stale swap, cookies no longer in their cells: {swap}")
        if not swap.is_adjacent():
            raise ValueError(f"Cookies are not adjacent: {swap}")
        self.cookies.set(a.column, a.row, b)
        self.cookies.set(b.column, b.row, a)
        a.column, b.column = b.column, a.column
        a.row, b.row = b.row, a.row

    def on_swap_request(self, sender, **kwargs):
        swap = kwargs.get("swap")
        if swap is None:
            return
        if self.is_legal(swap):
            self.apply_swap(swap)
            self.event_bus.emit(EVENT_SWAP_PERFORMED, swap=swap)
        else:
            self.event_bus.emit(EVENT_SWAP_INVALID, swap=swap)

    # ------------------------------------------------------------------
    # Matches, gravity
    # ------------------------------------------------------------------
    def detect_matches(self) -> Set[Chain]:
        return board_ops.find_all_matches(self.cookies)

    def resolve_matches(self) -> Set[Chain]:
        """Remove every chain on the board, stamping each with the combo multiplier and bumping it."""
        chains = self.detect_matches()
        if not chains:
            return chains
        state = self.state
        for chain in sorted(chains, key=Chain.sort_key):
            for cookie in chain.cookies:
                self._remove_cookie(cookie)
            chain.combo = state.combo_multiplier
            state.combo_multiplier += 1
        logger.debug("removed %d chains, combo now %d", len(chains), state.combo_multiplier)
        self.event_bus.emit(EVENT_MATCHES_REMOVED, chains=chains, combo_multiplier=state.combo_multiplier)
        return chains

    def collapse(self) -> List[List[Cookie]]:
        """Let cookies fall into the empty tiles below them.

        Returns the cookies that moved per column, bottom-most first, leaving
        out columns where nothing moved.
        """
        columns: List[List[Cookie]] = []
        for column in range(self.columns):
            moved: List[Cookie] = []
            for row in range(self.rows):
                if self.tiles.get(column, row) is None or self.cookies.get(column, row) is not None:
                    continue
                for lookup in range(row + 1, self.rows):
                    cookie = self.cookies.get(column, lookup)
                    if cookie is None:
                        continue
                    self.cookies.set(column, lookup, None)
                    self.cookies.set(column, row, cookie)
                    cookie.row = row
                    moved.append(cookie)
                    break
            if moved:
                columns.append(moved)
        if columns:
            self.event_bus.emit(EVENT_COOKIES_FELL, columns=columns)
        return columns

    def reset_combo_multiplier(self) -> None:
        self.state.combo_multiplier = 1
        self.event_bus.emit(EVENT_COMBO_RESET)


def _mask_dimensions(tiles: TileMask) -> tuple[int, int]:
    rows = len(tiles)
    if rows == 0 or len(tiles[0]) == 0:
        raise ValueError("Tile mask must have at least one row and one column")
    columns = len(tiles[0])
    for index, values in enumerate(tiles):
        if len(values) != columns:
            raise ValueError(f"Tile mask row {index} has {len(values)} cells, expected {columns}")
    return rows, columns
