from __future__ import annotations

from typing import Iterable, List, Optional, Set, Tuple

from crunch.components.chain import Chain, ChainType
from crunch.components.cookie import Cookie, CookieType
from crunch.components.swap import Swap
from crunch.constants import MIN_CHAIN_LENGTH
from crunch.utils.grid2d import Grid2D

Position = Tuple[int, int]
CookieGrid = Grid2D[Cookie]


def cookie_type_at(cookies: CookieGrid, column: int, row: int) -> Optional[CookieType]:
    """Type at (column, row), or None for empty or off-board cells."""
    if not cookies.in_bounds(column, row):
        return None
    cookie = cookies.get(column, row)
    return cookie.cookie_type if cookie is not None else None


def completes_chain(cookies: CookieGrid, column: int, row: int, cookie_type: CookieType) -> bool:
    """Return True if placing cookie_type at (column, row) finishes a run with the
    two cookies to its left or the two below it."""
    if (
        cookie_type_at(cookies, column - 1, row) == cookie_type
        and cookie_type_at(cookies, column - 2, row) == cookie_type
    ):
        return True
    return (
        cookie_type_at(cookies, column, row - 1) == cookie_type
        and cookie_type_at(cookies, column, row - 2) == cookie_type
    )


def _run_length(cookies: CookieGrid, column: int, row: int, step: Position, cookie_type: CookieType) -> int:
    d_col, d_row = step
    length = 0
    column, row = column + d_col, row + d_row
    while cookie_type_at(cookies, column, row) == cookie_type:
        length += 1
        column, row = column + d_col, row + d_row
    return length


def has_chain_at(cookies: CookieGrid, column: int, row: int) -> bool:
    """Return True if the cookie at (column, row) sits on a horizontal or vertical run."""
    cookie_type = cookie_type_at(cookies, column, row)
    if cookie_type is None:
        return False
    horizontal = 1 + _run_length(cookies, column, row, (-1, 0), cookie_type) + _run_length(
        cookies, column, row, (1, 0), cookie_type
    )
    if horizontal >= MIN_CHAIN_LENGTH:
        return True
    vertical = 1 + _run_length(cookies, column, row, (0, -1), cookie_type) + _run_length(
        cookies, column, row, (0, 1), cookie_type
    )
    return vertical >= MIN_CHAIN_LENGTH


def exchange_slots(cookies: CookieGrid, first: Position, second: Position) -> None:
    """Swap the contents of two grid slots without touching the cookies' own positions."""
    first_cookie = cookies.get(*first)
    cookies.set(first[0], first[1], cookies.get(*second))
    cookies.set(second[0], second[1], first_cookie)


def swap_creates_chain(cookies: CookieGrid, first: Position, second: Position) -> bool:
    """Trial-swap two slots in place and report whether either cell ends up on a run."""
    exchange_slots(cookies, first, second)
    try:
        return has_chain_at(cookies, *first) or has_chain_at(cookies, *second)
    finally:
        exchange_slots(cookies, first, second)


def find_possible_swaps(cookies: CookieGrid) -> Set[Swap]:
    """Enumerate adjacent cookie pairs whose exchange would produce a chain."""
    swaps: Set[Swap] = set()
    for column, row, cookie in cookies.cells():
        if cookie is None:
            continue
        # Right and up cover every adjacent pair exactly once.
        for other_column, other_row in ((column + 1, row), (column, row + 1)):
            if not cookies.in_bounds(other_column, other_row):
                continue
            other = cookies.get(other_column, other_row)
            if other is None:
                continue
            if swap_creates_chain(cookies, (column, row), (other_column, other_row)):
                swaps.add(Swap(cookie, other))
    return swaps


def _scan_line(line: Iterable[Optional[Cookie]], chain_type: ChainType) -> List[Chain]:
    chains: List[Chain] = []
    run: List[Cookie] = []
    for cookie in line:
        if cookie is not None and run and cookie.cookie_type == run[-1].cookie_type:
            run.append(cookie)
            continue
        if len(run) >= MIN_CHAIN_LENGTH:
            chains.append(Chain(chain_type, run))
        run = [cookie] if cookie is not None else []
    if len(run) >= MIN_CHAIN_LENGTH:
        chains.append(Chain(chain_type, run))
    return chains


def detect_horizontal_matches(cookies: CookieGrid) -> Set[Chain]:
    chains: Set[Chain] = set()
    for row in range(cookies.rows):
        line = (cookies.get(column, row) for column in range(cookies.columns))
        chains.update(_scan_line(line, ChainType.HORIZONTAL))
    return chains


def detect_vertical_matches(cookies: CookieGrid) -> Set[Chain]:
    chains: Set[Chain] = set()
    for column in range(cookies.columns):
        line = (cookies.get(column, row) for row in range(cookies.rows))
        chains.update(_scan_line(line, ChainType.VERTICAL))
    return chains


def find_all_matches(cookies: CookieGrid) -> Set[Chain]:
    """All maximal runs in both directions. A cookie on a cross sits in two chains."""
    return detect_horizontal_matches(cookies) | detect_vertical_matches(cookies)
