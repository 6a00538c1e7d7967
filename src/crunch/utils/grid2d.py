from __future__ import annotations

from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class Grid2D(Generic[T]):
    """Fixed-size sparse grid addressed by (column, row).

    Row 0 is the bottom of the board. Slots live in one flat list keyed by
    ``row * columns + column`` so the key stays unique for any grid width.
    Out-of-range coordinates are a caller bug and raise ``IndexError``.
    """

    __slots__ = ("columns", "rows", "_slots")

    def __init__(self, columns: int, rows: int):
        if columns <= 0 or rows <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {columns}x{rows}")
        self.columns = columns
        self.rows = rows
        self._slots: List[Optional[T]] = [None] * (columns * rows)

    def in_bounds(self, column: int, row: int) -> bool:
        return 0 <= column < self.columns and 0 <= row < self.rows

    def _index(self, column: int, row: int) -> int:
        if not self.in_bounds(column, row):
            raise IndexError(f"({column}, {row}) is outside the {self.columns}x{self.rows} grid")
        return row * self.columns + column

    def get(self, column: int, row: int) -> Optional[T]:
        return self._slots[self._index(column, row)]

    def set(self, column: int, row: int, value: Optional[T]) -> None:
        self._slots[self._index(column, row)] = value

    def __getitem__(self, key: Tuple[int, int]) -> Optional[T]:
        return self.get(*key)

    def __setitem__(self, key: Tuple[int, int], value: Optional[T]) -> None:
        self.set(key[0], key[1], value)

    def cells(self) -> Iterator[Tuple[int, int, Optional[T]]]:
        """Yield ``(column, row, value)`` row by row, bottom row first."""
        for row in range(self.rows):
            for column in range(self.columns):
                yield column, row, self._slots[row * self.columns + column]
