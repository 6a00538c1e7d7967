from dataclasses import dataclass

@dataclass(slots=True)
class Board:
    columns: int
    rows: int
