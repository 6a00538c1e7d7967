from dataclasses import dataclass

@dataclass(slots=True, frozen=True)
class Tile:
    """Marks a playable cell. Created from the level mask and never moved."""
    column: int
    row: int
