from dataclasses import dataclass

@dataclass(slots=True)
class LevelState:
    """Per-level numbers handed to the session layer.

    combo_multiplier: bumped once per resolved chain; reset to 1 at the start
    of every player turn.
    """
    target_score: int
    maximum_moves: int
    combo_multiplier: int = 1
