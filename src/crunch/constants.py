# Default board footprint used when a level does not supply its own mask.
NUM_COLUMNS = 9
NUM_ROWS = 9

# A run must be at least this long to count as a chain.
MIN_CHAIN_LENGTH = 3
# Points for a minimum-length chain; every extra cookie adds the same again.
CHAIN_BASE_SCORE = 60

# Whole-board fill attempts before giving up on finding a playable layout.
MAX_FILL_ATTEMPTS = 200
