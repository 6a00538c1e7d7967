from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so handlers on systems nobody holds on to keep firing.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# BOARD POPULATION
# ============================================================================
EVENT_COOKIES_CREATED = "cookies_created"                  # payload: cookies=set[Cookie], reason=str
EVENT_FILL_RETRY = "fill_retry"                            # payload: attempt=int
EVENT_POSSIBLE_SWAPS_DETECTED = "possible_swaps_detected"  # payload: swaps=set[Swap]


# ============================================================================
# SWAPS
# ============================================================================
EVENT_SWAP_REQUEST = "swap_request"      # payload: swap=Swap
EVENT_SWAP_PERFORMED = "swap_performed"  # payload: swap=Swap
EVENT_SWAP_INVALID = "swap_invalid"      # payload: swap=Swap


# ============================================================================
# MATCHES & CASCADES
# ============================================================================
EVENT_MATCHES_REMOVED = "matches_removed"        # payload: chains=set[Chain], combo_multiplier=int
EVENT_COOKIES_FELL = "cookies_fell"              # payload: columns=list[list[Cookie]]
EVENT_COOKIES_TOPPED_UP = "cookies_topped_up"    # payload: columns=list[list[Cookie]]
EVENT_COMBO_RESET = "combo_reset"                # payload: None
EVENT_CASCADE_STEP = "cascade_step"              # payload: depth=int, chains=set[Chain]
EVENT_CASCADE_COMPLETE = "cascade_complete"      # payload: depth=int, score=int
