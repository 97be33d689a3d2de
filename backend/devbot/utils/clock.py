"""Time and identifier helpers."""

import time

_last_id_ms = 0


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def new_id() -> str:
    """Return a creation-ordered identifier.

    Based on epoch milliseconds; bumped by one when two ids are requested
    within the same millisecond so that ids stay unique and ordered.
    """
    global _last_id_ms
    stamp = max(now_ms(), _last_id_ms + 1)
    _last_id_ms = stamp
    return str(stamp)
