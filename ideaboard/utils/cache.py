"""
Submission cooldown tracking.

Remembers when each client (keyed by remote address) last had an idea
accepted, so the submit flow can ask for a short wait between posts.
Each entry expires once its own cooldown has passed; nothing is persisted.
"""

from __future__ import annotations
from cachetools import TLRUCache
import math
import threading
import time

# Cache configuration constants
SUBMISSION_CACHE_MAX_ENTRIES = 10000


def _expires_at(_key, value, now):
    """Entries live exactly as long as the cooldown they were recorded with."""
    _recorded_at, cooldown_seconds = value
    return now + cooldown_seconds


# Thread-safe submission cache
# Key format: "submission:{client_key}" -> (monotonic timestamp, cooldown seconds)
_submission_cache = TLRUCache(maxsize=SUBMISSION_CACHE_MAX_ENTRIES, ttu=_expires_at)
_cache_lock = threading.Lock()


def _key(client_key: str) -> str:
    return f"submission:{client_key}"


def seconds_until_allowed(client_key: str, cooldown_seconds: int) -> int:
    """
    Return how many whole seconds the client must still wait (0 = allowed).

    Args:
        client_key: Identifier of the submitter (usually the remote address)
        cooldown_seconds: Minimum spacing between accepted submissions
    """
    if cooldown_seconds <= 0:
        return 0

    with _cache_lock:
        entry = _submission_cache.get(_key(client_key))

    if entry is None:
        return 0

    recorded_at, _cooldown = entry
    remaining = cooldown_seconds - (time.monotonic() - recorded_at)
    return max(0, math.ceil(remaining))


def record_submission(client_key: str, cooldown_seconds: int) -> None:
    """Mark that the client just had an idea accepted; kept for ``cooldown_seconds``."""
    if cooldown_seconds <= 0:
        return
    with _cache_lock:
        _submission_cache[_key(client_key)] = (time.monotonic(), cooldown_seconds)


def clear_submission_cache() -> None:
    """
    Clear every recorded submission.

    Useful for:
    - Testing
    - Manual reset after changing the cooldown
    """
    with _cache_lock:
        _submission_cache.clear()
