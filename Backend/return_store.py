import time
from threading import Lock
from typing import Dict, Optional, Tuple


class ReturnTargetStore:
    """
    Remembers where to send the client back after payment, keyed by txn ref.

    Entries expire lazily: an expired entry is dropped when looked up, or when
    the store is full and needs room.
    """

    def __init__(self, ttl_seconds: int = 1800, max_entries: int = 10000, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._lock = Lock()
        self._targets: Dict[str, Tuple[str, float]] = {}

    def remember(self, key: str, target: str) -> None:
        now = self._clock()
        with self._lock:
            self._targets.pop(key, None)
            if len(self._targets) >= self.max_entries:
                self._purge(now)
            while self._targets and len(self._targets) >= self.max_entries:
                # dicts keep insertion order, first key is the oldest
                oldest = next(iter(self._targets))
                del self._targets[oldest]
            self._targets[key] = (target, now + self.ttl_seconds)

    def lookup(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._targets.get(key)
            if entry is None:
                return None
            target, expires_at = entry
            if self._clock() >= expires_at:
                del self._targets[key]
                return None
            return target

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge(self._clock())

    def _purge(self, now: float) -> int:
        expired = [k for k, (_, expires_at) in self._targets.items() if now >= expires_at]
        for k in expired:
            del self._targets[k]
        return len(expired)

    def __len__(self) -> int:
        return len(self._targets)
