# utils.py
# Helpers: provider timeouts, venue ranking, dedupe, simple in-memory TTL cache

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, List, Optional, Tuple, TypeVar

from models import Venue

log = logging.getLogger(__name__)

T = TypeVar("T")


async def run_with_timeout(coro: Awaitable[T], seconds: float, label: str, default: Any = None) -> Tuple[Any, Optional[str]]:
    """
    Await coro with a deadline.
    Returns (result, errstr) and never raises; on failure result is `default`.
    """
    try:
        result = await asyncio.wait_for(coro, timeout=seconds)
        return result, None
    except asyncio.TimeoutError:
        msg = f"{label} timed out after {seconds}s"
        log.warning(msg)
        return default, msg
    except Exception as e:
        msg = f"{label} error: {e}"
        log.warning(msg)
        return default, msg


def dedupe(venues: List[Venue]) -> List[Venue]:
    """Deduplicate by (name + approx coords), first occurrence wins."""
    seen = set()
    out: List[Venue] = []
    for v in venues:
        k = f"{v.name.lower()}|{v.coordinates.lat:.4f}|{v.coordinates.lng:.4f}"
        if k not in seen:
            seen.add(k)
            out.append(v)
    return out


def rank(venues: List[Venue]) -> List[Venue]:
    """
    Fair-to-both ranking: ascending average of the two party distances.
    sorted() is stable, so ties keep their input order.
    """
    return sorted(venues, key=lambda v: v.average_distance)


@dataclass
class CacheEntry:
    expires: float
    data: Any


class TTLCache:
    """Simple in-memory TTL cache (per-process)."""

    def __init__(self, ttl_seconds: int = 600):
        self.ttl = ttl_seconds
        self._store: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any:
        entry = self._store.get(key)
        if not entry:
            return None
        if entry.expires < time.time():
            self._store.pop(key, None)
            return None
        return entry.data

    def set(self, key: str, value: Any) -> None:
        now = time.time()
        # sweep on write so keys that are never read again still leave
        for k in [k for k, e in self._store.items() if e.expires < now]:
            del self._store[k]
        self._store[key] = CacheEntry(expires=now + self.ttl, data=value)

    def __len__(self) -> int:
        return len(self._store)

    def clear(self) -> None:
        self._store.clear()
