"""TTL-bounded response cache keyed by request URL.

Entries are never evicted proactively; staleness is judged lazily at read
time against ``CACHE_TTL_MS``, so the map grows with the number of distinct
keys ever stored. That is acceptable for a low-volume personal cache.
"""

from dataclasses import dataclass, field
from typing import Any

CACHE_TTL_MS = 300_000  # 5 minutes


@dataclass
class CacheEntry:
    """A cached response body and its capture time (epoch millis)."""

    response: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {"response": self.response, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CacheEntry":
        return cls(response=str(data["response"]), timestamp=int(data["timestamp"]))


@dataclass
class ResponseCache:
    """Mapping of request key to :class:`CacheEntry` with lazy TTL checks.

    Callers pass ``now`` explicitly so freshness is deterministic.

    Example:
        cache = ResponseCache()
        cache.store(url, body, now_ms)
        cache.lookup(url, now_ms + 1_000)  # -> body
    """

    entries: dict[str, CacheEntry] = field(default_factory=dict)
    ttl_ms: int = CACHE_TTL_MS

    def lookup(self, key: str, now: int) -> str | None:
        """Return the cached body if present and younger than the TTL.

        Missing and expired entries are indistinguishable to the caller.
        """
        entry = self.entries.get(key)
        if entry is not None and now - entry.timestamp < self.ttl_ms:
            return entry.response
        return None

    def store(self, key: str, body: str, now: int) -> None:
        """Insert or overwrite the entry for ``key``."""
        self.entries[key] = CacheEntry(response=body, timestamp=now)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def to_dict(self) -> dict[str, Any]:
        return {key: entry.to_dict() for key, entry in self.entries.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResponseCache":
        return cls(entries={str(k): CacheEntry.from_dict(v) for k, v in data.items()})
