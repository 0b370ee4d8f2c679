"""
In-memory translation cache.

Bounded by entry count and evicted in insertion order (oldest first, not LRU).
Entries older than the TTL read as absent but are only removed by insertion
pressure. One instance is created at startup and shared through app state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from app.utils.clock import Clock, utc_now

DEFAULT_MAX_ENTRIES = 1000
DEFAULT_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class CacheEntry:
    translation: str
    inserted_at: datetime
    source_language: Optional[str] = None


def cache_key(text: str, target_language: str) -> str:
    """Case-folded, trimmed text joined with the target language tag."""
    return f"{(text or '').strip().casefold()}::{target_language.strip().lower()}"


class TranslationCache:
    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl: timedelta = DEFAULT_TTL,
        clock: Optional[Clock] = None,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl = ttl
        self._clock = clock or utc_now
        # dicts keep insertion order, which is the eviction order
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get_entry(self, text: str, target_language: str) -> Optional[CacheEntry]:
        """Return the live entry, or None when missing or older than the TTL."""
        entry = self._entries.get(cache_key(text, target_language))
        if entry is None:
            return None
        if self._clock() - entry.inserted_at > self.ttl:
            return None
        return entry

    def lookup(self, text: str, target_language: str) -> Optional[str]:
        """Return the cached translation, or None when missing or older than the TTL."""
        entry = self.get_entry(text, target_language)
        return entry.translation if entry is not None else None

    def store(
        self,
        text: str,
        target_language: str,
        translation: str,
        source_language: Optional[str] = None,
    ) -> None:
        """Insert (or re-insert) an entry and evict the oldest while over the bound."""
        key = cache_key(text, target_language)
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(
            translation=translation,
            inserted_at=self._clock(),
            source_language=source_language,
        )
        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries), None)
            if oldest is None:
                break
            self._entries.pop(oldest, None)

    def clear(self) -> None:
        self._entries.clear()
