"""
Caller-side memo of generation results. The pipeline itself never reads it.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Optional

from .config import SkeletonOptions
from .types import DEFAULT_CACHE_SIZE, AnalysisResult, GenerationResult


@dataclass
class CacheEntry:
    key: str
    result: GenerationResult
    analysis: Optional[AnalysisResult] = None
    options: Optional[SkeletonOptions] = None
    timestamp: float = field(default_factory=time.time)


class GenerationCache:
    """Least-recently-used store keyed by ``SkeletonOptions.cache_key``."""

    def __init__(self, max_size: int = DEFAULT_CACHE_SIZE):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    @property
    def size(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        return entry

    def set(self, key: str, entry: CacheEntry) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = entry
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def put(self, key: str, result: GenerationResult, analysis: Optional[AnalysisResult] = None,
            options: Optional[SkeletonOptions] = None) -> CacheEntry:
        entry = CacheEntry(key=key, result=result, analysis=analysis, options=options)
        self.set(key, entry)
        return entry

    def evict(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
