"""Opt-in memoization of optimizer results.

Entries never expire on their own; callers clear the cache when the
catalogue or the optimizer settings change.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import asdict
from typing import Iterable, Sequence

from streamfinder.optimizer.engine import optimize
from streamfinder.optimizer.types import Club, League, OptimizeOptions, Provider, Recommendation

logger = logging.getLogger(__name__)


class OptimizerCache:
    def __init__(self) -> None:
        self._entries: dict[str, list[Recommendation]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def make_key(
        club_ids: Iterable[int],
        competitions: Iterable[str],
        options: OptimizeOptions,
    ) -> str:
        return json.dumps(
            {
                "clubs": sorted(set(club_ids)),
                "competitions": sorted(set(competitions)),
                "options": asdict(options),
            },
            sort_keys=True,
            separators=(",", ":"),
        )

    def get(self, key: str) -> list[Recommendation] | None:
        with self._lock:
            entry = self._entries.get(key)
        return list(entry) if entry is not None else None

    def set(self, key: str, value: Sequence[Recommendation]) -> None:
        with self._lock:
            self._entries[key] = list(value)

    def clear(self) -> int:
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
        if dropped:
            logger.info("Cleared %d cached optimizer result(s)", dropped)
        return dropped

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def optimize_cached(
    cache: OptimizerCache,
    selected_clubs: Sequence[Club],
    selected_competitions: Iterable[str],
    providers: Sequence[Provider],
    leagues: Sequence[League],
    options: OptimizeOptions | None = None,
) -> list[Recommendation]:
    options = options or OptimizeOptions()
    competitions = set(selected_competitions)
    key = cache.make_key((club.club_id for club in selected_clubs), competitions, options)
    cached = cache.get(key)
    if cached is not None:
        return cached
    result = optimize(selected_clubs, competitions, providers, leagues, options)
    cache.set(key, result)
    return result


# Module-level singleton
_cache: OptimizerCache | None = None


def get_optimizer_cache() -> OptimizerCache:
    global _cache
    if _cache is None:
        _cache = OptimizerCache()
    return _cache
