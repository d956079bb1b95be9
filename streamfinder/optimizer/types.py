"""In-memory records consumed and produced by the coverage optimizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Club:
    club_id: int
    slug: str
    name: str
    country: Optional[str] = None
    flags: dict[str, bool] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class League:
    league_id: int
    slug: str
    name: str
    number_of_games: int = 0
    country_code: Optional[str] = None


@dataclass(frozen=True)
class Provider:
    streamer_id: int
    slug: str
    name: str
    monthly_price: str = ""
    yearly_price: str = ""
    coverage: dict[str, int] = field(default_factory=dict, hash=False, compare=False)

    def games_for(self, competition: str) -> int:
        return self.coverage.get(competition, 0)


@dataclass(frozen=True)
class CompetitionCoverage:
    competition: str
    total_games: int
    covered_games: int
    coverage: int


@dataclass(frozen=True)
class Recommendation:
    providers: tuple[Provider, ...]
    coverage: int
    monthly_price: float
    yearly_price: Optional[float]
    competitions: tuple[CompetitionCoverage, ...]
    total_games: int
    covered_games: int
    cost_per_game: float
    label: str
    score: float
    title: str
    description: str
    savings: Optional[float] = None
    target_coverage: Optional[int] = None
    # Set by named_tiers: tier name and its short badge text.
    tier: Optional[str] = None
    highlight: Optional[str] = None

    @property
    def provider_ids(self) -> tuple[int, ...]:
        return tuple(p.streamer_id for p in self.providers)


@dataclass(frozen=True)
class OptimizeOptions:
    max_combination_size: int = 3
    # Sizes above this are only built from the top-ranked providers.
    exhaustive_combination_size: int = 2
    top_providers_limit: int = 8
    max_combinations: int = 5000
    target_coverages: tuple[int, ...] = ()
    excluded_provider_ids: tuple[int, ...] = ()
    budget_limit: Optional[float] = None
    savings_rate: float = 0.1
    max_results: Optional[int] = None
    named_tiers: bool = False
