import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from streamfinder.competitions import competition_name
from streamfinder.optimizer.pricing import parse_price
from streamfinder.optimizer.types import Provider, Recommendation


class ClubOut(BaseModel):
    club_id: int
    slug: Optional[str]
    name: str
    country: Optional[str]
    logo_url: Optional[str]
    primary_color: Optional[str]
    secondary_color: Optional[str]
    competitions: dict[str, bool]

    class Config:
        from_attributes = True


class ClubCompetitionsOut(BaseModel):
    club_id: int
    competitions: list[str]


class LeagueOut(BaseModel):
    league_id: int
    slug: str
    name: str
    number_of_games: int
    country_code: Optional[str]

    class Config:
        from_attributes = True


class ProviderOut(BaseModel):
    streamer_id: int
    slug: str
    name: str
    monthly_price: float
    yearly_price: Optional[float]
    monthly_price_raw: str
    coverage: dict[str, int]

    @classmethod
    def from_provider(cls, provider: Provider) -> "ProviderOut":
        yearly = parse_price(provider.yearly_price)
        return cls(
            streamer_id=provider.streamer_id,
            slug=provider.slug,
            name=provider.name,
            monthly_price=parse_price(provider.monthly_price),
            yearly_price=yearly or None,
            monthly_price_raw=provider.monthly_price,
            coverage=dict(provider.coverage),
        )


class CompetitionCoverageOut(BaseModel):
    competition: str
    name: str
    total_games: int
    covered_games: int
    coverage: int


class RecommendationOut(BaseModel):
    title: str
    description: str
    label: str
    providers: list[ProviderOut]
    coverage: int
    monthly_price: float
    yearly_price: Optional[float]
    total_games: int
    covered_games: int
    cost_per_game: Optional[float]
    savings: Optional[float]
    score: float
    target_coverage: Optional[int]
    tier: Optional[str] = None
    highlight: Optional[str] = None
    competitions: list[CompetitionCoverageOut]

    @classmethod
    def from_recommendation(cls, rec: Recommendation) -> "RecommendationOut":
        return cls(
            title=rec.title,
            description=rec.description,
            label=rec.label,
            providers=[ProviderOut.from_provider(p) for p in rec.providers],
            coverage=rec.coverage,
            monthly_price=rec.monthly_price,
            yearly_price=rec.yearly_price,
            total_games=rec.total_games,
            covered_games=rec.covered_games,
            cost_per_game=None if math.isinf(rec.cost_per_game) else rec.cost_per_game,
            savings=rec.savings,
            score=round(rec.score, 2),
            target_coverage=rec.target_coverage,
            tier=rec.tier,
            highlight=rec.highlight,
            competitions=[
                CompetitionCoverageOut(
                    competition=c.competition,
                    name=competition_name(c.competition),
                    total_games=c.total_games,
                    covered_games=c.covered_games,
                    coverage=c.coverage,
                )
                for c in rec.competitions
            ],
        )


class OptimizeRequest(BaseModel):
    club_ids: list[int] = Field(default_factory=list)
    competitions: list[str] = Field(default_factory=list)
    # None -> settings default; [] -> full ranking
    target_coverages: Optional[list[int]] = None
    max_combination_size: Optional[int] = Field(default=None, ge=1, le=4)
    excluded_provider_ids: list[int] = Field(default_factory=list)
    budget_limit: Optional[float] = Field(default=None, ge=0)
    limit: Optional[int] = Field(default=None, ge=1)
    # Three named tiers instead of target tiers or the full ranking
    named_tiers: bool = False

    @field_validator("target_coverages")
    @classmethod
    def _targets_in_range(cls, value: Optional[list[int]]) -> Optional[list[int]]:
        if value is None:
            return value
        for target in value:
            if not 0 <= target <= 100:
                raise ValueError("target coverages must be between 0 and 100")
        return value


class OptimizeResponse(BaseModel):
    club_ids: list[int]
    competitions: list[str]
    recommendations: list[RecommendationOut]
    count: int
    message: Optional[str] = None


class SettingsOut(BaseModel):
    max_combination_size: int
    exhaustive_combination_size: int
    top_providers_limit: int
    max_combinations: int
    default_target_coverages: list[int]
    savings_rate: float
    max_results: int
    updated_at_utc: Optional[datetime] = None


class SettingsUpdate(BaseModel):
    max_combination_size: Optional[int] = Field(default=None, ge=1, le=4)
    exhaustive_combination_size: Optional[int] = Field(default=None, ge=1, le=4)
    top_providers_limit: Optional[int] = Field(default=None, ge=1)
    max_combinations: Optional[int] = Field(default=None, ge=1)
    default_target_coverages: Optional[list[int]] = None
    savings_rate: Optional[float] = Field(default=None, ge=0, le=1)
    max_results: Optional[int] = Field(default=None, ge=1)
