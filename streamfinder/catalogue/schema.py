"""Internal data contract for catalogue ingestion."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ClubIngestDTO(BaseModel):
    """
    A club row as used across fetch -> parse -> DB -> optimizer.
    """

    club_id: int
    name: str
    slug: Optional[str] = None
    country: Optional[str] = None
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    popularity_score: Optional[int] = None
    competitions: dict[str, bool] = Field(default_factory=dict)


class LeagueIngestDTO(BaseModel):
    league_id: int
    league_slug: str
    name: str
    country_code: Optional[str] = None
    number_of_games: int = 0
    popularity: Optional[int] = None

    @field_validator("number_of_games")
    @classmethod
    def _non_negative_games(cls, value: int) -> int:
        return max(value, 0)


class ProviderIngestDTO(BaseModel):
    streamer_id: int
    provider_name: str
    slug: Optional[str] = None
    logo_url: Optional[str] = None
    monthly_price: str = ""
    yearly_price: str = ""
    affiliate_url: Optional[str] = None
    coverage: dict[str, int] = Field(default_factory=dict)

    @field_validator("coverage")
    @classmethod
    def _non_negative_coverage(cls, value: dict[str, int]) -> dict[str, int]:
        return {slug: games for slug, games in value.items() if games > 0}
