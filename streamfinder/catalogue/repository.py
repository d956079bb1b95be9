"""Read access to the stored catalogue as optimizer records."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from streamfinder.models import Club as ClubRow
from streamfinder.models import League as LeagueRow
from streamfinder.models import StreamingProvider as ProviderRow
from streamfinder.optimizer.types import Club, League, Provider


def club_from_row(row: ClubRow) -> Club:
    flags = row.competitions if isinstance(row.competitions, dict) else {}
    return Club(
        club_id=row.club_id,
        slug=row.slug or "",
        name=row.name or "",
        country=row.country,
        flags={str(slug): value is True for slug, value in flags.items()},
    )


def league_from_row(row: LeagueRow) -> League:
    return League(
        league_id=row.league_id,
        slug=row.league_slug,
        name=row.name or row.league_slug,
        number_of_games=row.number_of_games or 0,
        country_code=row.country_code,
    )


def provider_from_row(row: ProviderRow) -> Provider:
    coverage = row.coverage if isinstance(row.coverage, dict) else {}
    return Provider(
        streamer_id=row.streamer_id,
        slug=row.slug or "",
        name=row.provider_name or "",
        monthly_price=row.monthly_price or "",
        yearly_price=row.yearly_price or "",
        coverage={str(slug): int(games) for slug, games in coverage.items() if games},
    )


class CatalogueRepository:
    """Loads fully-resolved collections for one optimizer call."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def list_club_rows(self, search: str | None = None) -> list[ClubRow]:
        query = self.db.query(ClubRow)
        term = (search or "").strip().lower()
        if term:
            pattern = f"%{term}%"
            query = query.filter(
                or_(
                    func.lower(ClubRow.name).like(pattern),
                    func.lower(ClubRow.country).like(pattern),
                )
            )
        return query.order_by(ClubRow.name.asc()).all()

    def get_club(self, club_id: int) -> Club | None:
        row = self.db.get(ClubRow, club_id)
        return club_from_row(row) if row else None

    def get_clubs(self, club_ids: Iterable[int]) -> list[Club]:
        ids = sorted(set(club_ids))
        if not ids:
            return []
        rows = (
            self.db.query(ClubRow)
            .filter(ClubRow.club_id.in_(ids))
            .order_by(ClubRow.club_id.asc())
            .all()
        )
        return [club_from_row(row) for row in rows]

    def list_leagues(self) -> list[League]:
        rows = (
            self.db.query(LeagueRow)
            .order_by(LeagueRow.popularity.desc().nullslast(), LeagueRow.league_id.asc())
            .all()
        )
        return [league_from_row(row) for row in rows]

    def list_providers(self) -> list[Provider]:
        rows = (
            self.db.query(ProviderRow)
            .order_by(ProviderRow.provider_name.asc(), ProviderRow.streamer_id.asc())
            .all()
        )
        return [provider_from_row(row) for row in rows]
