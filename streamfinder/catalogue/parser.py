"""Parser for raw catalogue rows (Supabase REST export format)."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from streamfinder.catalogue.schema import ClubIngestDTO, LeagueIngestDTO, ProviderIngestDTO
from streamfinder.competitions import COMPETITION_SLUGS

logger = logging.getLogger(__name__)


def _safe_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _clean_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _extract_flags(row: dict[str, Any]) -> dict[str, bool]:
    flags: dict[str, bool] = {}
    nested = row.get("competitions")
    if isinstance(nested, dict):
        flags.update({str(slug): value is True for slug, value in nested.items()})
    for slug in COMPETITION_SLUGS:
        if slug in row:
            flags[slug] = row[slug] is True
    return flags


def _extract_coverage(row: dict[str, Any]) -> dict[str, int]:
    coverage: dict[str, int] = {}
    nested = row.get("coverage")
    if isinstance(nested, dict):
        for slug, value in nested.items():
            coverage[str(slug)] = max(_safe_int(value) or 0, 0)
    for slug in COMPETITION_SLUGS:
        if slug in row:
            coverage[slug] = max(_safe_int(row[slug]) or 0, 0)
    return coverage


def parse_club(row: dict[str, Any]) -> ClubIngestDTO | None:
    club_id = _safe_int(row.get("club_id"))
    if club_id is None:
        return None
    return ClubIngestDTO(
        club_id=club_id,
        name=_clean_str(row.get("name")) or "",
        slug=_clean_str(row.get("slug")),
        country=_clean_str(row.get("country")),
        logo_url=_clean_str(row.get("logo_url")),
        primary_color=_clean_str(row.get("primary_color")),
        secondary_color=_clean_str(row.get("secondary_color")),
        popularity_score=_safe_int(row.get("popularity_score", row.get("popularity"))),
        competitions=_extract_flags(row),
    )


def parse_league(row: dict[str, Any]) -> LeagueIngestDTO | None:
    league_id = _safe_int(row.get("league_id"))
    slug = _clean_str(row.get("league_slug"))
    if league_id is None or slug is None:
        return None
    games = row.get("number of games", row.get("number_of_games"))
    return LeagueIngestDTO(
        league_id=league_id,
        league_slug=slug,
        name=_clean_str(row.get("league")) or _clean_str(row.get("name")) or slug,
        country_code=_clean_str(row.get("country code", row.get("country_code"))),
        number_of_games=_safe_int(games) or 0,
        popularity=_safe_int(row.get("popularity")),
    )


def parse_provider(row: dict[str, Any]) -> ProviderIngestDTO | None:
    streamer_id = _safe_int(row.get("streamer_id"))
    if streamer_id is None:
        return None
    name = _clean_str(row.get("provider_name")) or _clean_str(row.get("name")) or ""
    return ProviderIngestDTO(
        streamer_id=streamer_id,
        provider_name=name,
        slug=_clean_str(row.get("slug")),
        logo_url=_clean_str(row.get("logo_url")),
        monthly_price=_clean_str(row.get("monthly_price")) or "",
        yearly_price=_clean_str(row.get("yearly_price")) or "",
        affiliate_url=_clean_str(row.get("affiliate_url")),
        coverage=_extract_coverage(row),
    )


def _parse_rows(rows: Iterable[Any], parse, id_attr: str, kind: str) -> list:
    parsed = []
    seen_ids: set[int] = set()
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            dto = parse(row)
        except ValidationError:
            logger.exception("Invalid %s row skipped: %s", kind, row)
            continue
        if dto is None:
            logger.warning("Skipped %s row without id", kind)
            continue
        dto_id = getattr(dto, id_attr)
        if dto_id in seen_ids:
            continue
        seen_ids.add(dto_id)
        parsed.append(dto)
    return parsed


def parse_clubs(rows: Iterable[Any]) -> list[ClubIngestDTO]:
    return _parse_rows(rows, parse_club, "club_id", "club")


def parse_leagues(rows: Iterable[Any]) -> list[LeagueIngestDTO]:
    return _parse_rows(rows, parse_league, "league_id", "league")


def parse_providers(rows: Iterable[Any]) -> list[ProviderIngestDTO]:
    return _parse_rows(rows, parse_provider, "streamer_id", "provider")
