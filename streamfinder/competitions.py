"""Known competitions, grouped the way the club/league pickers show them."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompetitionInfo:
    slug: str
    name: str
    flag: str
    cluster: str


COMPETITIONS: tuple[CompetitionInfo, ...] = (
    # ── Deutschland ──────────────────────────────────────────
    CompetitionInfo("bundesliga", "Bundesliga", "🇩🇪", "deutschland"),
    CompetitionInfo("second_bundesliga", "2. Bundesliga", "🇩🇪", "deutschland"),
    CompetitionInfo("third_bundesliga", "3. Bundesliga", "🇩🇪", "deutschland"),
    CompetitionInfo("dfb_pokal", "DFB Pokal", "🇩🇪", "deutschland"),
    # ── Internationale Wettbewerbe ───────────────────────────
    CompetitionInfo("champions_league", "Champions League", "⭐", "int_wettbewerbe"),
    CompetitionInfo("europa_league", "Europa League", "🏅", "int_wettbewerbe"),
    CompetitionInfo("conference_league", "Conference League", "🏅", "int_wettbewerbe"),
    CompetitionInfo("club_world_cup", "Klub-Weltmeisterschaft", "🌍", "int_wettbewerbe"),
    # ── Internationale Ligen ─────────────────────────────────
    CompetitionInfo("premier_league", "Premier League", "🏴", "int_ligen"),
    CompetitionInfo("la_liga", "La Liga", "🇪🇸", "int_ligen"),
    CompetitionInfo("serie_a", "Serie A", "🇮🇹", "int_ligen"),
    CompetitionInfo("ligue_1", "Ligue 1", "🇫🇷", "int_ligen"),
    CompetitionInfo("sueper_lig", "Süper Lig", "🇹🇷", "int_ligen"),
    CompetitionInfo("eredevise", "Eredivisie", "🇳🇱", "int_ligen"),
    CompetitionInfo("liga_portugal", "Liga Portugal", "🇵🇹", "int_ligen"),
    CompetitionInfo("saudi_pro_league", "Saudi Pro League", "🇸🇦", "int_ligen"),
    CompetitionInfo("mls", "Major Soccer League", "🇺🇸", "int_ligen"),
    # ── Nationale Pokale ─────────────────────────────────────
    CompetitionInfo("fa_cup", "FA Cup", "🏴", "pokale"),
    CompetitionInfo("efl_cup", "EFL Cup", "🏴", "pokale"),
    CompetitionInfo("copa_del_rey", "Copa del Rey", "🇪🇸", "pokale"),
    CompetitionInfo("coppa_italia", "Coppa Italia", "🇮🇹", "pokale"),
    CompetitionInfo("coupe_de_france", "Coupe de France", "🇫🇷", "pokale"),
)

COMPETITION_SLUGS: tuple[str, ...] = tuple(c.slug for c in COMPETITIONS)

_BY_SLUG: dict[str, CompetitionInfo] = {c.slug: c for c in COMPETITIONS}


def get_competition(slug: str) -> CompetitionInfo | None:
    return _BY_SLUG.get(slug.strip().lower())


def competition_name(slug: str) -> str:
    """Return the display name for a slug, falling back to the slug itself."""

    info = get_competition(slug)
    return info.name if info else slug
