"""Coverage/cost optimizer for streaming provider combinations."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from itertools import combinations
from typing import Iterable, Iterator, Sequence

from streamfinder.optimizer.pricing import parse_price
from streamfinder.optimizer.types import (
    Club,
    CompetitionCoverage,
    League,
    OptimizeOptions,
    Provider,
    Recommendation,
)

logger = logging.getLogger(__name__)

LABEL_COMPLETE = "Komplettabdeckung"
LABEL_PREMIUM = "Premium"
LABEL_BUDGET = "Budget"
LABEL_PRICE_HIT = "Preis-Hit"
LABEL_SOLID = "Solide Option"

TIER_BEST_COVERAGE = "Beste Abdeckung"
TIER_BEST_VALUE = "Preis-Leistungs-Sieger"
TIER_BUDGET = "Budget-Option"


def compute_required_competitions(clubs: Iterable[Club]) -> set[str]:
    """Return every competition slug flagged on at least one club."""

    required: set[str] = set()
    for club in clubs:
        required.update(slug for slug, plays in club.flags.items() if plays is True)
    return required


def build_selection(clubs: Iterable[Club], manual_competitions: Iterable[str] = ()) -> set[str]:
    selection = compute_required_competitions(clubs)
    selection.update(slug.strip() for slug in manual_competitions if slug and slug.strip())
    return selection


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _percent(covered: int, total: int) -> int:
    if total <= 0:
        return 0
    return max(0, min(100, _round_half_up(100 * covered / total)))


def assign_label(coverage: int, price: float, cost_per_game: float) -> str:
    if coverage >= 95:
        return LABEL_COMPLETE
    if coverage >= 90:
        return LABEL_PREMIUM
    if price <= 30:
        return LABEL_BUDGET
    if cost_per_game <= 2:
        return LABEL_PRICE_HIT
    return LABEL_SOLID


def composite_score(coverage: int, price: float, covered_games: int, total_games: int) -> float:
    return (
        0.4 * coverage
        + 0.3 * (100 - min(price, 100))
        + 0.3 * (covered_games / max(total_games, 1)) * 100
    )


def _competition_totals(competitions: Iterable[str], leagues: Sequence[League]) -> dict[str, int]:
    games_by_slug = {league.slug: max(league.number_of_games or 0, 0) for league in leagues}
    return {slug: games_by_slug.get(slug, 0) for slug in sorted(competitions)}


def _candidate_providers(
    providers: Sequence[Provider],
    totals: dict[str, int],
    excluded_ids: Iterable[int],
) -> list[Provider]:
    excluded = set(excluded_ids)
    return [
        provider
        for provider in providers
        if provider.streamer_id not in excluded
        and any(provider.games_for(slug) > 0 for slug in totals)
    ]


def _rank_providers(providers: Sequence[Provider], totals: dict[str, int]) -> list[Provider]:
    def key(provider: Provider) -> tuple[int, float]:
        covered = sum(min(provider.games_for(slug), total) for slug, total in totals.items())
        return -covered, parse_price(provider.monthly_price)

    return sorted(providers, key=key)


def _enumerate_combinations(
    candidates: list[Provider],
    totals: dict[str, int],
    options: OptimizeOptions,
) -> Iterator[tuple[Provider, ...]]:
    max_size = max(options.max_combination_size, 1)
    exhaustive_size = max(1, min(options.exhaustive_combination_size, max_size))
    top_providers = _rank_providers(candidates, totals)[: max(options.top_providers_limit, 0)]

    emitted = 0
    for size in range(1, max_size + 1):
        pool = candidates if size <= exhaustive_size else top_providers
        for combo in combinations(pool, size):
            if emitted >= options.max_combinations:
                logger.warning(
                    "Combination cap reached: max_combinations=%s size=%s candidates=%s",
                    options.max_combinations,
                    size,
                    len(candidates),
                )
                return
            emitted += 1
            yield combo


def _describe(combo: tuple[Provider, ...]) -> tuple[str, str]:
    if len(combo) == 1:
        return combo[0].name, f"Alle Inhalte über {combo[0].name}"
    names = " + ".join(provider.name for provider in combo)
    return f"{len(combo)}-Anbieter Kombination", f"Optimale Kombination aus {names}"


def evaluate_combination(
    combo: tuple[Provider, ...],
    totals: dict[str, int],
    savings_rate: float = 0.1,
) -> Recommendation:
    competitions: list[CompetitionCoverage] = []
    total_games = 0
    covered_games = 0
    for slug, total in totals.items():
        best = max((provider.games_for(slug) for provider in combo), default=0)
        covered = max(0, min(best, total))
        competitions.append(CompetitionCoverage(slug, total, covered, _percent(covered, total)))
        total_games += total
        covered_games += covered

    coverage = _percent(covered_games, total_games)
    price = round(sum(parse_price(p.monthly_price) for p in combo), 2)
    yearly = sum(
        parse_price(p.yearly_price) or parse_price(p.monthly_price) * 12 for p in combo
    )
    cost_per_game = price / covered_games if covered_games else math.inf
    title, description = _describe(combo)

    return Recommendation(
        providers=combo,
        coverage=coverage,
        monthly_price=price,
        yearly_price=round(yearly, 2) if yearly > 0 else None,
        competitions=tuple(competitions),
        total_games=total_games,
        covered_games=covered_games,
        cost_per_game=round(cost_per_game, 2) if covered_games else math.inf,
        label=assign_label(coverage, price, cost_per_game),
        score=composite_score(coverage, price, covered_games, total_games),
        title=title,
        description=description,
        savings=round(price * savings_rate, 2) if len(combo) > 1 else None,
    )


def best_for_targets(
    recommendations: Sequence[Recommendation],
    targets: Iterable[int],
) -> list[Recommendation]:
    """Pick the cheapest recommendation reaching each coverage target.

    Targets nobody reaches are left out. Equal prices prefer the higher
    coverage, then the earlier (better ranked) entry.
    """

    tiers: list[Recommendation] = []
    for target in targets:
        best: Recommendation | None = None
        for rec in recommendations:
            if rec.coverage < target:
                continue
            if (
                best is None
                or rec.monthly_price < best.monthly_price
                or (rec.monthly_price == best.monthly_price and rec.coverage > best.coverage)
            ):
                best = rec
        if best is not None:
            tiers.append(replace(best, target_coverage=target))
    return tiers


def named_tiers(recommendations: Sequence[Recommendation]) -> list[Recommendation]:
    """Pick up to three named recommendations from an already-ranked list.

    - "Beste Abdeckung": first entry with at least 90% coverage, else the top entry.
    - "Preis-Leistungs-Sieger": at most 40 EUR and 70% coverage, lowest cost per game.
    - "Budget-Option": at least 50% coverage, cheapest.

    An entry fills at most one tier; tiers without a match are left out.
    """

    if not recommendations:
        return []
    best_overall = next((r for r in recommendations if r.coverage >= 90), recommendations[0])

    value_candidates = [
        r
        for r in recommendations
        if r.monthly_price <= 40 and r.coverage >= 70 and r is not best_overall
    ]
    # Free entries (cost 0) rank last.
    best_value = min(
        value_candidates,
        key=lambda r: r.cost_per_game or math.inf,
        default=None,
    )

    budget_candidates = [
        r
        for r in recommendations
        if r.coverage >= 50 and r is not best_overall and r is not best_value
    ]
    budget = min(budget_candidates, key=lambda r: r.monthly_price, default=None)

    tiers = [
        (best_overall, TIER_BEST_COVERAGE, "Maximale Spieleabdeckung für deine Auswahl", "Empfohlen"),
        (best_value, TIER_BEST_VALUE, "Beste Balance zwischen Kosten und Abdeckung", "Beliebt"),
        (budget, TIER_BUDGET, "Günstigste Option für die wichtigsten Spiele", "Günstig"),
    ]
    return [
        replace(rec, tier=name, description=description, highlight=highlight)
        for rec, name, description, highlight in tiers
        if rec is not None
    ]


def optimize(
    selected_clubs: Sequence[Club],
    selected_competitions: Iterable[str],
    providers: Sequence[Provider],
    leagues: Sequence[League],
    options: OptimizeOptions | None = None,
) -> list[Recommendation]:
    """Rank provider combinations for the selected clubs and competitions.

    Returns an empty list when clubs, competitions or providers are empty.
    With ``options.named_tiers`` set, returns the named tiers; otherwise,
    with ``options.target_coverages`` set, one tier per reachable target
    instead of the full ranking.
    """

    options = options or OptimizeOptions()
    competitions = set(selected_competitions)
    if not selected_clubs or not competitions or not providers:
        return []

    totals = _competition_totals(competitions, leagues)
    candidates = _candidate_providers(providers, totals, options.excluded_provider_ids)
    if not candidates:
        logger.info("No provider airs any of competitions=%s", ",".join(totals))
        return []

    recommendations = [
        evaluate_combination(combo, totals, options.savings_rate)
        for combo in _enumerate_combinations(candidates, totals, options)
    ]
    if options.budget_limit is not None:
        recommendations = [r for r in recommendations if r.monthly_price <= options.budget_limit]
    recommendations.sort(key=lambda r: r.score, reverse=True)

    logger.debug(
        "Optimized clubs=%d competitions=%d candidates=%d combinations=%d",
        len(selected_clubs),
        len(totals),
        len(candidates),
        len(recommendations),
    )

    if options.named_tiers:
        return named_tiers(recommendations)
    if options.target_coverages:
        return best_for_targets(recommendations, options.target_coverages)
    if options.max_results is not None:
        return recommendations[: options.max_results]
    return recommendations
