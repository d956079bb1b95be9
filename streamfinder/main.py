from __future__ import annotations

import asyncio
import logging
import os
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException
from sqlalchemy.orm import Session

from streamfinder.catalogue.repository import CatalogueRepository
from streamfinder.catalogue.sync import sync_from_supabase
from streamfinder.db import get_db, init_db
from streamfinder.log_buffer import get_buffer_handler, install_buffer_handler
from streamfinder.optimizer.cache import get_optimizer_cache, optimize_cached
from streamfinder.optimizer.engine import build_selection, compute_required_competitions
from streamfinder.schemas import (
    ClubCompetitionsOut,
    ClubOut,
    LeagueOut,
    OptimizeRequest,
    OptimizeResponse,
    ProviderOut,
    RecommendationOut,
    SettingsOut,
    SettingsUpdate,
)
from streamfinder.settings import (
    format_target_coverages,
    get_or_create_settings,
    options_from_settings,
    snapshot_settings,
)

SELECTION_REQUIRED_MESSAGE = "Bitte wählen Sie mindestens einen Verein und eine Liga aus"
NO_RESULTS_MESSAGE = "Keine passende Anbieter-Kombination gefunden."

app = FastAPI(title="Streamfinder")
logger = logging.getLogger(__name__)
_catalogue_sync_task: asyncio.Task | None = None
_catalogue_sync_stop: asyncio.Event | None = None


async def _catalogue_sync_loop(interval_minutes: int) -> None:
    logger.info("Catalogue sync enabled: interval=%s minutes", interval_minutes)
    while _catalogue_sync_stop and not _catalogue_sync_stop.is_set():
        try:
            result = await asyncio.to_thread(sync_from_supabase)
            logger.info(
                "Catalogue sync done: changed=%s errors=%s",
                result.changed,
                result.errors,
            )
        except Exception:
            logger.exception("Catalogue sync failed.")
        try:
            await asyncio.wait_for(
                _catalogue_sync_stop.wait(),
                timeout=interval_minutes * 60,
            )
        except asyncio.TimeoutError:
            continue


@app.on_event("startup")
async def start_catalogue_sync() -> None:
    global _catalogue_sync_task, _catalogue_sync_stop
    install_buffer_handler()
    init_db()
    interval_minutes = int(os.getenv("CATALOGUE_SYNC_INTERVAL_MINUTES", "0"))
    if interval_minutes < 1:
        logger.info("Catalogue sync disabled (CATALOGUE_SYNC_INTERVAL_MINUTES < 1)")
        return
    _catalogue_sync_stop = asyncio.Event()
    _catalogue_sync_task = asyncio.create_task(_catalogue_sync_loop(interval_minutes))


@app.on_event("shutdown")
async def stop_catalogue_sync() -> None:
    global _catalogue_sync_task, _catalogue_sync_stop
    if _catalogue_sync_stop:
        _catalogue_sync_stop.set()
    if _catalogue_sync_task:
        await _catalogue_sync_task
    _catalogue_sync_task = None
    _catalogue_sync_stop = None


@app.get("/api/clubs", response_model=list[ClubOut])
def list_clubs(search: str | None = None, db: Session = Depends(get_db)):
    rows = CatalogueRepository(db).list_club_rows(search)
    return [ClubOut.model_validate(row) for row in rows]


@app.get("/api/clubs/{club_id}/competitions", response_model=ClubCompetitionsOut)
def club_competitions(club_id: int, db: Session = Depends(get_db)):
    club = CatalogueRepository(db).get_club(club_id)
    if club is None:
        raise HTTPException(status_code=404, detail="Verein nicht gefunden")
    return ClubCompetitionsOut(
        club_id=club.club_id,
        competitions=sorted(compute_required_competitions([club])),
    )


@app.get("/api/leagues", response_model=list[LeagueOut])
def list_leagues(db: Session = Depends(get_db)):
    return [LeagueOut.model_validate(league) for league in CatalogueRepository(db).list_leagues()]


@app.get("/api/providers", response_model=list[ProviderOut])
def list_providers(db: Session = Depends(get_db)):
    providers = CatalogueRepository(db).list_providers()
    return [ProviderOut.from_provider(provider) for provider in providers]


@app.post("/api/optimize", response_model=OptimizeResponse)
def api_optimize(payload: OptimizeRequest, db: Session = Depends(get_db)):
    repo = CatalogueRepository(db)
    clubs = repo.get_clubs(payload.club_ids)
    unknown = sorted(set(payload.club_ids) - {club.club_id for club in clubs})
    if unknown:
        logger.warning("Ignoring unknown club ids: %s", unknown)

    competitions = sorted(build_selection(clubs, payload.competitions))
    club_ids = [club.club_id for club in clubs]
    if not clubs or not competitions:
        return OptimizeResponse(
            club_ids=club_ids,
            competitions=competitions,
            recommendations=[],
            count=0,
            message=SELECTION_REQUIRED_MESSAGE,
        )

    snapshot = snapshot_settings(get_or_create_settings(db))
    targets = (
        snapshot.default_target_coverages
        if payload.target_coverages is None
        else tuple(payload.target_coverages)
    )
    options = options_from_settings(
        snapshot,
        max_combination_size=payload.max_combination_size,
        target_coverages=targets,
        excluded_provider_ids=tuple(sorted(set(payload.excluded_provider_ids))),
        budget_limit=payload.budget_limit,
        max_results=payload.limit,
        named_tiers=payload.named_tiers,
    )

    results = optimize_cached(
        get_optimizer_cache(),
        clubs,
        competitions,
        repo.list_providers(),
        repo.list_leagues(),
        options,
    )
    logger.info(
        "Optimize clubs=%s competitions=%s targets=%s named_tiers=%s results=%s",
        club_ids,
        ",".join(competitions),
        list(targets),
        payload.named_tiers,
        len(results),
    )
    return OptimizeResponse(
        club_ids=club_ids,
        competitions=competitions,
        recommendations=[RecommendationOut.from_recommendation(rec) for rec in results],
        count=len(results),
        message=None if results else NO_RESULTS_MESSAGE,
    )


@app.post("/api/optimize/cache/clear")
def api_clear_cache():
    return {"ok": True, "cleared": get_optimizer_cache().clear()}


def _settings_out(settings) -> SettingsOut:
    snapshot = snapshot_settings(settings)
    return SettingsOut(
        max_combination_size=snapshot.max_combination_size,
        exhaustive_combination_size=snapshot.exhaustive_combination_size,
        top_providers_limit=snapshot.top_providers_limit,
        max_combinations=snapshot.max_combinations,
        default_target_coverages=list(snapshot.default_target_coverages),
        savings_rate=snapshot.savings_rate,
        max_results=snapshot.max_results,
        updated_at_utc=settings.updated_at_utc,
    )


@app.get("/api/settings", response_model=SettingsOut)
def api_get_settings(db: Session = Depends(get_db)):
    return _settings_out(get_or_create_settings(db))


@app.put("/api/settings", response_model=SettingsOut)
def api_update_settings(payload: SettingsUpdate, db: Session = Depends(get_db)):
    settings = get_or_create_settings(db)
    updates = payload.model_dump(exclude_none=True)

    targets = updates.pop("default_target_coverages", None)
    if targets is not None:
        if any(not 0 <= target <= 100 for target in targets):
            raise HTTPException(status_code=400, detail="target coverages must be between 0 and 100")
        settings.default_target_coverages = format_target_coverages(targets)
    for name, value in updates.items():
        setattr(settings, name, value)
    if settings.exhaustive_combination_size > settings.max_combination_size:
        db.rollback()
        raise HTTPException(
            status_code=400,
            detail="exhaustive_combination_size must not exceed max_combination_size",
        )

    settings.updated_at_utc = datetime.now(timezone.utc)
    db.commit()
    db.refresh(settings)
    get_optimizer_cache().clear()
    logger.info("Optimizer settings updated: %s", sorted(payload.model_dump(exclude_none=True)))
    return _settings_out(settings)


@app.get("/api/logs")
def api_logs(limit: int = 100, level: str | None = None):
    handler = get_buffer_handler()
    try:
        entries = handler.entries(limit=limit, min_level=level)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"entries": entries}
