"""Sync the streaming catalogue into the local database."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable

from pydantic import BaseModel
from sqlalchemy.orm import Session

from streamfinder.catalogue.parser import parse_clubs, parse_leagues, parse_providers
from streamfinder.catalogue.supabase_client import fetch_catalogue
from streamfinder.db import SessionLocal, init_db
from streamfinder.models import Club, League, StreamingProvider
from streamfinder.optimizer.cache import get_optimizer_cache

logger = logging.getLogger(__name__)


@dataclass
class TableSyncResult:
    total_fetched: int = 0
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0


@dataclass
class SyncResult:
    tables: dict[str, TableSyncResult] = field(default_factory=dict)

    def table(self, name: str) -> TableSyncResult:
        return self.tables.setdefault(name, TableSyncResult())

    @property
    def errors(self) -> int:
        return sum(t.errors for t in self.tables.values())

    @property
    def changed(self) -> int:
        return sum(t.inserted + t.updated for t in self.tables.values())


# table -> (ORM model, primary key attribute, row parser)
_TABLES: dict[str, tuple[type, str, Callable[[Iterable[Any]], list]]] = {
    "clubs": (Club, "club_id", parse_clubs),
    "leagues": (League, "league_id", parse_leagues),
    "streaming": (StreamingProvider, "streamer_id", parse_providers),
}


def _apply_dto(instance, dto: BaseModel) -> bool:
    changed = False
    for name, value in dto.model_dump().items():
        if getattr(instance, name) != value:
            setattr(instance, name, value)
            changed = True
    return changed


def _upsert_rows(
    db: Session,
    model: type,
    pk_attr: str,
    dtos: Iterable[BaseModel],
    result: TableSyncResult,
) -> None:
    # One savepoint per row: a failing row rolls back alone.
    for dto in dtos:
        pk = getattr(dto, pk_attr)
        try:
            with db.begin_nested():
                existing = db.get(model, pk)
                if existing is None:
                    db.add(model(**dto.model_dump()))
                    db.flush()
                    action = "inserted"
                elif _apply_dto(existing, dto):
                    db.flush()
                    action = "updated"
                else:
                    action = "skipped"
        except Exception:
            result.errors += 1
            logger.exception("Failed upserting %s %s=%s", model.__tablename__, pk_attr, pk)
            continue
        setattr(result, action, getattr(result, action) + 1)
        if action != "skipped":
            logger.info("%s %s %s=%s", action.capitalize(), model.__tablename__, pk_attr, pk)


def sync_catalogue(rows_by_table: dict[str, list[dict[str, Any]] | None]) -> SyncResult:
    """Parse and upsert raw rows per table; ``None`` marks a failed fetch."""

    init_db()
    result = SyncResult()

    with SessionLocal() as db:
        for table, (model, pk_attr, parse) in _TABLES.items():
            table_result = result.table(table)
            rows = rows_by_table.get(table)
            if rows is None:
                table_result.errors += 1
                logger.error("No rows available for table=%s, keeping local copy", table)
                continue
            dtos = parse(rows)
            table_result.total_fetched += len(dtos)
            logger.info("Parsed %s rows for table=%s", len(dtos), table)
            _upsert_rows(db, model, pk_attr, dtos, table_result)
        db.commit()

    if result.changed:
        get_optimizer_cache().clear()
    return result


def sync_from_supabase() -> SyncResult:
    rows_by_table: dict[str, list[dict[str, Any]] | None] = {}
    for table, payload in fetch_catalogue().items():
        if not payload.get("ok"):
            logger.error(
                "Fetch error table=%s error=%s details=%s",
                table,
                payload.get("error"),
                payload.get("details"),
            )
            rows_by_table[table] = None
            continue
        rows_by_table[table] = payload["rows"]
    return sync_catalogue(rows_by_table)


def sync_from_file(path: str | Path) -> SyncResult:
    """Load an export holding ``clubs``, ``leagues`` and ``streaming`` arrays."""

    with open(path, encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{path}: expected a JSON object with catalogue tables")
    rows_by_table: dict[str, list[dict[str, Any]] | None] = {}
    for table in _TABLES:
        rows = payload.get(table)
        rows_by_table[table] = rows if isinstance(rows, list) else None
    return sync_catalogue(rows_by_table)
