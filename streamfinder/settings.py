from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from streamfinder.models import AppSettings
from streamfinder.optimizer.types import OptimizeOptions

logger = logging.getLogger(__name__)

MAX_COMBINATION_SIZE_LIMIT = 4


@dataclass(frozen=True)
class SettingsSnapshot:
    id: int
    max_combination_size: int
    exhaustive_combination_size: int
    top_providers_limit: int
    max_combinations: int
    default_target_coverages: tuple[int, ...]
    savings_rate: float
    max_results: int


def _default_settings() -> AppSettings:
    return AppSettings(
        id=1,
        max_combination_size=3,
        exhaustive_combination_size=2,
        top_providers_limit=8,
        max_combinations=5000,
        default_target_coverages="100,90,66",
        savings_rate=0.1,
        max_results=50,
        updated_at_utc=datetime.now(timezone.utc),
    )


def get_or_create_settings(db) -> AppSettings:
    settings = db.query(AppSettings).filter(AppSettings.id == 1).one_or_none()
    if settings:
        return settings
    settings = _default_settings()
    db.add(settings)
    db.commit()
    db.refresh(settings)
    return settings


def parse_target_coverages(raw: str | None) -> tuple[int, ...]:
    """Parse "100,90,66" into (100, 90, 66); raises ValueError on bad input."""

    targets: list[int] = []
    for part in (raw or "").split(","):
        part = part.strip()
        if not part:
            continue
        value = int(part)
        if not 0 <= value <= 100:
            raise ValueError(f"target coverage out of range: {value}")
        targets.append(value)
    return tuple(targets)


def format_target_coverages(targets) -> str:
    return ",".join(str(int(t)) for t in targets)


def snapshot_settings(settings: AppSettings) -> SettingsSnapshot:
    try:
        targets = parse_target_coverages(settings.default_target_coverages)
    except ValueError:
        logger.error(
            "Invalid default_target_coverages=%r, falling back to none",
            settings.default_target_coverages,
        )
        targets = ()
    return SettingsSnapshot(
        id=settings.id,
        max_combination_size=settings.max_combination_size,
        exhaustive_combination_size=settings.exhaustive_combination_size,
        top_providers_limit=settings.top_providers_limit,
        max_combinations=settings.max_combinations,
        default_target_coverages=targets,
        savings_rate=settings.savings_rate,
        max_results=settings.max_results,
    )


def options_from_settings(snapshot: SettingsSnapshot, **overrides) -> OptimizeOptions:
    values = {
        "max_combination_size": snapshot.max_combination_size,
        "exhaustive_combination_size": snapshot.exhaustive_combination_size,
        "top_providers_limit": snapshot.top_providers_limit,
        "max_combinations": snapshot.max_combinations,
        "savings_rate": snapshot.savings_rate,
        "max_results": snapshot.max_results,
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    values["max_combination_size"] = min(values["max_combination_size"], MAX_COMBINATION_SIZE_LIMIT)
    return OptimizeOptions(**values)
