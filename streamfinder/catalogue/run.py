"""CLI entrypoint for catalogue sync runs."""

from __future__ import annotations

import argparse
import logging

from streamfinder.catalogue.supabase_client import SupabaseConfigError
from streamfinder.catalogue.sync import SyncResult, sync_from_file, sync_from_supabase

STALE_CACHE_NOTE = (
    "A running API server keeps its cached optimizer results; "
    "call POST /api/optimize/cache/clear there to pick up the new catalogue."
)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Sync clubs, leagues and streaming providers into the local database.",
        epilog=STALE_CACHE_NOTE,
    )

    source_group = parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument(
        "--supabase",
        action="store_true",
        help="Fetch the catalogue from Supabase (SUPABASE_URL / SUPABASE_ANON_KEY).",
    )
    source_group.add_argument(
        "--file",
        type=str,
        help="Path to a JSON export with clubs, leagues and streaming arrays.",
    )

    return parser.parse_args()


def _log_result(result: SyncResult) -> None:
    for table, counts in result.tables.items():
        logging.info(
            "Done %s: fetched=%s inserted=%s updated=%s skipped=%s errors=%s",
            table,
            counts.total_fetched,
            counts.inserted,
            counts.updated,
            counts.skipped,
            counts.errors,
        )


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    args = _parse_args()
    if args.file:
        logging.info("Starting catalogue sync from file=%s", args.file)
        try:
            result = sync_from_file(args.file)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Cannot read catalogue export: {exc}") from exc
    else:
        logging.info("Starting catalogue sync from Supabase")
        try:
            result = sync_from_supabase()
        except SupabaseConfigError as exc:
            raise SystemExit(str(exc)) from exc

    _log_result(result)
    if result.changed:
        logging.info(STALE_CACHE_NOTE)
    if result.errors:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
