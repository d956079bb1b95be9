"""Supabase (PostgREST) client for fetching catalogue tables."""

from __future__ import annotations

import logging
import os
from typing import Any

import requests

logger = logging.getLogger(__name__)

SUPABASE_CONNECT_TIMEOUT_SECONDS = 10
SUPABASE_READ_TIMEOUT_SECONDS = 30
MAX_BODY_SNIPPET = 300

# table -> default order clause
CATALOGUE_TABLES: dict[str, str] = {
    "clubs": "name.asc",
    "leagues": "popularity.desc.nullslast",
    "streaming": "provider_name.asc",
}


class SupabaseConfigError(RuntimeError):
    pass


def _config() -> tuple[str, str]:
    base_url = (os.getenv("SUPABASE_URL") or "").strip().rstrip("/")
    api_key = (os.getenv("SUPABASE_ANON_KEY") or "").strip()
    if not base_url or not api_key:
        raise SupabaseConfigError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    return base_url, api_key


def build_table_url(base_url: str, table: str) -> str:
    return f"{base_url}/rest/v1/{table}"


def fetch_table(table: str, order: str | None = None) -> dict[str, Any]:
    """Fetch all rows of a catalogue table with a single request.

    Returns ``{"ok": True, "rows": [...]}`` on success. On failure, returns a
    controlled error dict; nothing is retried.
    """

    base_url, api_key = _config()
    url = build_table_url(base_url, table)
    params = {"select": "*"}
    order_clause = order or CATALOGUE_TABLES.get(table)
    if order_clause:
        params["order"] = order_clause
    headers = {
        "apikey": api_key,
        "Authorization": f"Bearer {api_key}",
        "Accept": "application/json",
    }

    try:
        response = requests.get(
            url,
            headers=headers,
            params=params,
            timeout=(SUPABASE_CONNECT_TIMEOUT_SECONDS, SUPABASE_READ_TIMEOUT_SECONDS),
        )
    except requests.RequestException as exc:
        logger.error("Supabase request failed table=%s error=%s", table, exc)
        return {
            "ok": False,
            "error": "Failed to fetch catalogue table",
            "details": str(exc),
            "status": None,
            "table": table,
        }

    if response.status_code != 200:
        body_snippet = (response.text or "")[:MAX_BODY_SNIPPET]
        logger.error(
            "Supabase non-200 status=%s table=%s body=%s",
            response.status_code,
            table,
            body_snippet,
        )
        return {
            "ok": False,
            "error": "Supabase returned non-200 response",
            "details": body_snippet,
            "status": response.status_code,
            "table": table,
        }

    try:
        rows = response.json()
    except ValueError as exc:
        return {
            "ok": False,
            "error": "Supabase returned non-JSON response",
            "details": str(exc),
            "status": response.status_code,
            "table": table,
        }
    if not isinstance(rows, list):
        return {
            "ok": False,
            "error": "Supabase response is not a row list",
            "details": type(rows).__name__,
            "status": response.status_code,
            "table": table,
        }

    logger.info("Fetched %s rows from table=%s", len(rows), table)
    return {"ok": True, "rows": rows, "table": table}


def fetch_catalogue() -> dict[str, dict[str, Any]]:
    return {table: fetch_table(table) for table in CATALOGUE_TABLES}
