import logging
import os
from typing import Any, Dict, Optional

import requests
from flask import current_app


TMDB_API_BASE = "https://api.themoviedb.org/3"

log = logging.getLogger(__name__)


def _auth_headers() -> Dict[str, str]:
    """
    Prefer Bearer token if available; otherwise return empty headers and rely on api_key query.
    """
    token = current_app.config.get("TMDB_BEARER_TOKEN") or os.getenv("TMDB_BEARER_TOKEN", "")
    headers = {}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _api_key_param() -> Dict[str, str]:
    if "Authorization" in _auth_headers():
        return {}
    api_key = current_app.config.get("TMDB_API_KEY") or os.getenv("TMDB_API_KEY", "")
    return {"api_key": api_key} if api_key else {}


def _extract_year(date_str: Optional[str]) -> Optional[int]:
    if not date_str or len(date_str) < 4:
        return None
    try:
        return int(date_str[:4])
    except ValueError:
        return None


def movie_details(tmdb_id: int) -> Optional[Dict[str, Any]]:
    """
    Get details for a movie id. Returns a dict with the catalog fields
    (genre names included), or None when TMDB can't be reached or has no such movie.
    """
    url = f"{TMDB_API_BASE}/movie/{tmdb_id}"
    try:
        resp = requests.get(url, headers=_auth_headers(), params=_api_key_param(), timeout=10)
        resp.raise_for_status()
        m = resp.json() or {}
    except (requests.RequestException, ValueError) as exc:
        log.error("TMDB movie details failed for %s: %s", tmdb_id, exc)
        return None

    return {
        "tmdb_id": m.get("id"),
        "title": m.get("title") or m.get("original_title"),
        "original_title": m.get("original_title"),
        "year": _extract_year(m.get("release_date")),
        "poster_path": m.get("poster_path"),
        "overview": m.get("overview"),
        "runtime": m.get("runtime"),
        "genres": [g.get("name") for g in m.get("genres", []) if g.get("name")],
    }
