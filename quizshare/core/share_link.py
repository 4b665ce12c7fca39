"""Shareable quiz links of the form ``<origin>/?quiz=<quiz id>``."""

from __future__ import annotations

from urllib.parse import parse_qs, urlencode, urlsplit

from quizshare.constants.network_constants import SHARE_QUERY_PARAMETER


def build_share_url(origin: str, quiz_id: str) -> str:
    base = origin.rstrip("/")
    return f"{base}/?{urlencode({SHARE_QUERY_PARAMETER: quiz_id})}"


def parse_share_url(url: str) -> str | None:
    """Return the quiz id carried by a share link, or ``None`` when absent."""
    query = urlsplit(url).query
    values = parse_qs(query).get(SHARE_QUERY_PARAMETER)
    if not values:
        return None
    quiz_id = values[0].strip()
    return quiz_id or None
