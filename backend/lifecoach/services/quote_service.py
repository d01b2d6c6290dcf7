"""Random inspirational quote fetched from an external API."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from lifecoach.core.config import settings
from lifecoach.services.coach_copy import GENERAL_QUOTE

logger = logging.getLogger(__name__)


@dataclass
class Quote:
    quote: str
    author: Optional[str]
    fallback: bool = False


FALLBACK_QUOTE = Quote(quote=GENERAL_QUOTE, author=None, fallback=True)


class QuotePayloadError(ValueError):
    """Raised when the quote API answers with something we cannot read."""


def fetch_random_quote(client: Optional[httpx.Client] = None) -> Quote:
    """Fetch a quote; any failure yields the general coaching quote instead."""
    try:
        if client is None:
            with httpx.Client(timeout=settings.quote_api_timeout_seconds) as owned:
                data = _request(owned)
        else:
            data = _request(client)
        return parse_quote_payload(data)
    except (httpx.HTTPError, QuotePayloadError, ValueError) as exc:
        logger.warning("Quote API unavailable, using fallback: %s", exc)
        return FALLBACK_QUOTE


def parse_quote_payload(data: Any) -> Quote:
    """Normalize the shapes the quote API is known to return."""
    author: Optional[str] = None
    if isinstance(data, list):
        if not data:
            raise QuotePayloadError("empty list")
        data = data[0]

    if isinstance(data, str):
        text = data
    elif isinstance(data, dict):
        text = data.get("quote") or data.get("text") or data.get("message") or ""
        author = data.get("author") or data.get("source")
    else:
        raise QuotePayloadError(f"unexpected payload type {type(data).__name__}")

    if not isinstance(text, str) or not text.strip():
        raise QuotePayloadError("quote is empty")
    if author is not None:
        author = str(author).strip() or None
    return Quote(quote=text.strip(), author=author)


def _request(client: httpx.Client) -> Any:
    response = client.get(
        settings.quote_api_url,
        headers={"Accept": "application/json", "Cache-Control": "no-store"},
    )
    response.raise_for_status()
    return response.json()
