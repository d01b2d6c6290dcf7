"""Inspirational quote route."""
from __future__ import annotations

from fastapi import APIRouter, Request, Response

from lifecoach.api.schemas.quote import QuoteResponse
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.quote_service import fetch_random_quote

router = APIRouter()


@router.get("/quotes/random", response_model=QuoteResponse, tags=["quotes"])
def random_quote(request: Request, response: Response) -> QuoteResponse:
    """Proxy a random quote; falls back to a built-in quote instead of failing."""
    request_id = getattr(request.state, "request_id", None)
    with trace("quotes.random", metadata={"request_id": request_id}, request_id=request_id):
        quote = fetch_random_quote()

    log_metric("quotes.random.fallback", 1 if quote.fallback else 0)
    response.headers["Cache-Control"] = "no-store"
    return QuoteResponse(
        quote=quote.quote,
        author=quote.author,
        fallback=quote.fallback,
        request_id=request_id or "",
    )
