"""Schemas for the inspirational quote endpoint."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class QuoteResponse(BaseModel):
    quote: str
    author: Optional[str]
    fallback: bool
    request_id: str
