"""Coaching suggestion route."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from lifecoach.api.schemas.coach import CoachRequest, CoachResponse, SuggestedActivity, SuggestionPayload
from lifecoach.core.errors import InvalidArgument
from lifecoach.db.deps import get_db
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.activity_service import load_catalog
from lifecoach.services.coach_selector import select_activity

router = APIRouter()


@router.post("/coach", response_model=CoachResponse, tags=["coach"])
def get_coaching_suggestion(
    payload: CoachRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> CoachResponse:
    """Suggest one activity for the user's current energy and time of day."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {
        "route": "/coach",
        "user_id": str(payload.user_id),
        "session_type": payload.session_type.value,
        "energy_level": payload.energy_level.value,
        "request_id": request_id,
    }
    start = perf_counter()

    with trace("coach.suggest", metadata=metadata, user_id=str(payload.user_id), request_id=request_id) as span:
        catalog = load_catalog(db, payload.user_id)
        try:
            suggestion = select_activity(catalog, payload.energy_level, payload.session_type)
        except InvalidArgument as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

        if span:
            span.update(
                metadata={
                    **metadata,
                    "catalog_size": len(catalog),
                    "suggested": suggestion.main_activity is not None,
                }
            )

    latency_ms = (perf_counter() - start) * 1000
    metric_metadata = {"user_id": str(payload.user_id), "energy_level": payload.energy_level.value}
    log_metric("coach.suggest.success", 1, metadata=metric_metadata)
    log_metric("coach.suggest.rest", 1 if suggestion.main_activity is None else 0, metadata=metric_metadata)
    log_metric("coach.suggest.catalog_size", len(catalog), metadata=metric_metadata)
    log_metric("coach.suggest.latency_ms", latency_ms, metadata=metric_metadata)

    main_activity = (
        SuggestedActivity.model_validate(suggestion.main_activity) if suggestion.main_activity is not None else None
    )
    return CoachResponse(
        suggestion=SuggestionPayload(
            main_activity=main_activity,
            quote=suggestion.quote,
            reflection_prompt=suggestion.reflection_prompt,
        ),
        request_id=request_id or "",
    )
