"""Activity catalog routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from lifecoach.api.schemas.activity import (
    ActivityDeleteResponse,
    ActivityEnvelope,
    ActivityListResponse,
    ActivityPayload,
    ActivityResponse,
)
from lifecoach.db.deps import get_db
from lifecoach.db.models.activity import Activity
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.activity_service import (
    create_activity,
    delete_activity,
    list_activities,
    update_activity,
)
from lifecoach.services.user_service import get_or_create_user

router = APIRouter()


@router.get("/activities", response_model=ActivityListResponse, tags=["activities"])
def list_activities_endpoint(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the activities"),
    db: Session = Depends(get_db),
) -> ActivityListResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "activity.list",
        metadata={"route": "/activities", "user_id": str(user_id), "request_id": request_id},
        user_id=str(user_id),
        request_id=request_id,
    ):
        activities = list_activities(db, user_id)

    log_metric("activity.list.count", len(activities), metadata={"user_id": str(user_id)})
    return ActivityListResponse(
        activities=[ActivityResponse.model_validate(activity) for activity in activities],
        request_id=request_id or "",
    )


@router.post(
    "/activities",
    response_model=ActivityEnvelope,
    status_code=status.HTTP_201_CREATED,
    tags=["activities"],
)
def create_activity_endpoint(
    payload: ActivityPayload,
    http_request: Request,
    db: Session = Depends(get_db),
) -> ActivityEnvelope:
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {
        "route": "/activities",
        "user_id": str(payload.user_id),
        "priority": payload.priority.value,
        "effort_level": payload.effort_level.value,
        "request_id": request_id,
    }
    with trace("activity.create", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
        get_or_create_user(db, payload.user_id)
        activity = create_activity(
            db,
            user_id=payload.user_id,
            name=payload.name,
            priority=payload.priority,
            effort_level=payload.effort_level,
        )

    log_metric(
        "activity.create.success",
        1,
        metadata={"user_id": str(payload.user_id), "priority": payload.priority.value},
    )
    return ActivityEnvelope(activity=ActivityResponse.model_validate(activity), request_id=request_id or "")


@router.put("/activities/{activity_id}", response_model=ActivityEnvelope, tags=["activities"])
def update_activity_endpoint(
    activity_id: UUID,
    payload: ActivityPayload,
    http_request: Request,
    db: Session = Depends(get_db),
) -> ActivityEnvelope:
    activity = _owned_activity(db, activity_id, payload.user_id)
    request_id = getattr(http_request.state, "request_id", None)

    with trace(
        "activity.update",
        metadata={"route": f"/activities/{activity_id}", "activity_id": str(activity_id), "request_id": request_id},
        user_id=str(payload.user_id),
        request_id=request_id,
    ):
        activity = update_activity(
            db,
            activity,
            name=payload.name,
            priority=payload.priority,
            effort_level=payload.effort_level,
        )

    log_metric("activity.update.success", 1, metadata={"activity_id": str(activity_id)})
    return ActivityEnvelope(activity=ActivityResponse.model_validate(activity), request_id=request_id or "")


@router.delete("/activities/{activity_id}", response_model=ActivityDeleteResponse, tags=["activities"])
def delete_activity_endpoint(
    activity_id: UUID,
    http_request: Request,
    user_id: UUID = Query(..., description="User ID owning the activity"),
    db: Session = Depends(get_db),
) -> ActivityDeleteResponse:
    activity = _owned_activity(db, activity_id, user_id)
    request_id = getattr(http_request.state, "request_id", None)

    with trace(
        "activity.delete",
        metadata={"route": f"/activities/{activity_id}", "activity_id": str(activity_id), "request_id": request_id},
        user_id=str(user_id),
        request_id=request_id,
    ):
        delete_activity(db, activity)

    log_metric("activity.delete.success", 1, metadata={"activity_id": str(activity_id)})
    return ActivityDeleteResponse(message="Activity deleted successfully", request_id=request_id or "")


def _owned_activity(db: Session, activity_id: UUID, user_id: UUID) -> Activity:
    activity = db.get(Activity, activity_id)
    if not activity:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Activity not found")
    if activity.user_id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Activity does not belong to user")
    return activity
