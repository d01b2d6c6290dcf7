"""Weekly review aggregation over logged coaching sessions."""
from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Optional, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from lifecoach.api.schemas.coach import SuggestedActivity
from lifecoach.api.schemas.weekly_review import (
    ActivityTime,
    CoachMessage,
    PriorityMinutes,
    WeeklyReview,
    WeekWindow,
)
from lifecoach.core.enums import Priority
from lifecoach.services.session_service import SessionRecord, list_sessions

TOP_ACTIVITY_LIMIT = 5
HIGH_PRIORITY_FOCUS_THRESHOLD = 60


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def week_window(week_start: Optional[date] = None, *, today: Optional[date] = None) -> WeekWindow:
    """Sunday-to-Saturday window; defaults to the week containing ``today`` (UTC)."""
    if week_start is None:
        today = today or utc_today()
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
    return WeekWindow(start=week_start, end=week_start + timedelta(days=6))


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes} min"
    hours, mins = divmod(minutes, 60)
    if mins == 0:
        return f"{hours} hr"
    return f"{hours} hr {mins} min"


def get_weekly_review(db: Session, user_id: UUID, week_start: Optional[date] = None) -> WeeklyReview:
    week = week_window(week_start)
    records = [record for record in list_sessions(db, user_id) if _in_week(record.session.created_at, week)]
    return build_weekly_review(records, week)


def build_weekly_review(records: Sequence[SessionRecord], week: WeekWindow) -> WeeklyReview:
    counted = [
        record
        for record in records
        if record.main_activity is not None and record.session.duration_minutes
    ]

    by_activity: Dict[UUID, ActivityTime] = {}
    minutes = PriorityMinutes()
    for record in counted:
        activity = record.main_activity
        duration = int(record.session.duration_minutes)
        entry = by_activity.get(activity.id)
        if entry:
            entry.total_minutes += duration
            entry.session_count += 1
        else:
            by_activity[activity.id] = ActivityTime(
                activity=SuggestedActivity.model_validate(activity),
                total_minutes=duration,
                session_count=1,
            )

        priority = Priority(activity.priority)
        setattr(minutes, priority.value, getattr(minutes, priority.value) + duration)
        minutes.total += duration

    top = sorted(by_activity.values(), key=lambda item: item.total_minutes, reverse=True)[:TOP_ACTIVITY_LIMIT]
    percentage = _percentage(minutes.high, minutes.total)

    return WeeklyReview(
        week=week,
        session_count=len(records),
        top_activities=top,
        priority_minutes=minutes,
        high_priority_percentage=percentage,
        coach_message=coach_message(minutes, percentage),
    )


def coach_message(minutes: PriorityMinutes, high_percentage: int) -> CoachMessage:
    if minutes.total == 0:
        return CoachMessage(
            title="A Fresh Beginning",
            message=(
                "This week is a blank page, full of possibility. Each moment is an opportunity to "
                "return to your practice with fresh eyes and an open heart. What would you like to "
                "cultivate this week?"
            ),
        )

    if high_percentage >= HIGH_PRIORITY_FOCUS_THRESHOLD:
        return CoachMessage(
            title="Tending to What Matters",
            message=(
                "Your practice this week has been deeply aligned with what matters most: "
                f"{high_percentage}% of your time has been given to high-priority tasks. This is the "
                "work of a mindful practitioner, tending to what truly nourishes your path. "
                "Take a moment to appreciate this dedication. Perhaps this is a good time to rest and "
                "let your efforts settle, like allowing the soil to absorb the rain before planting "
                "again. Balance is the key. Sometimes the most compassionate act is to pause and let "
                "yourself be held by stillness."
            ),
        )

    message = (
        f"This week, you've given {format_duration(minutes.high)} to high-priority tasks "
        f"({high_percentage}% of your time). "
    )
    if minutes.medium > 0 or minutes.low > 0:
        message += (
            "There's a beautiful balance here: you've also honored activities that bring you joy and "
            "nourishment. In the practice of mindful living, we're invited to hold both, tending to "
            "what needs attention while also allowing space for what brings ease and delight. "
            "As you move forward, you might gently notice where a bit more time on high-priority "
            "tasks could serve your deepest intentions, without losing the wisdom of rest and play. "
            "The focused work and the moments of ease are all part of the path."
        )
    else:
        message += (
            "Every journey begins with awareness. Perhaps this week you might gently explore giving "
            "a bit more attention to high-priority tasks when your energy feels ready. "
            'Not from a place of urgency or "should," but from a place of care: like tending a '
            "garden, we nurture what needs our attention with patience and presence."
        )
    return CoachMessage(title="A Gentle Reflection", message=message)


def _percentage(part: int, total: int) -> int:
    if total == 0:
        return 0
    # Half-up rounding.
    return math.floor(part * 100 / total + 0.5)


def _in_week(created_at: datetime, week: WeekWindow) -> bool:
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(timezone.utc)
    return week.start <= created_at.date() <= week.end
