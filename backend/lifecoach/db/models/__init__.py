"""ORM models exposed for metadata discovery."""
from lifecoach.db.models.action_log import ActionLog
from lifecoach.db.models.activity import Activity
from lifecoach.db.models.coaching_session import CoachingSession, SessionActivity
from lifecoach.db.models.nudge import Nudge
from lifecoach.db.models.user import User

__all__ = [
    "ActionLog",
    "Activity",
    "CoachingSession",
    "Nudge",
    "SessionActivity",
    "User",
]
