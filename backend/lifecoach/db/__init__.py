"""Database utilities and models."""

from lifecoach.db.base import Base
from lifecoach.db import models  # noqa: F401  (imported for side effects)

__all__ = ["Base"]
