"""Declarative base shared by all ORM models."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware timestamp used for column defaults."""

    return datetime.now(timezone.utc)


__all__ = ["Base", "utcnow"]
