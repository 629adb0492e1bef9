"""SQLAlchemy model defining drawn groups."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Uuid, func
from sqlalchemy.orm import relationship

from aemoz.models.base import Base, utcnow


class Group(Base):
    """One team produced by a draw; the full table is the current draw."""

    __tablename__ = "groups"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    position = Column(Integer, nullable=False, unique=True)
    color = Column(String(7), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )

    memberships = relationship(
        "GroupMembership",
        back_populates="group",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


__all__ = ["Group"]
