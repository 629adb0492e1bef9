"""SQLAlchemy model for registered participants."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from aemoz.models.base import Base, utcnow


class Participant(Base):
    """A student registered for the draw."""

    __tablename__ = "participants"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    course = Column(String(255), nullable=False, index=True)
    semester = Column(Integer, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )

    __table_args__ = (
        CheckConstraint(
            "semester >= 1 AND semester <= 10",
            name="ck_participants_semester_range",
        ),
        Index(
            "uq_participants_name_course",
            func.lower(name),
            course,
            unique=True,
        ),
    )

    membership = relationship(
        "GroupMembership",
        back_populates="participant",
        uselist=False,
        passive_deletes=True,
    )


__all__ = ["Participant"]
