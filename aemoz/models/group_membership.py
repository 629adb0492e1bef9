"""SQLAlchemy model for group memberships."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship

from aemoz.models.base import Base, utcnow


class GroupMembership(Base):
    """Places one participant in one group.

    ``participant_id`` is globally unique: a participant can sit in at most
    one group at any time.
    """

    __tablename__ = "group_memberships"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    group_id = Column(
        Uuid,
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    participant_id = Column(
        Uuid,
        ForeignKey("participants.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    group = relationship("Group", back_populates="memberships")
    participant = relationship("Participant", back_populates="membership")


__all__ = ["GroupMembership"]
