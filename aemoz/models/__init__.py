"""SQLAlchemy models for the draw service."""

from .base import Base
from .group import Group  # noqa: F401
from .group_membership import GroupMembership  # noqa: F401
from .participant import Participant  # noqa: F401

__all__ = [
    "Base",
    "Participant",
    "Group",
    "GroupMembership",
]
