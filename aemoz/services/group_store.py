"""Read path for the current draw, aggregate stats and full reset."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select
from sqlalchemy.orm import selectinload

from aemoz.models.group import Group
from aemoz.models.group_membership import GroupMembership
from aemoz.models.participant import Participant
from aemoz.services.draw import DrawnGroup, order_members
from aemoz.services.errors import NotFound

if TYPE_CHECKING:
    from aemoz.database import Database

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CurrentDraw:
    groups: list[DrawnGroup]
    drawn_at: datetime

    @property
    def total_members(self) -> int:
        return sum(len(group.members) for group in self.groups)


@dataclass(frozen=True, slots=True)
class StoreStats:
    participants: int
    courses: int
    groups: int


class GroupStore:
    """Persisted groups and memberships."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def get_current_draw(self) -> CurrentDraw:
        """Return the last committed draw, groups by position and members by name."""

        async def _load() -> list[Group]:
            async with self.db.session_scope() as session:
                result = await session.execute(
                    select(Group)
                    .options(
                        selectinload(Group.memberships).selectinload(
                            GroupMembership.participant
                        )
                    )
                    .order_by(Group.position)
                )
                return list(result.scalars().all())

        groups = await self.db.run(_load)
        if not groups:
            raise NotFound("No draw has been performed yet")

        drawn = [
            DrawnGroup(
                id=group.id,
                name=group.name,
                position=group.position,
                color=group.color,
                created_at=group.created_at,
                members=order_members(
                    [membership.participant for membership in group.memberships]
                ),
            )
            for group in groups
        ]
        return CurrentDraw(groups=drawn, drawn_at=groups[0].created_at)

    async def clear_all(self) -> None:
        """Delete memberships, groups and participants as one unit."""

        async def _clear() -> None:
            async with self.db.write_lock:
                async with self.db.transaction() as session:
                    await self.db.lock_tables(
                        session, "participants", "group_memberships", "groups"
                    )
                    await session.execute(delete(GroupMembership))
                    await session.execute(delete(Group))
                    await session.execute(delete(Participant))

        await self.db.run(_clear)
        logger.info("Cleared all participants and groups")

    async def get_stats(self) -> StoreStats:
        async def _stats() -> StoreStats:
            async with self.db.session_scope() as session:
                participants = await session.execute(
                    select(func.count(Participant.id))
                )
                courses = await session.execute(
                    select(func.count(func.distinct(Participant.course)))
                )
                groups = await session.execute(select(func.count(Group.id)))
                return StoreStats(
                    participants=participants.scalar_one(),
                    courses=courses.scalar_one(),
                    groups=groups.scalar_one(),
                )

        return await self.db.run(_stats)


__all__ = ["GroupStore", "CurrentDraw", "StoreStats"]
