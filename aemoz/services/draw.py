"""Grouping engine: randomised partition of all participants into teams of four.

A draw replaces the previous one wholesale. Clearing the old groups and
writing the new ones happens inside a single transaction, under the
database write lock, so readers only ever see a complete draw.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from aemoz.models.base import utcnow
from aemoz.models.group import Group
from aemoz.models.group_membership import GroupMembership
from aemoz.models.participant import Participant
from aemoz.services.errors import Internal, PreconditionFailed, ServiceError
from aemoz.telemetry import record_draw

if TYPE_CHECKING:
    from aemoz.database import Database

logger = logging.getLogger(__name__)

T = TypeVar("T")

GROUP_SIZE = 4
MIN_PARTICIPANTS = 16
MIN_COURSES = 4

PALETTE: tuple[str, ...] = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FECA57",
    "#FF9FF3",
    "#54A0FF",
    "#5F27CD",
    "#00D2D3",
    "#FF9F43",
    "#8C7AE6",
    "#00A8FF",
)


def fisher_yates_shuffle(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a uniformly shuffled copy of ``items``."""

    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def partition(items: Sequence[T], size: int = GROUP_SIZE) -> tuple[list[list[T]], list[T]]:
    """Split into consecutive full chunks of ``size`` plus the leftover tail."""

    if size < 1:
        raise ValueError("size must be positive")
    full = len(items) // size
    chunks = [list(items[i * size:(i + 1) * size]) for i in range(full)]
    return chunks, list(items[full * size:])


def group_name(index: int) -> str:
    return f"Group {index + 1}"


def group_color(index: int) -> str:
    return PALETTE[index % len(PALETTE)]


def order_members(members: Sequence[Participant]) -> list[Participant]:
    return sorted(members, key=lambda participant: (participant.name, str(participant.id)))


@dataclass(slots=True)
class DrawnGroup:
    id: UUID
    name: str
    position: int
    color: str
    created_at: datetime
    members: list[Participant] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DrawStats:
    total_participants: int
    total_groups: int
    participants_in_groups: int
    remaining_participants: int

    @classmethod
    def for_count(cls, eligible: int, size: int = GROUP_SIZE) -> "DrawStats":
        total_groups = eligible // size
        placed = total_groups * size
        return cls(
            total_participants=eligible,
            total_groups=total_groups,
            participants_in_groups=placed,
            remaining_participants=eligible - placed,
        )


@dataclass(slots=True)
class DrawResult:
    groups: list[DrawnGroup]
    stats: DrawStats
    drawn_at: datetime


class GroupingEngine:
    """Runs draws against the shared store."""

    def __init__(self, db: Database, rng: random.Random | None = None) -> None:
        self.db = db
        self.rng = rng or random.SystemRandom()

    async def run_draw(self) -> DrawResult:
        async def _draw() -> DrawResult:
            async with self.db.write_lock:
                async with self.db.transaction() as session:
                    # participants before the tables a cascading delete reaches
                    await self.db.lock_tables(
                        session, "participants", mode="SHARE"
                    )
                    await self.db.lock_tables(
                        session, "group_memberships", "groups"
                    )
                    participants = await self._load_eligible(session)
                    await self._check_preconditions(session, len(participants))
                    return await self._replace_groups(session, participants)

        try:
            result = await self.db.run(_draw)
        except PreconditionFailed:
            record_draw("precondition_failed")
            raise
        except ServiceError:
            record_draw("error")
            raise
        except Exception as exc:
            record_draw("error")
            logger.exception("Draw failed; previous groups left untouched")
            raise Internal("The draw could not be completed") from exc

        record_draw("success", result.stats.total_groups)
        logger.info(
            "Draw completed: %d groups, %d participants left over",
            result.stats.total_groups,
            result.stats.remaining_participants,
        )
        return result

    async def _load_eligible(self, session: AsyncSession) -> list[Participant]:
        result = await session.execute(
            select(Participant).order_by(Participant.course, Participant.name)
        )
        return list(result.scalars().all())

    async def _check_preconditions(self, session: AsyncSession, eligible: int) -> None:
        if eligible < MIN_PARTICIPANTS:
            raise PreconditionFailed(
                f"At least {MIN_PARTICIPANTS} participants are required for a draw",
                current=eligible,
                required=MIN_PARTICIPANTS,
            )

        courses = await session.execute(
            select(func.count(func.distinct(Participant.course)))
        )
        distinct_courses = courses.scalar_one()
        if distinct_courses < MIN_COURSES:
            raise PreconditionFailed(
                f"At least {MIN_COURSES} different courses are required",
                current=distinct_courses,
                required=MIN_COURSES,
            )

    async def _replace_groups(
        self,
        session: AsyncSession,
        participants: list[Participant],
    ) -> DrawResult:
        await session.execute(delete(GroupMembership))
        await session.execute(delete(Group))

        shuffled = fisher_yates_shuffle(participants, self.rng)
        chunks, _leftover = partition(shuffled, GROUP_SIZE)

        drawn_at = utcnow()
        groups = []
        for index, members in enumerate(chunks):
            groups.append(
                await self._create_group(session, index, members, drawn_at)
            )

        return DrawResult(
            groups=groups,
            stats=DrawStats.for_count(len(participants)),
            drawn_at=drawn_at,
        )

    async def _create_group(
        self,
        session: AsyncSession,
        index: int,
        members: list[Participant],
        created_at: datetime,
    ) -> DrawnGroup:
        group = Group(
            name=group_name(index),
            position=index + 1,
            color=group_color(index),
            created_at=created_at,
        )
        session.add(group)
        await session.flush()

        session.add_all(
            GroupMembership(group_id=group.id, participant_id=member.id)
            for member in members
        )
        await session.flush()

        return DrawnGroup(
            id=group.id,
            name=group.name,
            position=group.position,
            color=group.color,
            created_at=group.created_at,
            members=order_members(members),
        )


__all__ = [
    "GroupingEngine",
    "DrawResult",
    "DrawStats",
    "DrawnGroup",
    "PALETTE",
    "GROUP_SIZE",
    "MIN_PARTICIPANTS",
    "MIN_COURSES",
    "fisher_yates_shuffle",
    "partition",
    "group_name",
    "group_color",
    "order_members",
]
