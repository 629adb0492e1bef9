"""Participant registry: registration, deletion, listings and sample data."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from itertools import groupby
from typing import TYPE_CHECKING, Any, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from aemoz.models.participant import Participant
from aemoz.services.errors import Conflict, NotFound, ValidationFailed

if TYPE_CHECKING:
    from aemoz.database import Database

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 3
MAX_TEXT_LENGTH = 255
MIN_SEMESTER = 1
MAX_SEMESTER = 10
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500

SAMPLE_PARTICIPANTS: tuple[tuple[str, str, int], ...] = (
    ("Ana Silva", "Administração Pública", 3),
    ("Bruno Santos", "Administração Pública", 5),
    ("Carlos Mendes", "Administração Pública", 2),
    ("Diana Costa", "Administração Pública", 4),
    ("Ricardo Barbosa", "Administração Pública", 7),
    ("Eduardo Lima", "Medicina", 6),
    ("Fernanda Rocha", "Medicina", 4),
    ("Gabriel Teixeira", "Medicina", 8),
    ("Helena Martins", "Medicina", 2),
    ("Sofia Campos", "Medicina", 3),
    ("Igor Pereira", "Engenharia de Computação", 3),
    ("Julia Fernandes", "Engenharia de Computação", 5),
    ("Kevin Alves", "Engenharia de Computação", 7),
    ("Laura Oliveira", "Engenharia de Computação", 1),
    ("Thiago Azevedo", "Engenharia de Computação", 4),
    ("Marcos Souza", "Relações Internacionais", 4),
    ("Nina Cardoso", "Relações Internacionais", 6),
    ("Otávio Reis", "Relações Internacionais", 2),
    ("Paula Gomes", "Relações Internacionais", 8),
    ("Vitória Nascimento", "Relações Internacionais", 5),
)


@dataclass(slots=True)
class ParticipantPage:
    items: list[Participant]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


@dataclass(slots=True)
class CourseBucket:
    course: str
    participants: list[Participant] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.participants)


@dataclass(frozen=True, slots=True)
class SeedResult:
    added: int
    total: int


def validate_registration(
    name: Any,
    course: Any,
    semester: Any,
) -> tuple[str, str, int]:
    """Return the normalised (name, course, semester) or raise ``ValidationFailed``."""

    errors: dict[str, str] = {}

    clean_name = name.strip() if isinstance(name, str) else ""
    clean_course = course.strip() if isinstance(course, str) else ""

    if not clean_name:
        errors["name"] = "required"
    elif len(clean_name) < MIN_NAME_LENGTH:
        errors["name"] = f"must have at least {MIN_NAME_LENGTH} characters"
    elif len(clean_name) > MAX_TEXT_LENGTH:
        errors["name"] = f"must have at most {MAX_TEXT_LENGTH} characters"

    if not clean_course:
        errors["course"] = "required"
    elif len(clean_course) > MAX_TEXT_LENGTH:
        errors["course"] = f"must have at most {MAX_TEXT_LENGTH} characters"

    clean_semester: int | None = None
    if semester is None or semester == "":
        errors["semester"] = "required"
    else:
        try:
            # bool is an int subclass; reject it explicitly
            if isinstance(semester, bool):
                raise ValueError(semester)
            clean_semester = int(semester)
        except (TypeError, ValueError):
            errors["semester"] = "must be an integer"
        else:
            if not MIN_SEMESTER <= clean_semester <= MAX_SEMESTER:
                errors["semester"] = (
                    f"must be between {MIN_SEMESTER} and {MAX_SEMESTER}"
                )

    if errors:
        raise ValidationFailed("Invalid participant data", fields=errors)

    return clean_name, clean_course, clean_semester  # type: ignore[return-value]


def validate_paging(page: Any, page_size: Any) -> tuple[int, int]:
    errors: dict[str, str] = {}
    values: dict[str, int] = {}
    for key, value in (("page", page), ("limit", page_size)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            errors[key] = "must be a positive integer"
        else:
            values[key] = value
    if "limit" in values and values["limit"] > MAX_PAGE_SIZE:
        errors["limit"] = f"must be at most {MAX_PAGE_SIZE}"
    if errors:
        raise ValidationFailed("Invalid pagination parameters", fields=errors)
    return values["page"], values["limit"]


def _parse_id(participant_id: UUID | str) -> UUID | None:
    if isinstance(participant_id, UUID):
        return participant_id
    try:
        return UUID(str(participant_id))
    except ValueError:
        return None


class ParticipantRegistry:
    """Owns participant records and their uniqueness rules."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def register(self, name: Any, course: Any, semester: Any) -> Participant:
        clean_name, clean_course, clean_semester = validate_registration(
            name, course, semester
        )

        async def _register() -> Participant:
            async with self.db.transaction() as session:
                if await self._name_taken(session, clean_name, clean_course):
                    raise Conflict(
                        "A participant with this name already exists in this course"
                    )

                participant = Participant(
                    name=clean_name,
                    course=clean_course,
                    semester=clean_semester,
                )
                session.add(participant)
                await session.flush()
            return participant

        try:
            participant = await self.db.run(_register)
        except IntegrityError as exc:
            # Lost a race against a concurrent registration of the same name.
            raise Conflict(
                "A participant with this name already exists in this course"
            ) from exc

        logger.info(
            "Registered participant %s (%s)", participant.id, participant.course
        )
        return participant

    async def delete(self, participant_id: UUID | str) -> Participant:
        parsed_id = _parse_id(participant_id)
        if parsed_id is None:
            raise NotFound("Participant not found")

        async def _delete() -> Participant:
            async with self.db.transaction() as session:
                participant = await session.get(Participant, parsed_id)
                if participant is None:
                    raise NotFound("Participant not found")
                # group_memberships rows go with it through ON DELETE CASCADE
                await session.delete(participant)
            return participant

        participant = await self.db.run(_delete)
        logger.info("Deleted participant %s", participant.id)
        return participant

    async def list(
        self,
        course: str | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> ParticipantPage:
        page, page_size = validate_paging(page, page_size)
        course = course.strip() if course else None

        async def _list() -> ParticipantPage:
            async with self.db.session_scope() as session:
                query = select(Participant)
                count_query = select(func.count(Participant.id))
                if course:
                    query = query.where(Participant.course == course)
                    count_query = count_query.where(Participant.course == course)

                result = await session.execute(
                    query.order_by(
                        Participant.created_at.desc(), Participant.id.desc()
                    )
                    .limit(page_size)
                    .offset((page - 1) * page_size)
                )
                total = await session.execute(count_query)
                return ParticipantPage(
                    items=list(result.scalars().all()),
                    page=page,
                    limit=page_size,
                    total=total.scalar_one(),
                )

        return await self.db.run(_list)

    async def list_by_course(self) -> list[CourseBucket]:
        """Participants bucketed per course, largest course first."""

        async def _load() -> Sequence[Participant]:
            async with self.db.session_scope() as session:
                result = await session.execute(
                    select(Participant).order_by(Participant.course, Participant.name)
                )
                return result.scalars().all()

        participants = await self.db.run(_load)
        buckets = [
            CourseBucket(course=course, participants=list(members))
            for course, members in groupby(participants, key=lambda p: p.course)
        ]
        buckets.sort(key=lambda bucket: (-bucket.count, bucket.course))
        return buckets

    async def seed_sample_data(self) -> SeedResult:
        """Insert the bundled sample participants, skipping existing ones."""

        async def _seed() -> int:
            async with self.db.transaction() as session:
                existing = await self._existing_keys(session)
                added = 0
                for name, course, semester in SAMPLE_PARTICIPANTS:
                    if (name.lower(), course) in existing:
                        continue
                    session.add(
                        Participant(name=name, course=course, semester=semester)
                    )
                    added += 1
            return added

        try:
            added = await self.db.run(_seed)
        except IntegrityError as exc:
            raise Conflict("Sample data collided with a concurrent registration") from exc

        logger.info("Seeded %d sample participants", added)
        return SeedResult(added=added, total=len(SAMPLE_PARTICIPANTS))

    @staticmethod
    async def _name_taken(session: AsyncSession, name: str, course: str) -> bool:
        duplicate = await session.execute(
            select(func.count(Participant.id)).where(
                func.lower(Participant.name) == func.lower(name),
                Participant.course == course,
            )
        )
        return duplicate.scalar_one() > 0

    @staticmethod
    async def _existing_keys(session: AsyncSession) -> set[tuple[str, str]]:
        """Return ``(lower(name), course)`` for every stored participant."""

        result = await session.execute(
            select(func.lower(Participant.name), Participant.course)
        )
        return {(name, course) for name, course in result.all()}


__all__ = [
    "ParticipantRegistry",
    "ParticipantPage",
    "CourseBucket",
    "SeedResult",
    "SAMPLE_PARTICIPANTS",
    "validate_registration",
    "validate_paging",
]
