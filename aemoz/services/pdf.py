"""PDF rosters for participants and draw results."""

from __future__ import annotations

import io
from datetime import datetime, timezone
from typing import Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from aemoz.services.group_store import CurrentDraw
from aemoz.services.registry import CourseBucket

TITLE_PREFIX = "AEMOZ"
SUBTITLE = "Associação dos Estudantes Moçambicanos - UNILAB"
ACCENT = colors.HexColor("#2563eb")
MUTED = colors.HexColor("#666666")

_styles = getSampleStyleSheet()
_TITLE = ParagraphStyle("RosterTitle", parent=_styles["Title"], fontSize=20)
_SUBTITLE = ParagraphStyle(
    "RosterSubtitle", parent=_styles["Normal"], fontSize=13, alignment=1
)
_META_RIGHT = ParagraphStyle(
    "RosterMetaRight", parent=_styles["Normal"], fontSize=9, alignment=2
)
_META_CENTER = ParagraphStyle(
    "RosterMetaCenter", parent=_styles["Normal"], fontSize=11, alignment=1
)
_BODY = ParagraphStyle("RosterBody", parent=_styles["Normal"], fontSize=11)
_HEADING = ParagraphStyle(
    "RosterHeading",
    parent=_styles["Heading2"],
    textColor=ACCENT,
    spaceBefore=6,
)
_ITEM = ParagraphStyle(
    "RosterItem", parent=_styles["Normal"], fontSize=10, leftIndent=8 * mm
)
_ITEM_DETAIL = ParagraphStyle(
    "RosterItemDetail",
    parent=_ITEM,
    fontSize=9,
    textColor=MUTED,
    leftIndent=12 * mm,
)


def _timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.strftime("%d/%m/%Y %H:%M UTC")


def _build(title: str, story: list) -> bytes:
    buffer = io.BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=title,
        leftMargin=18 * mm,
        rightMargin=18 * mm,
        topMargin=18 * mm,
        bottomMargin=18 * mm,
    )
    document.build(story)
    return buffer.getvalue()


def _header(title: str) -> list:
    return [
        Paragraph(escape(f"{TITLE_PREFIX} - {title}"), _TITLE),
        Paragraph(escape(SUBTITLE), _SUBTITLE),
        Spacer(1, 8 * mm),
    ]


def render_participants_pdf(
    buckets: Sequence[CourseBucket],
    *,
    generated_at: datetime | None = None,
) -> bytes:
    """Participants listed per course, largest course first."""

    generated_at = generated_at or datetime.now(timezone.utc)
    total = sum(bucket.count for bucket in buckets)

    story = _header("Participant List")
    story.append(Paragraph(f"Generated on {_timestamp(generated_at)}", _META_RIGHT))
    story.append(Spacer(1, 4 * mm))
    story.append(Paragraph(f"Total participants: {total}", _BODY))
    story.append(Paragraph(f"Total courses: {len(buckets)}", _BODY))
    story.append(Spacer(1, 6 * mm))

    for bucket in buckets:
        story.append(
            Paragraph(
                escape(f"{bucket.course} ({bucket.count} participants)"),
                _HEADING,
            )
        )
        for index, participant in enumerate(bucket.participants, start=1):
            story.append(
                Paragraph(
                    escape(
                        f"{index}. {participant.name} - semester {participant.semester}"
                    ),
                    _ITEM,
                )
            )
        story.append(Spacer(1, 4 * mm))

    return _build("Participant List", story)


def render_groups_pdf(draw: CurrentDraw) -> bytes:
    """One block per group with its members' course and semester."""

    story = _header("Draw Result")
    story.append(Paragraph(f"Draw performed on {_timestamp(draw.drawn_at)}", _META_CENTER))
    story.append(Spacer(1, 4 * mm))
    story.append(Paragraph(f"Total groups: {len(draw.groups)}", _BODY))
    story.append(Paragraph(f"Total participants: {draw.total_members}", _BODY))
    story.append(Spacer(1, 6 * mm))

    for group in draw.groups:
        block = [
            Paragraph(
                f'<font color="{group.color}">{escape(group.name)}</font>',
                _HEADING,
            )
        ]
        for index, member in enumerate(group.members, start=1):
            block.append(Paragraph(escape(f"{index}. {member.name}"), _ITEM))
            block.append(
                Paragraph(
                    escape(f"{member.course} - semester {member.semester}"),
                    _ITEM_DETAIL,
                )
            )
        block.append(Spacer(1, 5 * mm))
        story.append(KeepTogether(block))

    return _build("Draw Result", story)


__all__ = ["render_participants_pdf", "render_groups_pdf"]
