"""Grouping engine internals and concurrent draws against the store."""

from __future__ import annotations

import asyncio
import random
from collections import Counter
from pathlib import Path

import pytest

from aemoz.config.settings import DatabaseConfig
from aemoz.database import Database
from aemoz.services import GroupingEngine, GroupStore, ParticipantRegistry
from aemoz.services.draw import (
    PALETTE,
    DrawStats,
    fisher_yates_shuffle,
    group_color,
    group_name,
    partition,
)


def test_shuffle_is_a_permutation():
    items = list(range(50))

    shuffled = fisher_yates_shuffle(items, random.Random(7))

    assert sorted(shuffled) == items
    assert shuffled != items
    assert items == list(range(50))


def test_shuffle_is_close_to_uniform():
    rng = random.Random(1234)

    counts = Counter(tuple(fisher_yates_shuffle("abc", rng)) for _ in range(6000))

    assert len(counts) == 6
    assert all(850 <= count <= 1150 for count in counts.values())


def test_partition_keeps_only_full_chunks():
    chunks, leftover = partition(list(range(10)), 4)

    assert chunks == [[0, 1, 2, 3], [4, 5, 6, 7]]
    assert leftover == [8, 9]


def test_partition_rejects_non_positive_size():
    with pytest.raises(ValueError):
        partition([1, 2, 3], 0)


def test_names_and_colors_follow_creation_order():
    assert group_name(0) == "Group 1"
    assert group_name(11) == "Group 12"
    assert len(set(PALETTE)) == len(PALETTE) >= 12
    assert group_color(len(PALETTE)) == PALETTE[0]
    assert group_color(13) == PALETTE[1]


@pytest.mark.parametrize("eligible", [16, 17, 18, 19, 20, 37])
def test_stats_arithmetic(eligible):
    stats = DrawStats.for_count(eligible)

    assert stats.total_groups == eligible // 4
    assert stats.participants_in_groups == stats.total_groups * 4
    assert stats.remaining_participants == eligible % 4


def test_concurrent_draws_serialise(tmp_path: Path):
    async def scenario():
        db = Database(
            DatabaseConfig(connection_url=f"sqlite+aiosqlite:///{tmp_path / 'c.db'}")
        )
        await db.init_models()
        try:
            registry = ParticipantRegistry(db)
            for index in range(24):
                await registry.register(
                    f"Member {index:02d}", f"Course {index % 4}", index % 10 + 1
                )

            engine = GroupingEngine(db, rng=random.Random(99))
            results = await asyncio.gather(engine.run_draw(), engine.run_draw())
            current = await GroupStore(db).get_current_draw()
            return results, current
        finally:
            await db.dispose()

    results, current = asyncio.run(scenario())

    def layout(groups):
        return [(g.id, [m.id for m in g.members]) for g in groups]

    assert layout(current.groups) in [layout(r.groups) for r in results]
    placed = [m.id for g in current.groups for m in g.members]
    assert len(placed) == len(set(placed)) == 24
    assert [g.name for g in current.groups] == [f"Group {i}" for i in range(1, 7)]


def test_writers_lock_participants_before_group_tables(tmp_path: Path):
    async def scenario():
        db = Database(
            DatabaseConfig(connection_url=f"sqlite+aiosqlite:///{tmp_path / 'l.db'}")
        )
        await db.init_models()
        taken: list[tuple[str, ...]] = []

        async def record(session, *tables, mode="ACCESS EXCLUSIVE"):
            taken.append(tables)

        db.lock_tables = record
        try:
            registry = ParticipantRegistry(db)
            for index in range(16):
                await registry.register(
                    f"Member {index:02d}", f"Course {index % 4}", index % 10 + 1
                )
            await GroupingEngine(db, rng=random.Random(3)).run_draw()
            draw_locks = list(taken)
            taken.clear()
            await GroupStore(db).clear_all()
            return draw_locks, list(taken)
        finally:
            await db.dispose()

    draw_locks, clear_locks = asyncio.run(scenario())

    assert draw_locks[0] == ("participants",)
    assert draw_locks[1] == ("group_memberships", "groups")
    assert clear_locks == [("participants", "group_memberships", "groups")]
