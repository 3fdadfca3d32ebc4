from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from app.infrastructure.database.models import ReviewModel
from app.ranking.window import apply_date_range, months_before
from conftest import NOW


@pytest.fixture
async def reviews(seed):
    book = await seed.book()
    await seed.reviews(book, [3], days_ago=10)
    await seed.reviews(book, [4], days_ago=5)
    await seed.reviews(book, [5], days_ago=0)


async def _created_at(session, start=None, end=None) -> list[datetime]:
    stmt = apply_date_range(
        select(ReviewModel.created_at), ReviewModel.created_at, start, end
    ).order_by(ReviewModel.created_at)
    result = await session.execute(stmt)
    return list(result.scalars().all())


class TestApplyDateRange:

    async def test_both_bounds_are_inclusive(self, session, reviews):
        found = await _created_at(session, NOW - timedelta(days=5), NOW)
        assert found == [NOW - timedelta(days=5), NOW]

    async def test_lower_bound_only(self, session, reviews):
        found = await _created_at(session, start=NOW - timedelta(days=5))
        assert found == [NOW - timedelta(days=5), NOW]

    async def test_upper_bound_only(self, session, reviews):
        found = await _created_at(session, end=NOW - timedelta(days=5))
        assert found == [NOW - timedelta(days=10), NOW - timedelta(days=5)]

    async def test_no_bounds_leaves_statement_untouched(self):
        stmt = select(ReviewModel.id)
        assert apply_date_range(stmt, ReviewModel.created_at) is stmt

    async def test_inverted_range_matches_nothing(self, session, reviews):
        assert await _created_at(session, NOW, NOW - timedelta(days=10)) == []


class TestMonthsBefore:

    def test_same_day_previous_month(self):
        assert months_before(datetime(2026, 6, 15, 12, 30), 1) == datetime(2026, 5, 15, 12, 30)

    def test_crosses_year_boundary(self):
        assert months_before(datetime(2026, 1, 15), 1) == datetime(2025, 12, 15)
        assert months_before(datetime(2026, 6, 15), 6) == datetime(2025, 12, 15)

    def test_clamps_to_end_of_shorter_month(self):
        assert months_before(datetime(2026, 3, 31), 1) == datetime(2026, 2, 28)
        assert months_before(datetime(2024, 3, 31), 1) == datetime(2024, 2, 29)
        assert months_before(datetime(2026, 10, 31), 6) == datetime(2026, 4, 30)
