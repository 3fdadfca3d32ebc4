from datetime import timedelta

import pytest

from app.infrastructure.database.repository import RankingRepository
from app.ranking.aggregates import REVIEWS_AVG_RATING, REVIEWS_COUNT
from app.ranking.composer import highest_rated, latest, min_reviews, only, popular, title
from app.ranking.query import RankingQuery
from app.ranking.window import Window
from conftest import NOW


@pytest.fixture
async def shelf(seed):
    """Three reviewed books and one without reviews."""
    books = {
        "Dune": await seed.book("Dune", created_at=NOW - timedelta(days=3)),
        "Emma": await seed.book("Emma", "Jane Austen", created_at=NOW - timedelta(days=2)),
        "Ulysses": await seed.book("Ulysses", "James Joyce", created_at=NOW - timedelta(days=1)),
        "Unread": await seed.book("Unread", "Nobody", created_at=NOW),
    }
    await seed.reviews(books["Dune"], [3, 3, 4])
    await seed.reviews(books["Emma"], [5, 5])
    await seed.reviews(books["Ulysses"], [1])
    return books


async def titles(session, query) -> list[str]:
    rows = await RankingRepository(session).fetch(query)
    return [r.book.title for r in rows]


async def test_popular_orders_by_count_descending(session, shelf):
    assert await titles(session, popular(RankingQuery())) == ["Dune", "Emma", "Ulysses", "Unread"]


async def test_highest_rated_puts_unreviewed_books_last(session, shelf):
    assert await titles(session, highest_rated(RankingQuery())) == [
        "Emma", "Dune", "Ulysses", "Unread",
    ]


async def test_ties_are_broken_by_id(session, seed):
    a = await seed.book("A")
    b = await seed.book("B")
    await seed.reviews(a, [4])
    await seed.reviews(b, [4])

    rows = await RankingRepository(session).fetch(popular(RankingQuery()))
    ids = [r.book.id for r in rows]
    assert ids == sorted([a.id, b.id], key=lambda u: u.hex)
    again = await RankingRepository(session).fetch(popular(RankingQuery()))
    assert [r.book.id for r in again] == ids


async def test_last_applied_ordering_wins(session, shelf):
    query = highest_rated(popular(RankingQuery()))

    assert query.order_by == REVIEWS_AVG_RATING
    assert REVIEWS_COUNT in query.columns
    rows = await RankingRepository(session).fetch(query)
    assert [r.book.title for r in rows] == ["Emma", "Dune", "Ulysses", "Unread"]
    assert [r.reviews_count for r in rows] == [2, 3, 1, 0]


async def test_reversed_composition_orders_by_count(session, shelf):
    query = popular(highest_rated(RankingQuery()))

    assert query.order_by == REVIEWS_COUNT
    assert await titles(session, query) == ["Dune", "Emma", "Ulysses", "Unread"]


@pytest.mark.parametrize(
    "minimum, expected",
    [
        (0, {"Dune", "Emma", "Ulysses", "Unread"}),
        (1, {"Dune", "Emma", "Ulysses"}),
        (2, {"Dune", "Emma"}),
        (3, {"Dune"}),
        (4, set()),
    ],
)
async def test_min_reviews_threshold(session, shelf, minimum, expected):
    assert set(await titles(session, min_reviews(RankingQuery(), minimum))) == expected


async def test_min_reviews_uses_the_windowed_count(session, seed):
    book = await seed.book("Dune")
    await seed.reviews(book, [5, 5, 5], days_ago=90)
    await seed.reviews(book, [4], days_ago=2)

    recent = popular(RankingQuery(), NOW - timedelta(days=30), NOW)
    assert await titles(session, min_reviews(recent, 2)) == []
    assert await titles(session, min_reviews(RankingQuery(), 2)) == ["Dune"]


def test_min_reviews_keeps_an_existing_count_window():
    window = Window(NOW - timedelta(days=30), NOW)
    query = min_reviews(popular(RankingQuery(), window.start, window.end), 2)
    assert query.count_window == window
    assert min_reviews(RankingQuery(), 2).count_window == Window()


@pytest.mark.parametrize("minimum", [None, "2", 2.0, True])
def test_min_reviews_requires_an_integer(minimum):
    with pytest.raises(TypeError):
        min_reviews(RankingQuery(), minimum)


async def test_full_composition_in_one_query(session, shelf):
    start = NOW - timedelta(days=30)
    query = min_reviews(highest_rated(popular(RankingQuery(), start, NOW), start, NOW), 2)

    rows = await RankingRepository(session).fetch(query)
    assert [(r.book.title, r.reviews_count) for r in rows] == [("Emma", 2), ("Dune", 3)]
    assert rows[1].reviews_avg_rating == pytest.approx(10 / 3)


async def test_inverted_window_is_not_an_error(session, shelf):
    start, end = NOW, NOW - timedelta(days=30)

    counted = await RankingRepository(session).fetch(popular(RankingQuery(), start, end))
    rated = await RankingRepository(session).fetch(highest_rated(RankingQuery(), start, end))

    assert {r.reviews_count for r in counted} == {0}
    assert {r.reviews_avg_rating for r in rated} == {None}


async def test_latest_orders_newest_first(session, shelf):
    assert await titles(session, latest(RankingQuery())) == ["Unread", "Ulysses", "Emma", "Dune"]


async def test_title_filter_is_case_insensitive_substring(session, shelf):
    assert await titles(session, title(popular(RankingQuery()), "uLy")) == ["Ulysses"]


async def test_title_filter_escapes_wildcards(session, shelf):
    assert await titles(session, title(RankingQuery(), "%")) == []


async def test_only_restricts_to_one_book(session, shelf):
    rows = await RankingRepository(session).fetch(only(popular(RankingQuery()), shelf["Emma"].id))
    assert [(r.book.title, r.reviews_count) for r in rows] == [("Emma", 2)]


def test_unknown_ordering_is_rejected():
    with pytest.raises(ValueError):
        RankingQuery(order_by=REVIEWS_COUNT).statement()


def test_threshold_without_count_column_is_rejected():
    with pytest.raises(ValueError):
        RankingQuery(min_reviews=1).statement()
