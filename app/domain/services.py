"""Domain-level application service interfaces (ports).

These abstract classes define the contracts that the API layer depends on.
Concrete implementations live in ``app/services/`` and are wired together
by the composition root in ``app/core/dependencies.py``.

Route handlers import from ``app.domain`` only, and every service can be
replaced with a test double via FastAPI's ``app.dependency_overrides``.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from app.domain.entities import Book, RankedBook, Review

if TYPE_CHECKING:
    from app.ranking.presets import RankingPreset


class IBookService(ABC):

    @abstractmethod
    async def create_book(self, title: str, author: str) -> Book:
        pass

    @abstractmethod
    async def get_book(self, book_id: UUID) -> Optional[Book]:
        pass

    @abstractmethod
    async def get_book_detail(self, book_id: UUID) -> Optional[RankedBook]:
        """Return the book with all-time review aggregates, served from cache when present."""
        pass

    @abstractmethod
    async def list_books(
        self,
        title: Optional[str] = None,
        preset: Optional["RankingPreset"] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[RankedBook]:
        pass

    @abstractmethod
    async def update_book(self, book_id: UUID, title: str, author: str) -> Optional[Book]:
        pass

    @abstractmethod
    async def delete_book(self, book_id: UUID) -> bool:
        pass


class IReviewService(ABC):

    @abstractmethod
    async def create_review(self, book_id: UUID, rating: int, text: str) -> Review:
        """Create a review.  Raises ``LookupError`` for a missing book, ``ValueError`` for an out-of-range rating."""
        pass

    @abstractmethod
    async def list_reviews(self, book_id: UUID) -> list[Review]:
        pass

    @abstractmethod
    async def update_review(self, review_id: UUID, rating: int, text: str) -> Optional[Review]:
        pass

    @abstractmethod
    async def delete_review(self, review_id: UUID) -> bool:
        pass
