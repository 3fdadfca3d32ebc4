"""Repository interfaces (ports) for dependency inversion."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from app.domain.entities import Book, RankedBook, Review

if TYPE_CHECKING:
    from app.ranking.query import RankingQuery


class IBookRepository(ABC):

    @abstractmethod
    async def create(self, book: Book) -> Book:
        pass

    @abstractmethod
    async def get_by_id(self, book_id: UUID) -> Optional[Book]:
        pass

    @abstractmethod
    async def update(self, book: Book) -> Book:
        """Persist metadata changes and fire the ``updated`` event."""
        pass

    @abstractmethod
    async def delete(self, book_id: UUID) -> bool:
        """Delete the book (and its reviews) and fire the ``deleted`` event."""
        pass


class IReviewRepository(ABC):

    @abstractmethod
    async def create(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def get_by_id(self, review_id: UUID) -> Optional[Review]:
        pass

    @abstractmethod
    async def get_by_book(self, book_id: UUID) -> list[Review]:
        pass

    @abstractmethod
    async def update(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def delete(self, review_id: UUID) -> bool:
        pass


class IRankingRepository(ABC):

    @abstractmethod
    async def fetch(
        self, query: "RankingQuery", skip: int = 0, limit: int = 100
    ) -> list[RankedBook]:
        """Execute a ranking query plan and return annotated books in plan order."""
        pass


class ICache(ABC):
    """Key-value cache holding serialized views.

    Each key has a version that moves on every eviction.  Readers take the
    version before loading the value and ``fill`` with it, so a fill that
    lost a race with an eviction is dropped instead of resurrecting stale data.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def version(self, key: str) -> int:
        pass

    @abstractmethod
    async def fill(self, key: str, value: str, version: int) -> bool:
        """Store ``value`` only if ``key`` is still at ``version``; return whether it was stored."""
        pass

    @abstractmethod
    async def evict(self, key: str) -> None:
        """Remove ``key`` and advance its version.  Evicting an absent key removes nothing."""
        pass
