"""Entity lifecycle events.

Repositories dispatch these after a write has been committed and before the
write call returns, so listeners run as part of the mutation.  Listeners are
registered explicitly by the composition root (see ``app/main.py``).
"""

import logging
from typing import Awaitable, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[T], Awaitable[None]]


class LifecycleEvents(Generic[T]):
    """Listener registry for the created / updated / deleted events of one entity type."""

    def __init__(self, name: str):
        self.name = name
        self._listeners: dict[str, list[Listener]] = {
            "created": [],
            "updated": [],
            "deleted": [],
        }

    def on_created(self, listener: Listener) -> None:
        self._listeners["created"].append(listener)

    def on_updated(self, listener: Listener) -> None:
        self._listeners["updated"].append(listener)

    def on_deleted(self, listener: Listener) -> None:
        self._listeners["deleted"].append(listener)

    async def created(self, entity: T) -> None:
        await self._dispatch("created", entity)

    async def updated(self, entity: T) -> None:
        await self._dispatch("updated", entity)

    async def deleted(self, entity: T) -> None:
        await self._dispatch("deleted", entity)

    async def _dispatch(self, event: str, entity: T) -> None:
        """Await each listener in turn.

        The write is already committed, so a failing listener is logged and
        the remaining listeners still run.
        """
        listeners = self._listeners[event]
        if listeners:
            logger.debug("Dispatching %s.%s to %d listener(s)", self.name, event, len(listeners))
        for listener in listeners:
            try:
                await listener(entity)
            except Exception:
                logger.exception("Listener %r failed on %s.%s", listener, self.name, event)
