"""Event bus abstraction and in-memory implementation.

Design goals
------------
1.  **Hierarchy routing** -- a handler registered for an event class
    receives that class and every subclass.  A renderer can subscribe once
    to ``CalendarEvent`` (everything) or to ``BoundaryEvent`` (the four
    min/max transitions) instead of listing concrete types.  Handlers run
    from the most specific class to ``CalendarEvent``, in registration
    order within a class.
2.  **Write-ownership enforcement** -- with ``enforce_ownership=True``,
    ``publish()`` checks ``event.source`` against ``WRITE_OWNERSHIP`` for
    the concrete event type and raises ``WriteOwnershipError`` on a
    mismatch, before anything is recorded or dispatched.
3.  **Handler isolation** -- a failing handler is logged; the remaining
    handlers still run and the publisher never sees the error, so a
    broken renderer cannot stall navigation.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from calendar_heatmap.core.errors import HeatmapError
from calendar_heatmap.domain.events import WRITE_OWNERSHIP, CalendarEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[CalendarEvent], Awaitable[None]]


class WriteOwnershipError(HeatmapError):
    """Raised when a component publishes an event it does not own."""


@runtime_checkable
class IEventBus(Protocol):
    """Publish/subscribe bus for ``CalendarEvent`` classes."""

    async def publish(self, event: CalendarEvent) -> None: ...

    def subscribe(
        self,
        event_type: type[CalendarEvent],
        handler: EventHandler,
    ) -> None: ...

    def get_history(
        self,
        event_type: type[CalendarEvent] | None = None,
    ) -> list[CalendarEvent]: ...


class InMemoryEventBus:
    """Deterministic, in-process event bus.

    Parameters
    ----------
    enforce_ownership
        When ``True`` (default), ``publish()`` rejects events whose
        ``source`` doesn't match ``WRITE_OWNERSHIP[type(event)]``.
    """

    def __init__(self, *, enforce_ownership: bool = True) -> None:
        self._handlers: dict[
            type[CalendarEvent], list[EventHandler]
        ] = defaultdict(list)
        self._history: list[CalendarEvent] = []
        self._enforce_ownership = enforce_ownership

    async def publish(self, event: CalendarEvent) -> None:
        """Record *event* and hand it to every handler of its class chain.

        Raises
        ------
        WriteOwnershipError
            If ownership enforcement is on and ``event.source`` is wrong.
        """
        event_cls = type(event)

        if self._enforce_ownership and event_cls in WRITE_OWNERSHIP:
            expected = WRITE_OWNERSHIP[event_cls]
            if event.source != expected:
                raise WriteOwnershipError(
                    f"{event_cls.__name__} must be published by "
                    f"source={expected!r}, got source={event.source!r}"
                )

        self._history.append(event)

        for handler in self._handlers_for(event_cls):
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Handler %r failed on %s", handler, event_cls.__name__,
                )

    def subscribe(
        self,
        event_type: type[CalendarEvent],
        handler: EventHandler,
    ) -> None:
        """Register *handler* for *event_type* and its subclasses."""
        if not (isinstance(event_type, type) and issubclass(event_type, CalendarEvent)):
            raise TypeError(f"{event_type!r} is not a CalendarEvent class")
        self._handlers[event_type].append(handler)

    def get_history(
        self,
        event_type: type[CalendarEvent] | None = None,
    ) -> list[CalendarEvent]:
        """Published events, optionally those that are *event_type* instances."""
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if isinstance(e, event_type)]

    def _handlers_for(self, event_cls: type) -> list[EventHandler]:
        handlers: list[EventHandler] = []
        for cls in event_cls.__mro__:
            handlers.extend(self._handlers.get(cls, ()))
            if cls is CalendarEvent:
                break
        return handlers
