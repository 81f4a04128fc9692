"""
Message Bus

Routes domain events from the store to whoever renders it.
Subscribers are plain callables and only ever receive immutable events.
"""

from typing import Callable, Dict, Iterable, List, Type

import structlog

from shared.domain.base import DomainEvent

logger = structlog.get_logger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    Message bus for domain events

    Events: Multiple handlers per event (1:N). A handler registered for a
    base class receives every subclass event as well, so registering for
    DomainEvent subscribes to everything.
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(
        self,
        event_type: Type[DomainEvent],
        handler: EventHandler,
    ) -> Callable[[], None]:
        """
        Register an event handler

        Returns a callable that removes the registration again.
        """
        self._event_handlers.setdefault(event_type, []).append(handler)
        logger.debug("event_handler_registered", event_type=event_type.__name__)

        def unsubscribe() -> None:
            self.unregister_event_handler(event_type, handler)

        return unsubscribe

    def unregister_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        handlers = self._event_handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        handlers: List[EventHandler] = []
        for klass in event_type.__mro__:
            handlers.extend(self._event_handlers.get(klass, []))
        return handlers

    def publish_events(self, events: Iterable[DomainEvent]) -> None:
        """
        Publish domain events

        All registered handlers for each event type will be called.
        Errors in handlers are logged but don't stop other handlers.
        """
        for event in events:
            event_type = type(event)
            handlers = self.handlers_for(event_type)

            if not handlers:
                logger.debug("event_without_handlers", event_type=event_type.__name__)
                continue

            logger.info("event_published", **event.to_dict())

            for handler in list(handlers):
                try:
                    handler(event)
                except Exception:
                    # Don't raise - other handlers should still run
                    logger.error(
                        "event_handler_failed",
                        event_type=event_type.__name__,
                        handler=getattr(handler, '__name__', repr(handler)),
                        exc_info=True,
                    )
