import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List, Optional, Type

from compress_vids.domain.events import Event

Handler = Callable[[Any], None]

logger = logging.getLogger(__name__)


class EventBus:
    """Synchronous pub/sub between the pipeline and the console reporter.

    Handlers run in the publishing thread, in subscription order, and only
    for the exact event class they subscribed to. A handler that raises is
    logged, the remaining handlers still run, and the publisher never sees
    the exception.
    """

    def __init__(self):
        self._handlers: DefaultDict[Type[Event], List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[Event], callback: Optional[Handler] = None):
        """Registers callback for event_type; without a callback, returns a decorator."""
        if callback is not None:
            self._handlers[event_type].append(callback)
            return callback

        def register(func: Handler) -> Handler:
            self._handlers[event_type].append(func)
            return func
        return register

    def handler_count(self, event_type: Type[Event]) -> int:
        return len(self._handlers.get(event_type, ()))

    def publish(self, event: Event) -> None:
        name = type(event).__name__
        logger.debug(f"EVENT: {name}")
        for handler in list(self._handlers.get(type(event), ())):
            try:
                handler(event)
            except Exception:
                logger.exception(f"Handler {getattr(handler, '__qualname__', handler)!r} failed on {name}")
