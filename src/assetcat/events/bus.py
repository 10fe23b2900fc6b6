import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type


@dataclass(kw_only=True)
class Event:
    """Base event class."""
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(kw_only=True)
class CancellableEvent(Event):
    """Event whose handlers may veto the action it announces."""
    perform_action: bool = True

    def cancel(self):
        self.perform_action = False


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: Type = Event
    handler: Callable = field(default=lambda e: None)
    active: bool = True

    def cancel(self):
        self.active = False


class EventBus:
    """Synchronous hook dispatcher.

    Handlers run on the caller's thread in subscription order.  ``publish``
    is for after-the-fact notifications: a failing handler is logged and the
    remaining handlers still run.  With ``raise_errors`` the first handler
    error propagates and delivery stops.  ``request`` is for cancellable
    events: a handler vetoes by returning ``False`` or calling
    ``event.cancel()``, and handler exceptions propagate to the caller.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[Event], List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[Event], handler: Callable) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        with self._lock:
            self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription):
        subscription.active = False
        with self._lock:
            for subs in self._handlers.values():
                try:
                    subs.remove(subscription)
                except ValueError:
                    pass

    def _active_handlers(self, event: Event) -> List[Subscription]:
        with self._lock:
            return [sub for sub in self._handlers[type(event)] if sub.active]

    def publish(self, event: Event, raise_errors: bool = False):
        event_type = type(event)
        for sub in self._active_handlers(event):
            try:
                sub.handler(event)
            except Exception as e:
                if raise_errors:
                    raise
                self._logger.error(f"Handler failed for {event_type.__name__}: {e}")

    def request(self, event: CancellableEvent) -> bool:
        """Deliver *event* and return whether the action may go ahead."""
        for sub in self._active_handlers(event):
            if sub.handler(event) is False:
                event.cancel()
            if not event.perform_action:
                self._logger.info(
                    "[HOOK] %s cancelled by handler %s", type(event).__name__, sub.id
                )
                return False
        return event.perform_action
