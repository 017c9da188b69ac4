"""Event with ordered priority/normal handlers and an optional key lock."""

import time
from typing import Any

from loguru import logger

from evts._types import Clock, Handler
from evts.firing import Firing
from evts.keys import Key, KeyLock
from evts.utils import callable_name, index_of

log = logger.bind(source=__name__)


class Event:
    """Named event dispatching to two ordered handler lists.

    Priority handlers always run before normal handlers.  Either list
    holds each handler at most once, in insertion order; the same
    callable may sit in both lists.  Handlers are matched by identity,
    so keep a reference to a bound method if you want to remove it later.

    The event can be locked with :meth:`lock`.  While locked, priority
    handler mutation and :meth:`fire` require the key returned by
    ``lock()``.  Normal handlers are open to everyone.

    Operations that fail on a bad key return None (or do nothing) rather
    than raising.

    Example::

        evt = Event("saved")
        key = evt.lock()

        @evt.on
        def log_save(e: Firing, evt: Event) -> None:
            print(e.data)

        evt.fire(data="report.txt")            # None, wrong key
        evt.fire(data="report.txt", key=key)   # Firing record
    """

    def __init__(self, name: Any = "", *, clock: Clock = time.time) -> None:
        """Initialize event.

        Args:
            name: Display label; ``None`` becomes ``""``, anything else
                is passed through ``str()``.
            clock: Source of default firing timestamps.
        """
        self._name = "" if name is None else str(name)
        self._clock = clock
        self._lock = KeyLock(self._name)
        self._priority_handlers: list[Handler] = []
        self._handlers: list[Handler] = []
        self._pending = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r})"

    # -- read-only state ------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def locked(self) -> bool:
        return self._lock.locked

    @property
    def pending(self) -> bool:
        """True while :meth:`fire` is dispatching."""
        return self._pending

    @property
    def priority_handlers(self) -> tuple[Handler, ...]:
        return tuple(self._priority_handlers)

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return tuple(self._handlers)

    # -- locking --------------------------------------------------------------

    def validate_key(self, key: Key | None) -> bool:
        """Return True when unlocked or when *key* is the current key."""
        return self._lock.validate_key(key)

    def lock(self) -> Key | None:
        """Lock the event.

        Returns:
            The key needed to unlock it, or None if already locked.
        """
        return self._lock.lock()

    def unlock(self, key: Key | None) -> Key | None:
        """Unlock the event.

        Returns:
            *key* when it matched, None otherwise.
        """
        return self._lock.unlock(key)

    # -- priority handlers (key-gated) ----------------------------------------

    def add_priority_handler(self, handler: Handler, *, key: Key | None = None) -> None:
        """Append *handler* to the priority list.

        ``key`` may be omitted while the event is unlocked.  A bad key, a
        non-callable, or an already registered handler makes this a no-op.
        """
        self.add_priority_handlers(handler, key=key)

    def add_priority_handlers(self, *handlers: Handler, key: Key | None = None) -> None:
        """Append each of *handlers* to the priority list (see
        :meth:`add_priority_handler`)."""
        if not self.validate_key(key):
            log.debug("Rejected priority add on {}: bad key", self)
            return
        for handler in handlers:
            self._append(self._priority_handlers, handler)

    def remove_priority_handler(
        self, handler: Handler, *, key: Key | None = None
    ) -> None:
        """Remove *handler* from the priority list.

        Missing handlers and bad keys are silently ignored.
        """
        self.remove_priority_handlers(handler, key=key)

    def remove_priority_handlers(
        self, *handlers: Handler, key: Key | None = None
    ) -> None:
        if not self.validate_key(key):
            log.debug("Rejected priority remove on {}: bad key", self)
            return
        for handler in handlers:
            self._discard(self._priority_handlers, handler)

    def clear_priority_handlers(self, *, key: Key | None = None) -> None:
        if not self.validate_key(key):
            log.debug("Rejected priority clear on {}: bad key", self)
            return
        self._priority_handlers.clear()

    # -- normal handlers ------------------------------------------------------

    def add_handler(self, handler: Handler) -> None:
        """Append *handler* to the normal list unless already present.

        Non-callables are skipped.
        """
        self._append(self._handlers, handler)

    def add_handlers(self, *handlers: Handler) -> None:
        for handler in handlers:
            self._append(self._handlers, handler)

    def remove_handler(self, handler: Handler) -> None:
        self._discard(self._handlers, handler)

    def remove_handlers(self, *handlers: Handler) -> None:
        for handler in handlers:
            self._discard(self._handlers, handler)

    def clear_handlers(self) -> None:
        self._handlers.clear()

    def on[H: Handler](self, handler: H, *more: Handler) -> H:
        """Add one or more normal handlers; usable as a decorator.

        Example::

            @evt.on
            def refresh(e: Firing, evt: Event) -> None: ...

            evt.on(save, notify)

        Returns:
            The first handler, unchanged.
        """
        self.add_handlers(handler, *more)
        return handler

    def _append(self, handlers: list[Handler], handler: Handler) -> None:
        if not callable(handler):
            log.debug("Skipped non-callable handler {!r} on {}", handler, self)
            return
        if index_of(handlers, handler) < 0:
            handlers.append(handler)

    @staticmethod
    def _discard(handlers: list[Handler], handler: Handler) -> None:
        i = index_of(handlers, handler)
        if i >= 0:
            del handlers[i]

    # -- dispatch -------------------------------------------------------------

    def fire(
        self,
        caller: Any = None,
        data: Any = None,
        *,
        key: Key | None = None,
        override_evt: "Event | None" = None,
        override_time: float | None = None,
    ) -> Firing | None:
        """Fire the event, calling every handler in order.

        Priority handlers run first, in insertion order, and cancellation
        is checked *after* each of them.  Normal handlers follow, with
        cancellation checked *before* each one.  Handlers are called as
        ``handler(firing, self)``.

        The handler lists are snapshotted when dispatch starts; changes
        made by handlers apply to the next firing.

        Warning:
            A handler that fires its own event gets None back (the event
            is pending).  Firing *other* events from a handler is fine.

        Args:
            caller: Passed through to ``Firing.caller``.
            data: Passed through to ``Firing.data``.
            key: Required while the event is locked.
            override_evt: Event reported as ``Firing.evt`` instead of self.
            override_time: Timestamp reported instead of ``clock()``.

        Returns:
            The firing record (cancelled or not), or None when the event
            is already firing or *key* is wrong.

        Raises:
            Exception: Anything a handler raises propagates; the event
                is left ready to fire again.
        """
        if self._pending:
            log.debug("Rejected fire of {}: already firing", self)
            return None
        if not self.validate_key(key):
            log.debug("Rejected fire of {}: bad key", self)
            return None

        self._pending = True
        try:
            firing = Firing(
                caller=caller,
                evt=self if override_evt is None else override_evt,
                data=data,
                time=self._clock() if override_time is None else override_time,
            )
            self._dispatch(firing)
        finally:
            self._pending = False
        return firing

    def _dispatch(self, firing: Firing) -> None:
        priority, normal = tuple(self._priority_handlers), tuple(self._handlers)

        for handler in priority:
            handler(firing, self)
            if firing.cancelled:
                log.debug(
                    "{} cancelled by priority handler {}", self, callable_name(handler)
                )
                return

        for handler in normal:
            if firing.cancelled:
                log.debug("{} cancelled before {}", self, callable_name(handler))
                return
            handler(firing, self)
