"""Compound events: one event fired by many bound source events."""

import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict

from evts._types import Clock
from evts.event import Event
from evts.firing import Firing
from evts.keys import Key
from evts.utils import index_of

log = logger.bind(source=__name__)


class Binding(BaseModel):
    """Bookkeeping for one bound source.

    Attributes:
        source: The bound event.
        key: Source key used at bind time; needed again to unbind.
        handler: Relay installed in ``source``'s priority list.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    source: Event
    key: Key | None
    handler: Callable[..., Any]

    @property
    def installed(self) -> bool:
        """False once the relay was removed from the source behind our back."""
        return index_of(self.source.priority_handlers, self.handler) >= 0


class CompoundEvent(Event):
    """Event that re-fires whenever any bound source event fires.

    :meth:`bind` installs a relay as a *priority* handler on the source.
    The relay fires this compound with the source firing's ``caller``,
    ``data``, ``evt`` and ``time``, so compound handlers see the
    originating event and timestamp rather than the compound's own.

    Ordering follows from the relay being an ordinary priority handler:
    source priority handlers added before ``bind`` run before the
    compound, those added after run after the compound has fully
    dispatched, and source normal handlers run last.  Cancelling the
    compound's firing never cancels the source's.

    The compound's key (``lock()``/``unlock()``) gates ``bind``,
    ``unbind``, ``fire`` and priority handler changes on the compound.

    Note:
        Bound sources are referenced, not owned.  Nothing unbinds a source
        automatically; call :meth:`unbind` (or use :meth:`binding`) when
        the relationship should end.

    Example::

        saved = Event("saved")
        deleted = Event("deleted")
        changed = CompoundEvent("changed")
        changed.bind(saved)
        changed.bind(deleted)

        @changed.on
        def refresh(e: Firing, evt: Event) -> None:
            print(f"{e.evt.name} at {e.time}")

        saved.fire(data="report.txt")  # prints "saved at ..."
    """

    def __init__(self, name: Any = "", *, clock: Clock = time.time) -> None:
        super().__init__(name, clock=clock)
        self._bindings: dict[Event, Binding] = {}

    @property
    def bound_events(self) -> tuple[Event, ...]:
        """Bound sources in bind order."""
        self._prune()
        return tuple(self._bindings)

    def is_bound(self, source: Event) -> bool:
        self._prune()
        return source in self._bindings

    def bind(
        self,
        source: Event,
        *,
        key: Key | None = None,
        source_key: Key | None = None,
    ) -> "CompoundEvent | None":
        """Make *source* fire this compound.

        Args:
            source: Event to bind; must not be this compound.
            key: This compound's key, required while it is locked.
            source_key: *source*'s key, required while it is locked.
                It is remembered for :meth:`unbind`.

        Returns:
            self on success (including when *source* is already bound),
            None when *source* is self or not an Event, or a key fails.
        """
        if source is self or not isinstance(source, Event):
            log.debug("Rejected bind of {!r} to {}", source, self)
            return None
        if not (self.validate_key(key) and source.validate_key(source_key)):
            log.debug("Rejected bind of {} to {}: bad key", source, self)
            return None
        self._prune()
        if source in self._bindings:
            return self

        def relay(e: Firing, evt: Event) -> None:
            self._relay(e)

        source.add_priority_handler(relay, key=source_key)
        self._bindings[source] = Binding(source=source, key=source_key, handler=relay)
        log.debug("Bound {} to {}", source, self)
        return self

    def unbind(self, source: Event, *, key: Key | None = None) -> "CompoundEvent | None":
        """Remove the relay that :meth:`bind` installed on *source*.

        Args:
            source: A currently bound event.
            key: This compound's key, required while it is locked.

        Returns:
            self on success, None when *source* is not bound, *key* fails,
            or the source key recorded at bind time no longer opens
            *source*.
        """
        self._prune()
        binding = self._bindings.get(source) if isinstance(source, Event) else None
        if binding is None:
            log.debug("Rejected unbind of {!r} from {}: not bound", source, self)
            return None
        if not (self.validate_key(key) and source.validate_key(binding.key)):
            log.debug("Rejected unbind of {} from {}: bad key", source, self)
            return None
        source.remove_priority_handler(binding.handler, key=binding.key)
        del self._bindings[source]
        log.debug("Unbound {} from {}", source, self)
        return self

    @contextmanager
    def binding(
        self,
        source: Event,
        *,
        key: Key | None = None,
        source_key: Key | None = None,
    ) -> Iterator["CompoundEvent | None"]:
        """Bind *source* for the duration of a ``with`` block.

        Yields the result of :meth:`bind`.  On exit the source is unbound
        again, unless it was already bound before the block started.

        Example::

            with changed.binding(saved):
                saved.fire()  # fires changed
            saved.fire()      # does not
        """
        created = not self.is_bound(source)
        result = self.bind(source, key=key, source_key=source_key)
        try:
            yield result
        finally:
            if result is not None and created and self.unbind(source, key=key) is None:
                log.debug("Could not unbind {} from {} on exit", source, self)

    def _relay(self, e: Firing) -> Firing | None:
        return self.fire(
            e.caller,
            e.data,
            key=self._lock.current,
            override_evt=e.evt,
            override_time=e.time,
        )

    def _prune(self) -> None:
        """Forget bindings whose relay was removed from the source directly."""
        stale = [src for src, b in self._bindings.items() if not b.installed]
        for src in stale:
            log.debug("Dropping stale binding of {} to {}", src, self)
            del self._bindings[src]
