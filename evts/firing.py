"""Firing record for evts.

A :class:`Firing` is built by :meth:`Event.fire <evts.event.Event.fire>`
and handed to every handler.  Fields are frozen; the only mutable state
is the private cancellation flag flipped by :meth:`Firing.cancel`.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr


class Firing(BaseModel):
    """Immutable record describing one ``fire()`` call.

    Attributes:
        caller: Whatever the firing code passed as ``caller``.
        evt: Event to report as the origin.  Normally the firing event;
            a compound relay reports the bound source instead.
        data: Payload passed to ``fire()``.
        time: Timestamp of the firing, in seconds.

    Example:
        >>> def handler(e: Firing, evt: Event) -> None:
        ...     if e.data is None:
        ...         e.cancel()
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    caller: Any = None
    evt: Any = None
    data: Any = None
    time: float

    _cancelled: bool = PrivateAttr(default=False)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Stop dispatch after the current handler returns."""
        self._cancelled = True
