"""Shared type definitions for evts.

All type aliases use PEP 695 ``type`` statement syntax.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from evts.event import Event
    from evts.firing import Firing

type Handler = Callable[["Firing", "Event"], Any]
"""Event handler signature.

Handlers receive the firing record and the event that is dispatching it.
Return values are ignored.
"""

type Clock = Callable[[], float]
"""Zero-argument timestamp source used for default firing times."""
