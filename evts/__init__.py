"""evts - In-process events with priority handlers, key locks and compounds.

This package provides named events holding ordered priority and normal
handler lists, an optional key lock restricting who may fire them, and
compound events that re-fire whenever any bound source event fires.
"""

__version__ = "0.1.0"

from loguru import logger

# Disable all evts logging by default.  Users opt in with:
#     from loguru import logger
#     logger.enable("evts")
logger.disable("evts")

from evts._types import Clock, Handler
from evts.compound import Binding, CompoundEvent
from evts.event import Event
from evts.firing import Firing
from evts.keys import Key, KeyLock

__all__ = [
    # Version
    "__version__",
    # Events
    "Event",
    "CompoundEvent",
    "Binding",
    "Firing",
    # Keys
    "Key",
    "KeyLock",
    # Types
    "Handler",
    "Clock",
]
