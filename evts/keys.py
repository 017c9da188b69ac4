"""Access keys for evts.

A :class:`Key` is an opaque token minted by :meth:`KeyLock.lock`.  Keys
compare by identity only, so the one returned by ``lock()`` is the only
value that will ever unlock it.  :class:`KeyLock` holds the lock state
used by both :class:`~evts.event.Event` and
:class:`~evts.compound.CompoundEvent`.
"""

from loguru import logger

log = logger.bind(source=__name__)


class Key:
    """Unforgeable access token.

    Instances have no public state and use default identity equality;
    a ``Key`` is never equal to ``None``, to another ``Key``, or to any
    other object.

    Attributes:
        owner: Display label of the object that minted the key (only
            used for ``repr``).
    """

    __slots__ = ("owner",)

    def __init__(self, owner: str = "") -> None:
        self.owner = owner

    def __repr__(self) -> str:
        return f"<Key owner={self.owner!r} at {id(self):#x}>"


class KeyLock:
    """Optional single-key lock.

    ``lock()`` mints a fresh :class:`Key` when unlocked; ``unlock()``
    clears it only when handed that exact key.
    """

    def __init__(self, owner: str = "") -> None:
        self._owner = owner
        self._key: Key | None = None

    @property
    def locked(self) -> bool:
        return self._key is not None

    @property
    def current(self) -> Key | None:
        """Stored key; only for owners firing themselves (compound relays)."""
        return self._key

    def validate_key(self, key: Key | None) -> bool:
        """Check whether *key* opens the lock.

        Args:
            key: Key presented by the caller, or None.

        Returns:
            True when unlocked, or when *key* is the stored key.
        """
        return self._key is None or self._key is key

    def lock(self) -> Key | None:
        """Lock and return the new key.

        Returns:
            A fresh key, or None when already locked.
        """
        if self._key is not None:
            return None
        self._key = Key(self._owner)
        log.debug("Locked {}", self._owner)
        return self._key

    def unlock(self, key: Key | None) -> Key | None:
        """Unlock if *key* is the stored key.

        Args:
            key: Key returned by the matching ``lock()`` call.

        Returns:
            *key* on success, None on mismatch (state unchanged).
        """
        if self._key is None or self._key is not key:
            return None
        self._key = None
        log.debug("Unlocked {}", self._owner)
        return key
