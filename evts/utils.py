from typing import Any


def callable_name(cb: Any) -> str:
    """Return a human-readable name for a callable, safe for logging.

    Falls back through ``__qualname__``, ``__name__``, and ``repr()``
    so that ``functools.partial``, callable instances, and other exotic
    callables never raise ``AttributeError``.

    Args:
        cb: Any callable object.

    Returns:
        Display name string.
    """
    return (
        getattr(cb, "__qualname__", None) or getattr(cb, "__name__", None) or repr(cb)
    )


def index_of(items: list[Any] | tuple[Any, ...], target: Any) -> int:
    """Return the position of *target* in *items* by identity, or -1.

    ``list.index`` and ``in`` compare with ``==``, which would merge
    distinct callables that happen to compare equal.
    """
    for i, item in enumerate(items):
        if item is target:
            return i
    return -1
