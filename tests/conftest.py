"""Shared test fixtures for all evts tests."""

import pytest

from evts import Event, Firing


class Recorder:
    """Builds handlers that append their label to a shared log."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.firings: list[Firing] = []

    def handler(self, label: str, *, cancel: bool = False):
        def handle(e: Firing, evt: Event) -> None:
            self.calls.append(label)
            self.firings.append(e)
            if cancel:
                e.cancel()

        handle.__qualname__ = label
        return handle


class FakeClock:
    """Deterministic clock: returns 1.0, 2.0, 3.0, ..."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def recorder() -> Recorder:
    """Fresh call log for recording handler invocations."""
    return Recorder()


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock starting at 1.0."""
    return FakeClock()
