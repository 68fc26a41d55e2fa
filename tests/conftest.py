import pytest

from lapwatch.core.timing import TimingEngine


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def wall_clock():
    # 2024-05-01T12:00:00Z
    return FakeClock(start=1_714_564_800_000)


@pytest.fixture
def engine(clock, wall_clock):
    """Engine with the background ticker disabled; tests call tick() themselves."""
    eng = TimingEngine(clock=clock, wall_clock=wall_clock, tick_interval_ms=None)
    yield eng
    eng.close()
