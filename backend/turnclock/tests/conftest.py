import pytest

from turnclock.logic.clock import TurnClock
from turnclock.tests.mocks import ManualScheduler, RecordingNotificationSink


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def sink():
    return RecordingNotificationSink()


@pytest.fixture
def make_clock(scheduler, sink):
    def _make(players=("A", "B", "C"), turn_duration=30, **kwargs):
        return TurnClock(players, schedule=scheduler, turn_duration=turn_duration, notifications=sink, **kwargs)

    return _make

