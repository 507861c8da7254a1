from turnclock.logic.clock import TurnClock
from turnclock.tests.mocks import ManualScheduler


def run_ticks(clock: TurnClock, scheduler: ManualScheduler, count: int) -> None:
    """Tick ``count`` times, one virtual second apart."""
    for _ in range(count):
        scheduler.elapse(1.0)
        clock.tick()
