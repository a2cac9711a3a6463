"""Shared test helpers for SerenityBreath."""

from serenitybreath.engine.facade import BreathingEngine


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeClock:
    """Monotonic time source that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def beat(engine: BreathingEngine, clock: FakeClock, seconds: float = 1.0) -> None:
    """Let *seconds* of fake time pass, then fire one heartbeat."""
    clock.advance(seconds)
    engine._on_heartbeat()


def beats(engine: BreathingEngine, clock: FakeClock, count: int) -> None:
    for _ in range(count):
        beat(engine, clock)
