"""Shared fixtures: synthetic catalogs and a manually driven event loop."""

import pytest

from humanerror.contexts.catalog import RoleCatalog, load_catalog


SYNTHETIC_CATALOG = {
    "safe_roles": ["Plumber", "Branch Manager"],
    "roles": {
        "Software Engineer": {
            "aliases": ["Developer", "Programmer", "SWE"],
            "templates": [
                "Engineer: {months} months left, viability {viability}%.",
                "Engineer legacy: {days} days means {months} months.",
            ],
        },
        "Data Scientist": {
            "aliases": ["Data Analyst", "ML Engineer"],
            "templates": ["Data: {months} months, {viability}%."],
        },
        "Plumber": {
            "aliases": ["Pipefitter"],
            "templates": ["Plumbers are safe."],
        },
        "Branch Manager": {
            "aliases": ["Regional Manager"],
            "templates": ["Branch managers are forever."],
        },
        "Product Manager": {
            "aliases": [],
            "templates": [],
        },
        "Default": {
            "templates": [
                "Default one: {months} months.",
                "Default two: {viability}% viability.",
            ],
        },
    },
}


@pytest.fixture
def catalog_data():
    """Fresh copy of the synthetic catalog layout (safe to mutate)."""
    import copy

    return copy.deepcopy(SYNTHETIC_CATALOG)


@pytest.fixture
def catalog(catalog_data):
    """Validated synthetic catalog."""
    built = RoleCatalog.from_dict(catalog_data)
    built.validate()
    return built


@pytest.fixture(scope="session")
def bundled_catalog():
    """The catalog shipped with the package."""
    return load_catalog()


# =============================================================================
# MANUAL EVENT LOOP
# =============================================================================


class FakeTimer:
    """TimerHandle stand-in recording whether it was cancelled or fired."""

    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self.fired = False
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self):
        return self._cancelled


class FakeFuture:
    """Just enough of asyncio.Future for MessageReveal's completion tracking."""

    def __init__(self):
        self._done = False
        self._result = None

    def done(self):
        return self._done

    def set_result(self, value):
        self._done = True
        self._result = value

    def result(self):
        return self._result


class FakeLoop:
    """
    Event loop stand-in whose clock only moves when the test calls advance().

    Timers due at the same time fire in the order they were scheduled.
    """

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def call_later(self, delay, callback, *args):
        timer = FakeTimer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    def create_future(self):
        return FakeFuture()

    def pending(self):
        return [t for t in self.timers if not t.cancelled() and not t.fired]

    def advance(self, seconds):
        """Move the clock forward, firing every timer that comes due."""
        target = self.now + seconds
        while True:
            due = [t for t in self.pending() if t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self.now = timer.when
            timer.fired = True
            timer.callback(*timer.args)
        self.now = target

    def run_until_idle(self, max_steps=10_000):
        """Fire timers until none are pending."""
        for _ in range(max_steps):
            pending = self.pending()
            if not pending:
                return
            self.advance(min(t.when for t in pending) - self.now)
        raise AssertionError("Timers still pending after max_steps")


@pytest.fixture
def fake_loop():
    return FakeLoop()
