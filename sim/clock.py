# sim/clock.py
"""
Time sources. Instants are milliseconds since the Unix epoch.
"""

import time


class SystemClock:
    """Wall clock used by the live session."""

    def now(self):
        return int(time.time() * 1000)


class ManualClock:
    """Clock that only moves when told to. Used by tests and offline runs."""

    def __init__(self, start_ms=0):
        self.t = int(start_ms)

    def now(self):
        return self.t

    def advance(self, ms):
        self.t += int(ms)
        return self.t

    def advance_hours(self, hours):
        return self.advance(hours * 3_600_000)
