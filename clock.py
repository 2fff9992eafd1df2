"""
Wall-clock pacing for AntEvo.

TickClock turns elapsed real time into a number of simulation ticks. At high
speeds several ticks are batched into one update, but never more than
max(1, speed / 10), and a backlog of more than three tick intervals is
dropped rather than caught up. The clock only decides *how many* ticks run;
it never changes what a tick does or the order ants are stepped in.
"""

from config import SIM_SPEED, MIN_SPEED, MAX_SPEED, SPEED_FACTOR


class TickClock:

    def __init__(self, speed: float = SIM_SPEED,
                 min_speed: float = MIN_SPEED, max_speed: float = MAX_SPEED):
        self.min_speed = min_speed
        self.max_speed = max_speed
        self.speed     = min(max_speed, max(min_speed, speed))
        self.paused    = False
        self._accum    = 0.0

    @property
    def interval(self) -> float:
        return 1.0 / self.speed

    @property
    def max_ticks_per_update(self) -> int:
        return max(1, int(self.speed / 10.0))

    # ──────────────────────────────────────────────────────────────────────────

    def advance(self, dt: float) -> int:
        """Add `dt` seconds of real time; return how many ticks are due now."""
        if self.paused:
            return 0
        self._accum += dt
        interval = self.interval
        limit = self.max_ticks_per_update
        due = 0
        while self._accum >= interval and due < limit:
            self._accum -= interval
            due += 1
        if self._accum > interval * 3:
            self._accum = 0.0
        return due

    def pump(self, sim, dt: float) -> int:
        """
        Advance the clock and run the due ticks on `sim`. A batch stops early
        when a generation ends. Returns the number of ticks run.
        """
        due = self.advance(dt)
        for done in range(1, due + 1):
            if sim.tick():
                return done
        return due

    # ──────────────────────────────────────────────────────────────────────────

    def faster(self):
        self.speed = min(self.speed * SPEED_FACTOR, self.max_speed)

    def slower(self):
        self.speed = max(self.speed / SPEED_FACTOR, self.min_speed)

    def toggle_pause(self) -> bool:
        self.paused = not self.paused
        return self.paused

    def state(self) -> dict:
        return {"speed": round(self.speed, 2), "paused": self.paused}
