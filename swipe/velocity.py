import time
from collections import deque

from swipe.resolver import ZERO, Vector


class VelocityTracker:
    """Estimates release velocity (px/s) from recent pointer samples."""

    def __init__(self, window: float = 0.1, clock=time.monotonic, max_samples: int = 32):
        self.window = window
        self.clock = clock
        self.samples = deque(maxlen=max_samples)

    def reset(self):
        self.samples.clear()

    def add(self, x: float, y: float, t: float | None = None):
        self.samples.append((self.clock() if t is None else t, float(x), float(y)))

    def velocity(self) -> Vector:
        if len(self.samples) < 2:
            return ZERO
        t1, x1, y1 = self.samples[-1]
        # Oldest sample still inside the window; a paused pointer reads as zero velocity.
        t0, x0, y0 = t1, x1, y1
        for t, x, y in reversed(self.samples):
            if t1 - t > self.window:
                break
            t0, x0, y0 = t, x, y
        dt = t1 - t0
        if dt <= 0:
            return ZERO
        return Vector((x1 - x0) / dt, (y1 - y0) / dt)
