from __future__ import annotations

import time
from dataclasses import dataclass

FRAME_MS = 16
CHANNEL_NAMES = ("translate_x", "translate_y", "rotation", "scale", "opacity")


@dataclass(slots=True)
class TransformChannels:
    """Live transform of the top card. One instance per gesture session, never shared."""

    translate_x: float = 0.0
    translate_y: float = 0.0
    rotation: float = 0.0
    scale: float = 1.0
    opacity: float = 1.0

    def is_identity(self) -> bool:
        return (
            self.translate_x == 0.0
            and self.translate_y == 0.0
            and self.rotation == 0.0
            and self.scale == 1.0
            and self.opacity == 1.0
        )


def linear(t: float) -> float:
    return t


def ease_out_quad(t: float) -> float:
    return 1.0 - (1.0 - t) * (1.0 - t)


def ease_out_back(t: float, overshoot: float = 1.70158) -> float:
    # Passes the target slightly and settles back, like a damped spring.
    c3 = overshoot + 1.0
    u = t - 1.0
    return 1.0 + c3 * u * u * u + overshoot * u * u


class Tween:
    """
    Frame-driven interpolation of some channels of a TransformChannels value.

    Frames are scheduled with ``scheduler.after(ms, func)`` (a Tk widget or
    anything with the same signature); ``cancel()`` drops the pending frame
    and guarantees ``on_complete`` is never called afterwards.
    """

    def __init__(
        self,
        channels: TransformChannels,
        targets: dict,
        duration: float,
        scheduler,
        clock=time.monotonic,
        easing=ease_out_quad,
        durations: dict | None = None,
        on_complete=None,
        frame_ms: int = FRAME_MS,
    ):
        unknown = set(targets) - set(CHANNEL_NAMES)
        if unknown:
            raise ValueError(f"unknown transform channels: {sorted(unknown)}")
        self.channels = channels
        self.targets = dict(targets)
        self.durations = {name: float((durations or {}).get(name, duration)) for name in self.targets}
        self.scheduler = scheduler
        self.clock = clock
        self.easing = easing
        self.on_complete = on_complete
        self.frame_ms = frame_ms

        self.start_values = {}
        self.started_at = 0.0
        self.handle = None
        self.finished = False
        self.cancelled = False

    @property
    def active(self) -> bool:
        return not self.finished and not self.cancelled

    def start(self):
        self.start_values = {name: getattr(self.channels, name) for name in self.targets}
        self.started_at = self.clock()
        self._frame()
        return self

    def cancel(self):
        if not self.active:
            return
        self.cancelled = True
        if self.handle is not None:
            self.scheduler.after_cancel(self.handle)
            self.handle = None

    def _frame(self):
        self.handle = None
        if not self.active:
            return
        elapsed = self.clock() - self.started_at
        done = True
        for name, end in self.targets.items():
            dur = self.durations[name]
            progress = 1.0 if dur <= 0 else min(1.0, elapsed / dur)
            if progress < 1.0:
                done = False
                start = self.start_values[name]
                setattr(self.channels, name, start + (end - start) * self.easing(progress))
            else:
                setattr(self.channels, name, end)
        if done:
            self.finished = True
            if self.on_complete is not None:
                self.on_complete()
            return
        self.handle = self.scheduler.after(self.frame_ms, self._frame)
