from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass, field

from swipe.animation import TransformChannels, Tween, ease_out_back, ease_out_quad
from swipe.cursor import CardStackCursor
from swipe.resolver import (
    DIRECTIONS,
    HORIZONTAL,
    NONE,
    ZERO,
    SwipeThresholds,
    Vector,
    exit_trajectory,
    resolve,
    rotation_for,
)

logger = logging.getLogger(__name__)

IDLE = "idle"
DRAGGING = "dragging"
COMMITTING = "committing"
SNAPPING_BACK = "snapping_back"

EXIT = "exit"
SNAP_BACK = "snap_back"

EXIT_DURATION = 0.2
MIN_EXIT_DURATION = 0.08
EXIT_FADE_SHARE = 0.8
EXIT_SCALE = 0.8
SNAP_BACK_DURATION = 0.35
MAX_ROTATION = 20.0
VERTICAL_DAMPING = 0.5
EXIT_OVERSHOOT = 1.5


@dataclass(slots=True)
class GestureSession:
    """Interaction state for whichever card is on top; discarded when the top card changes."""

    session_id: int
    head: int
    card: object
    state: str = IDLE
    channels: TransformChannels = field(default_factory=TransformChannels)
    translation: Vector = ZERO
    tween: Tween | None = None
    outcome: str = NONE
    alive: bool = True
    # Bumped for every new drag or animation; completions carry the value they were started with.
    animation_id: int = 0


@dataclass(frozen=True, slots=True)
class AnimationFinished:
    session_id: int
    kind: str
    outcome: str = NONE
    animation_id: int = 0


class GestureBridge:
    """
    Drives the top card from pointer input and hands completed swipes to the cursor.

    ``scheduler`` must offer Tk's ``after(ms, func)`` / ``after_cancel(id)``.
    All state here is owned by the scheduler's thread; animations report back
    by posting AnimationFinished messages that ``process_messages`` consumes
    in order, and messages for a torn-down session are dropped.
    """

    def __init__(
        self,
        cursor: CardStackCursor,
        scheduler,
        screen_width: float,
        screen_height: float,
        thresholds: SwipeThresholds | None = None,
        clock=time.monotonic,
        exit_duration: float = EXIT_DURATION,
        snap_back_duration: float = SNAP_BACK_DURATION,
        max_rotation: float = MAX_ROTATION,
        vertical_damping: float = VERTICAL_DAMPING,
    ):
        if screen_width <= 0 or screen_height <= 0:
            raise ValueError(f"screen size must be positive, got {screen_width}x{screen_height}")
        self.cursor = cursor
        self.scheduler = scheduler
        self.screen_width = float(screen_width)
        self.screen_height = float(screen_height)
        self.thresholds = thresholds or SwipeThresholds.for_screen(self.screen_width)
        self.clock = clock
        self.exit_duration = exit_duration
        self.snap_back_duration = snap_back_duration
        self.max_rotation = max_rotation
        self.vertical_damping = vertical_damping

        self.session: GestureSession | None = None
        self.inbox = deque()
        self.drain_handle = None
        self.on_change = None
        self._next_session_id = 0

        self.cursor.add_listener(self.on_cursor_change)
        self._open_session()

    @property
    def state(self) -> str:
        return IDLE if self.session is None else self.session.state

    @property
    def channels(self) -> TransformChannels | None:
        return None if self.session is None else self.session.channels

    def resize(self, screen_width: float, screen_height: float, thresholds: SwipeThresholds | None = None):
        if screen_width <= 0 or screen_height <= 0:
            return
        self.screen_width = float(screen_width)
        self.screen_height = float(screen_height)
        self.thresholds = thresholds or SwipeThresholds.for_screen(self.screen_width)

    def close(self):
        self._teardown_session()
        self.cursor.remove_listener(self.on_cursor_change)
        if self.drain_handle is not None:
            self.scheduler.after_cancel(self.drain_handle)
            self.drain_handle = None
        self.inbox.clear()

    # Session lifecycle

    def on_cursor_change(self, cursor):
        self._teardown_session()
        self._open_session()
        self._changed()

    def _open_session(self):
        card = self.cursor.current_card()
        if card is None:
            self.session = None
            return
        self._next_session_id += 1
        # Fresh channels: the new top card must never inherit the old card's exit transform.
        self.session = GestureSession(session_id=self._next_session_id, head=self.cursor.head, card=card)
        logger.debug("Opened gesture session %d at head %d", self.session.session_id, self.session.head)

    def _teardown_session(self):
        session = self.session
        if session is None:
            return
        if session.tween is not None:
            session.tween.cancel()
            session.tween = None
        session.alive = False
        self.session = None
        logger.debug("Closed gesture session %d", session.session_id)

    # Gesture input

    def begin(self) -> bool:
        session = self.session
        if session is None or session.state == COMMITTING:
            return False
        if not self.cursor.can_commit():
            logger.debug("Gesture refused: cursor cannot commit")
            return False
        self._stop_animation(session)
        session.state = DRAGGING
        session.translation = ZERO
        return True

    def update(self, translation: Vector):
        session = self.session
        if session is None or session.state != DRAGGING:
            return
        session.translation = translation
        channels = session.channels
        channels.translate_x = translation.x
        channels.translate_y = translation.y * self.vertical_damping
        channels.rotation = rotation_for(translation.x, self.screen_width, self.max_rotation)
        self._changed()

    def end(self, velocity: Vector = ZERO) -> str:
        session = self.session
        if session is None or session.state != DRAGGING:
            return NONE
        resolution = resolve(session.translation, velocity, self.thresholds)
        if resolution.committed and self.cursor.can_commit():
            self._start_exit(session, resolution.outcome, resolution.speed)
            return resolution.outcome
        if resolution.committed:
            logger.debug("Swipe %s resolved while a commit is in flight, snapping back", resolution.outcome)
        self._start_snap_back(session)
        return NONE

    def cancel(self):
        session = self.session
        if session is None or session.state != DRAGGING:
            return
        self._start_snap_back(session)

    def swipe(self, outcome: str) -> bool:
        """Play a full exit for ``outcome`` without a drag, e.g. from a key press."""
        session = self.session
        if outcome not in DIRECTIONS or session is None:
            return False
        if session.state in (COMMITTING, DRAGGING) or not self.cursor.can_commit():
            return False
        self._start_exit(session, outcome)
        return True

    # Animations

    def _stop_animation(self, session: GestureSession):
        if session.tween is not None:
            session.tween.cancel()
            session.tween = None
        session.animation_id += 1

    def exit_duration_for(self, distance: float, speed: float) -> float:
        """Time to cover ``distance`` at ``speed`` px/s, capped by ``exit_duration``; zero speed takes the full time."""
        if speed <= 0:
            return self.exit_duration
        return min(self.exit_duration, max(MIN_EXIT_DURATION, abs(distance) / speed))

    def _start_exit(self, session: GestureSession, outcome: str, speed: float = 0.0):
        self._stop_animation(session)
        session.state = COMMITTING
        session.outcome = outcome
        target = exit_trajectory(outcome, session.translation, self.screen_width, self.screen_height, EXIT_OVERSHOOT)
        if outcome in HORIZONTAL:
            distance = target.x - session.channels.translate_x
        else:
            distance = target.y - session.channels.translate_y
        duration = self.exit_duration_for(distance, speed)
        sid, aid = session.session_id, session.animation_id
        session.tween = Tween(
            session.channels,
            {"translate_x": target.x, "translate_y": target.y, "opacity": 0.0, "scale": EXIT_SCALE},
            duration,
            self.scheduler,
            clock=self.clock,
            easing=ease_out_quad,
            durations={"opacity": duration * EXIT_FADE_SHARE},
            on_complete=lambda: self.post(AnimationFinished(sid, EXIT, outcome, aid)),
        )
        logger.debug("Session %d exiting %s over %.3f s", sid, outcome, duration)
        session.tween.start()
        self._changed()

    def _start_snap_back(self, session: GestureSession):
        self._stop_animation(session)
        session.state = SNAPPING_BACK
        session.outcome = NONE
        sid, aid = session.session_id, session.animation_id
        session.tween = Tween(
            session.channels,
            {"translate_x": 0.0, "translate_y": 0.0, "rotation": 0.0},
            self.snap_back_duration,
            self.scheduler,
            clock=self.clock,
            easing=ease_out_back,
            on_complete=lambda: self.post(AnimationFinished(sid, SNAP_BACK, NONE, aid)),
        )
        session.tween.start()
        self._changed()

    # Completion messages

    def post(self, message: AnimationFinished):
        self.inbox.append(message)
        if self.drain_handle is None:
            self.drain_handle = self.scheduler.after(0, self.process_messages)

    def process_messages(self):
        self.drain_handle = None
        while self.inbox:
            self._handle(self.inbox.popleft())

    def _handle(self, message: AnimationFinished):
        session = self.session
        if session is None or not session.alive or session.session_id != message.session_id:
            logger.debug("Dropping %s completion for stale session %d", message.kind, message.session_id)
            return
        if message.animation_id != session.animation_id:
            logger.debug("Dropping superseded %s completion in session %d", message.kind, message.session_id)
            return
        session.tween = None
        if message.kind == SNAP_BACK:
            if session.state == SNAPPING_BACK:
                session.state = IDLE
                session.translation = ZERO
                self._changed()
            return
        if message.kind == EXIT and session.state == COMMITTING:
            session.state = IDLE
            if not self.cursor.commit(message.outcome):
                # Lost a race with another commit; put the card back where the user can see it.
                session.channels = TransformChannels()
                session.translation = ZERO
            self._changed()

    def _changed(self):
        if self.on_change is not None:
            self.on_change()
