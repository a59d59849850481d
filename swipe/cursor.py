import logging

from swipe.resolver import DIRECTIONS

logger = logging.getLogger(__name__)


class CardStackCursor:
    """
    Index-based pointer into an ordered deck of cards.

    The deck is never mutated or filtered; cards are consumed only by moving
    ``head`` forward. ``animating`` is held from the moment a commit is
    accepted until the head has advanced, so at most one commit is in flight.
    """

    def __init__(self, deck=(), on_swipe=None, max_visible=3, scheduler=None, advance_delay_ms=0, on_exhausted=None):
        if int(max_visible) < 1:
            raise ValueError(f"max_visible must be at least 1, got {max_visible!r}")
        self.on_swipe = on_swipe
        self.on_exhausted = on_exhausted
        self.max_visible = int(max_visible)
        # Tk-like object with after(ms, func) / after_cancel(id); None advances synchronously.
        self.scheduler = scheduler
        self.advance_delay_ms = max(0, int(advance_delay_ms))

        self._deck = tuple(deck)
        self._head = 0
        self._animating = False
        self._generation = 0
        self._pending_advance = None
        self._listeners = []

    @property
    def deck(self):
        return self._deck

    @property
    def head(self) -> int:
        return self._head

    @property
    def animating(self) -> bool:
        return self._animating

    @property
    def remaining(self) -> int:
        return len(self._deck) - self._head

    def visible_window(self):
        return self._deck[self._head:self._head + self.max_visible]

    def current_card(self):
        if self._head < len(self._deck):
            return self._deck[self._head]
        return None

    def next_card(self):
        if self._head + 1 < len(self._deck):
            return self._deck[self._head + 1]
        return None

    def has_more(self) -> bool:
        return self._head < len(self._deck)

    def can_commit(self) -> bool:
        return not self._animating and self.has_more()

    def add_listener(self, listener):
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def commit(self, outcome: str) -> bool:
        if outcome not in DIRECTIONS:
            logger.debug("Ignoring commit with outcome %r", outcome)
            return False
        if not self.can_commit():
            if self._animating:
                logger.warning("Swipe already in progress at head %d, ignoring %s", self._head, outcome)
            else:
                logger.debug("Deck exhausted, ignoring %s", outcome)
            return False

        self._animating = True
        card = self._deck[self._head]
        logger.debug("Committing %s at head %d", outcome, self._head)
        if self.on_swipe is not None:
            try:
                self.on_swipe(card, outcome)
            except Exception:
                # The card already left the screen; keep the stack in step with it.
                logger.exception("Swipe observer failed for %s at head %d", outcome, self._head)

        generation = self._generation
        if self.scheduler is not None and self.advance_delay_ms > 0:
            self._pending_advance = self.scheduler.after(self.advance_delay_ms, lambda: self._advance(generation))
        else:
            self._advance(generation)
        return True

    def _advance(self, generation: int):
        self._pending_advance = None
        if generation != self._generation:
            logger.debug("Dropping stale advance for generation %d", generation)
            return
        self._head += 1
        self._animating = False
        logger.debug("Advanced head to %d", self._head)
        self._notify()
        if not self.has_more() and self.on_exhausted is not None:
            self.on_exhausted()

    def reset(self):
        logger.debug("Resetting cursor from head %d", self._head)
        self._generation += 1
        if self._pending_advance is not None and self.scheduler is not None:
            self.scheduler.after_cancel(self._pending_advance)
        self._pending_advance = None
        self._head = 0
        self._animating = False
        self._notify()

    def replace_deck(self, deck):
        self._deck = tuple(deck)
        self.reset()

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)
