"""
The once-per-second driver that advances every running timer in every tab.

TickScheduler.tick() is called by the UI event loop. It never sleeps and
owns no thread; each call is one atomic pass over the whole state.
"""

import time
from dataclasses import dataclass
from typing import Optional, Tuple

from protimer.config import SOUND_NONE
from protimer.logging_config import get_logger
from protimer.models import TickOutcome

log = get_logger(__name__)


@dataclass(frozen=True)
class TickSummary:
    """What one tick changed, for the presentation layer to act on."""
    mutated: bool = False
    completed: Tuple[int, ...] = ()
    updated_ids: Tuple[int, ...] = ()
    full_render: bool = False
    alerts: Tuple[str, ...] = ()
    min_remaining: Optional[int] = None


class TickScheduler:
    def __init__(self, board, dispatcher, catch_up=False, clock=time.monotonic):
        self.board = board
        self.dispatcher = dispatcher
        self.catch_up = catch_up
        self._clock = clock
        self._last = None
        self._carry = 0.0

    def _step(self):
        """Whole seconds to advance this tick."""
        if not self.catch_up:
            return 1
        now = self._clock()
        if self._last is None:
            self._last = now
            return 1
        elapsed = now - self._last + self._carry
        self._last = now
        step = int(elapsed)
        self._carry = elapsed - step
        return step

    def tick(self):
        state = self.board.state
        step = self._step()
        if step <= 0:
            # Early callback in catch-up mode: nothing has elapsed yet.
            return TickSummary(min_remaining=self._min_remaining())

        active_id = state.active_group_id
        advanced = 0
        completed = []
        updated = []
        alerts = []

        for group, timer in state.iter_timers():
            outcome = timer.tick(step)
            if outcome is TickOutcome.UNCHANGED:
                continue
            advanced += 1
            if group.id == active_id:
                updated.append(timer.id)
            if outcome is TickOutcome.JUST_FINISHED:
                completed.append(timer.id)
                log.info("Timer %r in tab %r finished", timer.name, group.name)
                if timer.sound != SOUND_NONE:
                    alerts.append(timer.sound)
                    self._dispatch(timer.sound)

        if advanced:
            log.debug("Tick advanced %d timer(s) by %ds", advanced, step)
            self.board.save()

        return TickSummary(
            mutated=bool(advanced),
            completed=tuple(completed),
            updated_ids=tuple(updated),
            full_render=bool(completed),
            alerts=tuple(alerts),
            min_remaining=self._min_remaining(),
        )

    def _min_remaining(self):
        running = [t.remaining for _, t in self.board.state.iter_timers() if t.is_running]
        return min(running) if running else None

    def _dispatch(self, kind):
        try:
            self.dispatcher.play(kind)
        except Exception:
            log.exception("Alert %r failed", kind)
