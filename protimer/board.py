"""
The application context: owns the AppState and exposes every mutation
the presentation layer may perform on it.

Mutators change the model, save it when persisted data changed, and
return a Change saying which parts of the UI must be redrawn. Nothing
here touches widgets.
"""

import time
from dataclasses import dataclass

from protimer.config import DEFAULT_THEME, LAYOUTS, THEMES
from protimer.errors import LastGroupError, UnknownGroupError, UnknownTimerError
from protimer.logging_config import get_logger
from protimer.models import AppState, Group

log = get_logger(__name__)


@dataclass(frozen=True)
class Change:
    tabs: bool = False
    timers: bool = False

    @property
    def any(self):
        return self.tabs or self.timers


NOTHING = Change()
TABS = Change(tabs=True)
TIMERS = Change(timers=True)
EVERYTHING = Change(tabs=True, timers=True)


class IdAllocator:
    """Creation-order ids: millisecond timestamps, bumped to stay strictly increasing."""

    def __init__(self, last=0, clock=time.time):
        self.last = last
        self._clock = clock

    def next(self):
        candidate = int(self._clock() * 1000)
        self.last = max(candidate, self.last + 1)
        return self.last


class TimerBoard:
    def __init__(self, store, settings, state=None, clock=time.time):
        self.store = store
        self.settings = settings
        self.ids = IdAllocator(clock=clock)
        if state is None:
            self.state = self._default_state()
            self.save()
        else:
            self.state = state
            self.ids.last = state.max_id()
            repaired = False
            if not state.groups:
                self._add_group("Tab 1")
                repaired = True
            if settings.pause_on_edit:
                repaired = self._pause_editing_timers() or repaired
            state.ensure_active()
            if repaired:
                self.save()

    @classmethod
    def load(cls, store, settings, clock=time.time):
        """Open the stored state, or start a default one. CorruptStateError propagates."""
        return cls(store, settings, state=store.load(), clock=clock)

    # ===================== HELPERS =====================

    def _default_state(self):
        state = AppState()
        self.state = state
        self._add_group("Tab 1")
        return state

    def _add_group(self, name):
        group = Group.create(self.ids.next(), name, self.ids.next())
        self.state.groups.append(group)
        if self.state.active_group_id is None:
            self.state.active_group_id = group.id
        log.info("Created tab %r (%d)", group.name, group.id)
        return group

    def _pause_editing_timers(self):
        """Stop timers stored both running and open for editing. True if any changed."""
        paused = [t for _, t in self.state.iter_timers() if t.is_running and t.is_editing]
        for timer in paused:
            timer.begin_edit(pause=True)
            log.info("Paused %r: it was saved running with its editor open", timer.name)
        return bool(paused)

    def _timer(self, timer_id):
        group = self.active_group
        timer = group.find_timer(timer_id) if group else None
        if timer is None:
            raise UnknownTimerError(timer_id)
        return timer

    def save(self):
        self.store.save(self.state)

    @property
    def active_group(self):
        return self.state.active_group

    @property
    def groups(self):
        return self.state.groups

    # ===================== GROUPS =====================

    def create_group(self, name=None):
        if name is None:
            name = f"Tab {len(self.state.groups) + 1}"
        group = self._add_group(name)
        self.state.active_group_id = group.id
        self.save()
        return EVERYTHING

    def switch_active_group(self, group_id):
        if self.state.find_group(group_id) is None:
            raise UnknownGroupError(group_id)
        self.state.active_group_id = group_id
        self.save()
        return EVERYTHING

    def check_can_delete_active_group(self):
        if len(self.state.groups) <= 1:
            raise LastGroupError()

    def delete_active_group(self):
        """Remove the active tab; the first remaining tab becomes active."""
        self.check_can_delete_active_group()
        removed = self.active_group
        self.state.groups = [g for g in self.state.groups if g.id != self.state.active_group_id]
        self.state.active_group_id = self.state.groups[0].id
        if removed is not None:
            log.info("Deleted tab %r (%d) with %d timer(s)", removed.name, removed.id, len(removed.timers))
        self.save()
        return EVERYTHING

    def rename_active_group(self, name):
        group = self.active_group
        if group is None:
            return NOTHING
        group.rename(name)
        self.save()
        return TABS

    # ===================== TIMERS =====================

    def add_timer_to_active_group(self):
        group = self.active_group
        if group is None:
            return NOTHING
        timer = group.add_timer(self.ids.next())
        log.info("Added %r to tab %r", timer.name, group.name)
        self.save()
        return TIMERS

    def delete_timer(self, timer_id):
        group = self.active_group
        if group is None or not group.remove_timer(timer_id):
            return NOTHING
        self.save()
        return TIMERS

    def toggle_timer(self, timer_id):
        timer = self._timer(timer_id)
        if timer.is_editing and self.settings.pause_on_edit and not timer.is_running:
            log.debug("Ignoring start of %d while it is being edited", timer_id)
            return NOTHING
        timer.toggle_run()
        self.save()
        return TIMERS

    def reset_timer(self, timer_id):
        self._timer(timer_id).reset()
        self.save()
        return TIMERS

    def begin_edit_timer(self, timer_id):
        self._timer(timer_id).begin_edit(pause=self.settings.pause_on_edit)
        self.save()
        return TIMERS

    def cancel_edit_timer(self, timer_id):
        self._timer(timer_id).cancel_edit()
        self.save()
        return TIMERS

    def commit_edit_timer(self, timer_id, hours, minutes, seconds):
        timer = self._timer(timer_id)
        timer.commit_edit(hours, minutes, seconds)
        log.debug("Timer %d set to %ds", timer_id, timer.total_duration)
        self.save()
        return TIMERS

    def set_timer_field(self, timer_id, name, value):
        self._timer(timer_id).update_field(name, value)
        self.save()
        return NOTHING

    # ===================== APPEARANCE =====================

    def set_theme(self, theme):
        if theme not in THEMES:
            log.warning("Unknown theme %r, using %s", theme, DEFAULT_THEME)
            theme = DEFAULT_THEME
        self.state.theme = theme
        self.save()
        return NOTHING

    def set_layout(self, layout):
        if layout not in LAYOUTS:
            raise ValueError(f"Layout must be one of {LAYOUTS}, got {layout!r}")
        self.state.layout = layout
        self.save()
        return TIMERS

    # ===================== RESET =====================

    def clear_all_data(self):
        """Drop the stored blob and start again from one default tab."""
        self.store.clear()
        self.state = self._default_state()
        self.save()
        log.info("All data cleared")
        return EVERYTHING
