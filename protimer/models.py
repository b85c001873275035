"""
Core data model: timers, tabs (groups) and the application state.

Field names in memory are snake_case; the persisted JSON keeps the
camelCase keys of the earlier browser version so its blobs load unchanged.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from protimer.config import (
    DEFAULT_LAYOUT,
    DEFAULT_THEME,
    DEFAULT_TIMER_SECONDS,
    LAYOUTS,
    SOUND_KINDS,
    SOUND_NONE,
)
from protimer.errors import CorruptStateError
from protimer.formatting import to_whole_number


class TickOutcome(Enum):
    UNCHANGED = "unchanged"
    DECREMENTED = "decremented"
    JUST_FINISHED = "justFinished"


def normalize_sound(kind):
    return kind if kind in SOUND_KINDS else SOUND_NONE


# ===================== TIMER =====================

@dataclass
class Timer:
    id: int
    name: str
    total_duration: int
    remaining: int
    is_running: bool = False
    is_editing: bool = False
    sound: str = SOUND_NONE

    @classmethod
    def create(cls, timer_id, duration=DEFAULT_TIMER_SECONDS, ordinal=1):
        duration = max(0, int(duration))
        return cls(id=timer_id, name=f"Timer {ordinal}", total_duration=duration, remaining=duration)

    @property
    def is_finished(self):
        return self.remaining == 0 and not self.is_running

    def toggle_run(self):
        """Start/pause. Starting a finished timer refills it first."""
        if self.remaining == 0:
            self.remaining = self.total_duration
        self.is_running = not self.is_running

    def reset(self):
        self.is_running = False
        self.remaining = self.total_duration

    def begin_edit(self, pause=True):
        self.is_editing = True
        if pause:
            self.is_running = False

    def cancel_edit(self):
        self.is_editing = False

    def commit_edit(self, hours, minutes, seconds):
        """Apply a new duration. Progress of a running countdown is discarded."""
        h = to_whole_number(hours)
        m = to_whole_number(minutes)
        s = to_whole_number(seconds)
        self.total_duration = h * 3600 + m * 60 + s
        self.remaining = self.total_duration
        self.is_running = False
        self.is_editing = False

    def update_field(self, name, value):
        if name == "name":
            self.name = "" if value is None else str(value)
        elif name == "sound":
            self.sound = normalize_sound(value)
        else:
            raise ValueError(f"Timer field {name!r} cannot be set directly")

    def tick(self, seconds=1):
        """Advance by `seconds`; a timer reaching zero stops in the same call."""
        if not self.is_running:
            return TickOutcome.UNCHANGED
        if self.remaining > 0:
            self.remaining -= min(seconds, self.remaining)
            if self.remaining > 0:
                return TickOutcome.DECREMENTED
        self.is_running = False
        self.remaining = 0
        return TickOutcome.JUST_FINISHED

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "totalDuration": self.total_duration,
            "remaining": self.remaining,
            "isRunning": self.is_running,
            "isEditing": self.is_editing,
            "sound": self.sound,
        }

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise CorruptStateError(f"Timer entry must be an object, got {type(data).__name__}")
        timer_id = _require_int(data, "id", "timer")
        total = max(0, _require_int(data, "totalDuration", "timer"))
        remaining = _optional_int(data, "remaining", total)
        remaining = min(max(0, remaining), total)
        name = data.get("name", "Timer")
        is_running = bool(data.get("isRunning", False)) and remaining > 0
        return cls(
            id=timer_id,
            name=name if isinstance(name, str) else str(name),
            total_duration=total,
            remaining=remaining,
            is_running=is_running,
            is_editing=bool(data.get("isEditing", False)),
            sound=normalize_sound(data.get("sound", SOUND_NONE)),
        )


# ===================== GROUP =====================

@dataclass
class Group:
    id: int
    name: str
    timers: List[Timer] = field(default_factory=list)

    @classmethod
    def create(cls, group_id, name, first_timer_id):
        group = cls(id=group_id, name=name)
        group.add_timer(first_timer_id)
        return group

    def add_timer(self, timer_id, duration=DEFAULT_TIMER_SECONDS):
        timer = Timer.create(timer_id, duration, ordinal=len(self.timers) + 1)
        self.timers.append(timer)
        return timer

    def remove_timer(self, timer_id):
        """Returns True when a timer was removed."""
        before = len(self.timers)
        self.timers = [t for t in self.timers if t.id != timer_id]
        return len(self.timers) != before

    def find_timer(self, timer_id) -> Optional[Timer]:
        for timer in self.timers:
            if timer.id == timer_id:
                return timer
        return None

    def rename(self, name):
        self.name = "" if name is None else str(name)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "timers": [t.to_dict() for t in self.timers]}

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise CorruptStateError(f"Tab entry must be an object, got {type(data).__name__}")
        timers = data.get("timers", [])
        if not isinstance(timers, list):
            raise CorruptStateError("Tab 'timers' must be a list")
        name = data.get("name", "Tab")
        return cls(
            id=_require_int(data, "id", "tab"),
            name=name if isinstance(name, str) else str(name),
            timers=[Timer.from_dict(t) for t in timers],
        )


# ===================== APPLICATION STATE =====================

@dataclass
class AppState:
    theme: str = DEFAULT_THEME
    layout: str = DEFAULT_LAYOUT
    active_group_id: Optional[int] = None
    groups: List[Group] = field(default_factory=list)

    @property
    def active_group(self) -> Optional[Group]:
        return self.find_group(self.active_group_id)

    def find_group(self, group_id) -> Optional[Group]:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None

    def iter_timers(self):
        for group in self.groups:
            for timer in group.timers:
                yield group, timer

    def max_id(self):
        ids = [g.id for g in self.groups] + [t.id for _, t in self.iter_timers()]
        return max(ids, default=0)

    def ensure_active(self):
        """Point active_group_id at the first tab when it references nothing."""
        if self.groups and self.active_group is None:
            self.active_group_id = self.groups[0].id

    def to_dict(self):
        return {
            "theme": self.theme,
            "layout": self.layout,
            "activeTabId": self.active_group_id,
            "tabs": [g.to_dict() for g in self.groups],
        }

    @classmethod
    def from_dict(cls, data):
        """
        Rebuild state from a stored blob, defaulting missing top-level fields.
        A legacy flat blob ({"timers": [...]}) becomes a single tab.
        """
        if not isinstance(data, dict):
            raise CorruptStateError(f"State must be an object, got {type(data).__name__}")

        if "tabs" not in data and isinstance(data.get("timers"), list):
            timers = [Timer.from_dict(t) for t in data["timers"]]
            next_id = max([t.id for t in timers], default=0) + 1
            groups = [Group(id=next_id, name="Tab 1", timers=timers)]
        else:
            tabs = data.get("tabs", [])
            if tabs is None:
                tabs = []
            if not isinstance(tabs, list):
                raise CorruptStateError("'tabs' must be a list")
            groups = [Group.from_dict(t) for t in tabs]

        theme = data.get("theme", DEFAULT_THEME)
        layout = data.get("layout", DEFAULT_LAYOUT)
        active = data.get("activeTabId")
        state = cls(
            theme=theme if isinstance(theme, str) and theme else DEFAULT_THEME,
            layout=layout if layout in LAYOUTS else DEFAULT_LAYOUT,
            active_group_id=active if isinstance(active, int) and not isinstance(active, bool) else None,
            groups=groups,
        )
        state.ensure_active()
        return state


def _as_int(value, key, what):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptStateError(f"{what} field {key!r} must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise CorruptStateError(f"{what} field {key!r} must be a finite number, got {value!r}")
    return int(value)


def _require_int(data, key, what):
    return _as_int(data.get(key), key, what)


def _optional_int(data, key, default):
    if key not in data:
        return default
    return _as_int(data[key], key, "timer")
