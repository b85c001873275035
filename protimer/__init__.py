"""Pro Timer: tabs of countdown timers with synthesized alerts."""

from protimer.config import APP_VERSION as __version__
from protimer.board import Change, TimerBoard
from protimer.formatting import format_time
from protimer.models import AppState, Group, TickOutcome, Timer
from protimer.scheduler import TickScheduler, TickSummary
from protimer.storage import StateStore

__all__ = [
    "AppState",
    "Change",
    "Group",
    "StateStore",
    "TickOutcome",
    "TickScheduler",
    "TickSummary",
    "Timer",
    "TimerBoard",
    "format_time",
    "__version__",
]
