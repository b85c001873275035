import pytest

from protimer.board import TimerBoard
from protimer.config import Settings
from protimer.models import AppState, Timer
from protimer.storage import StateStore


class RecordingDispatcher:
    """Stands in for SoundManager; remembers every alert kind it was asked to play."""

    def __init__(self):
        self.played = []

    def play(self, kind):
        self.played.append(kind)


@pytest.fixture
def settings(tmp_path):
    return Settings(data_dir=tmp_path / "data")


@pytest.fixture
def store(settings):
    return StateStore(settings.data_dir)


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def board(store, settings):
    # Frozen clock: ids come out as 1, 2, 3, ...
    return TimerBoard(store, settings, clock=lambda: 0.0)


def make_timer(timer_id, total=60, remaining=None, running=False, sound="none", name=None):
    return Timer(
        id=timer_id,
        name=name or f"Timer {timer_id}",
        total_duration=total,
        remaining=total if remaining is None else remaining,
        is_running=running,
        sound=sound,
    )


def make_state(*groups, active=None, theme="theme-dark", layout="list"):
    state = AppState(theme=theme, layout=layout, groups=list(groups))
    state.active_group_id = active if active is not None else (groups[0].id if groups else None)
    return state


@pytest.fixture
def make_board(store, settings):
    def _make(*groups, active=None):
        return TimerBoard(store, settings, state=make_state(*groups, active=active), clock=lambda: 0.0)
    return _make


