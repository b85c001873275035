import pytest

pytest.importorskip("tkinter")

from protimer import __main__ as cli
from protimer.errors import StorageError


class FakeRoot:
    def __init__(self):
        self.hidden = False

    def withdraw(self):
        self.hidden = True

    def deiconify(self):
        self.hidden = False


@pytest.fixture
def dialogs(monkeypatch):
    shown = []
    monkeypatch.setattr(cli.messagebox, "showerror", lambda *a, **kw: shown.append(("error", a)))
    monkeypatch.setattr(cli.messagebox, "askyesno", lambda *a, **kw: shown.append(("ask", a)) or False)
    return shown


class TestOpenBoard:
    def test_fresh_start(self, store, settings, dialogs):
        board = cli.open_board(FakeRoot(), store, settings)
        assert len(board.groups) == 1
        assert dialogs == []

    def test_unwritable_data_dir_shows_error(self, store, settings, dialogs, monkeypatch):
        def fail(state):
            raise StorageError("read-only")
        monkeypatch.setattr(store, "save", fail)
        root = FakeRoot()
        assert cli.open_board(root, store, settings) is None
        assert [kind for kind, _ in dialogs] == ["error"]
        assert root.hidden

    def test_corrupt_blob_declined_keeps_file(self, store, settings, dialogs):
        store.data_dir.mkdir(parents=True)
        store.path.write_text("{not json", encoding="utf-8")
        assert cli.open_board(FakeRoot(), store, settings) is None
        assert [kind for kind, _ in dialogs] == ["ask"]
        assert store.path.read_text(encoding="utf-8") == "{not json"

    def test_non_finite_number_offers_reset(self, store, settings, monkeypatch):
        store.data_dir.mkdir(parents=True)
        store.path.write_text('{"tabs": [{"id": 1, "name": "A", "timers": [{"id": 2, "totalDuration": NaN}]}]}',
                              encoding="utf-8")
        monkeypatch.setattr(cli.messagebox, "askyesno", lambda *a, **kw: True)
        board = cli.open_board(FakeRoot(), store, settings)
        assert [g.name for g in board.groups] == ["Tab 1"]
        assert store.load() == board.state
