"""Persistence of the whole application state as one JSON blob."""

import json
import os
from pathlib import Path

from protimer.config import STORAGE_KEY
from protimer.errors import CorruptStateError, StorageError
from protimer.logging_config import get_logger
from protimer.models import AppState

log = get_logger(__name__)


def _reject_constant(name):
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"non-standard constant {name}")


class StateStore:
    """
    Key-value store with a single key: <data_dir>/<key>.json.

    save() always writes the full snapshot; load() fills in missing
    top-level fields but never repairs a blob it cannot parse.
    """

    def __init__(self, data_dir, key=STORAGE_KEY):
        self.data_dir = Path(data_dir)
        self.key = key
        self.path = self.data_dir / f"{key}.json"

    def exists(self):
        return self.path.exists()

    def load(self):
        """Return the stored AppState, or None when nothing has been saved yet."""
        if not self.path.exists():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as e:
            log.error("Cannot read %s: %s", self.path, e)
            raise CorruptStateError(f"Cannot read {self.path}: {e}") from e
        try:
            payload = json.loads(raw, parse_constant=_reject_constant)
        except ValueError as e:
            log.error("Stored state at %s is not valid JSON: %s", self.path, e)
            raise CorruptStateError(f"Stored state is not valid JSON: {e}") from e
        state = AppState.from_dict(payload)
        log.debug("Loaded %d tab(s) from %s", len(state.groups), self.path)
        return state

    def save(self, state):
        payload = json.dumps(state.to_dict(), ensure_ascii=False, indent=2)
        tmp_path = self.path.with_suffix(".tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            log.error("Save state error: %s", e)
            raise StorageError(f"Failed to save state to {self.path}: {e}") from e

    def clear(self):
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            log.error("Cannot remove %s: %s", self.path, e)
            raise StorageError(f"Failed to remove {self.path}: {e}") from e
        log.info("Stored state removed (%s)", self.path)
