"""Command-line entry point: python -m protimer"""

import argparse
import logging
import sys
import tkinter as tk
from tkinter import messagebox

from protimer import __version__
from protimer.app import ProTimerApp
from protimer.board import TimerBoard
from protimer.config import APP_NAME, ensure_app_dirs, load_settings
from protimer.errors import CorruptStateError, StorageError
from protimer.logging_config import get_logger, setup_logging
from protimer.scheduler import TickScheduler
from protimer.sound import SoundManager
from protimer.storage import StateStore


def build_parser():
    parser = argparse.ArgumentParser(prog="protimer", description=f"{APP_NAME} - tabs of countdown timers")
    parser.add_argument("--data-dir", help="folder holding the saved timers and logs")
    parser.add_argument("--catch-up", action="store_true", default=None,
                        help="count real elapsed seconds when ticks arrive late")
    parser.add_argument("--no-pause-on-edit", dest="pause_on_edit", action="store_false", default=None,
                        help="keep timers running while their duration is being edited")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--reset", action="store_true", help="discard all saved timers before starting")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def open_board(root, store, settings):
    """Load saved timers; a corrupt blob can only be recovered by a full reset."""
    log = get_logger(__name__)
    try:
        try:
            return TimerBoard.load(store, settings)
        except CorruptStateError as e:
            log.error("Saved state unusable: %s", e)
            root.withdraw()
            reset = messagebox.askyesno(
                APP_NAME,
                f"Your saved timers could not be read:\n{e}\n\nReset ALL tabs and settings?",
                icon="error",
            )
            if not reset:
                return None
            store.clear()
            root.deiconify()
            return TimerBoard(store, settings)
    except StorageError as e:
        log.error("Cannot save state at startup: %s", e)
        root.withdraw()
        messagebox.showerror(APP_NAME, f"Your timers could not be saved:\n{e}")
        return None


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(
        data_dir=args.data_dir,
        catch_up=args.catch_up,
        pause_on_edit=args.pause_on_edit,
        log_level="DEBUG" if args.debug else None,
    )
    ensure_app_dirs(settings)
    setup_logging(level=getattr(logging, settings.log_level, logging.INFO), log_dir=settings.log_dir)
    log = get_logger(__name__)
    log.info("%s %s, data in %s", APP_NAME, __version__, settings.data_dir)

    store = StateStore(settings.data_dir)
    if args.reset:
        store.clear()

    root = tk.Tk()
    board = open_board(root, store, settings)
    if board is None:
        root.destroy()
        return 1

    sound_mgr = SoundManager()
    scheduler = TickScheduler(board, sound_mgr, catch_up=settings.catch_up)
    ProTimerApp(root, board, scheduler, sound_mgr)
    root.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
