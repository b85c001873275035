"""
tkinter front end. Reads the board after every mutation and every tick;
all state changes go through TimerBoard and TickScheduler.
"""

import tkinter as tk
from tkinter import messagebox, ttk

from protimer.config import (
    APP_NAME,
    GRID_COLUMNS,
    LAYOUTS,
    SOUND_KINDS,
    SOUND_LABELS,
    THEMES,
    TICK_INTERVAL_MS,
)
from protimer.errors import LastGroupError, StorageError, UnknownGroupError, UnknownTimerError
from protimer.formatting import format_time, split_duration
from protimer.logging_config import get_logger

log = get_logger(__name__)

LOW_PERCENT = 10
SOUND_BY_LABEL = {label: kind for kind, label in SOUND_LABELS.items()}


def progress_percent(timer):
    if timer.total_duration <= 0:
        return 0.0
    return timer.remaining / timer.total_duration * 100


class ProTimerApp:
    def __init__(self, root, board, scheduler, sound_mgr):
        self.root = root
        self.board = board
        self.scheduler = scheduler
        self.sound_mgr = sound_mgr
        self.root.title(APP_NAME)
        self.root.geometry("760x560")
        self.root.minsize(520, 360)

        self.cards = {}
        self.tab_buttons = {}
        self._syncing_name = False
        self._tick_job = None

        self._setup_ui()
        self._apply_theme()
        self.render_tabs()
        self.render_timers()
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self._tick_job = self.root.after(TICK_INTERVAL_MS, self._tick)

    # ===================== LAYOUT =====================

    def _setup_ui(self):
        main = tk.Frame(self.root)
        main.pack(fill=tk.BOTH, expand=True, padx=8, pady=8)

        # Top bar
        top = tk.Frame(main)
        top.pack(fill=tk.X, pady=(0, 6))

        tk.Label(top, text=APP_NAME, font=("Arial", 14, "bold")).pack(side=tk.LEFT)

        tk.Button(top, text="Reset All", command=self._clear_all_data,
                  font=("Arial", 9), relief="flat", padx=6).pack(side=tk.RIGHT, padx=2)

        self.layout_var = tk.StringVar(value=self.board.state.layout)
        layout_box = ttk.Combobox(top, textvariable=self.layout_var, values=list(LAYOUTS),
                                  width=6, state="readonly", font=("Arial", 9))
        layout_box.pack(side=tk.RIGHT, padx=2)
        layout_box.bind("<<ComboboxSelected>>", lambda e: self._run(self.board.set_layout, self.layout_var.get()))

        self.theme_var = tk.StringVar(value=self.board.state.theme)
        theme_box = ttk.Combobox(top, textvariable=self.theme_var, values=list(THEMES.keys()),
                                 width=12, state="readonly", font=("Arial", 9))
        theme_box.pack(side=tk.RIGHT, padx=2)
        theme_box.bind("<<ComboboxSelected>>", lambda e: self._change_theme())

        # Tab strip
        strip = tk.Frame(main)
        strip.pack(fill=tk.X)
        self.tabs_frame = tk.Frame(strip)
        self.tabs_frame.pack(side=tk.LEFT, fill=tk.X)
        tk.Button(strip, text="+ Tab", command=lambda: self._run(self.board.create_group),
                  font=("Arial", 9), relief="flat", padx=6).pack(side=tk.LEFT, padx=4)

        # Current tab controls
        controls = tk.Frame(main)
        controls.pack(fill=tk.X, pady=6)
        self.tab_name_var = tk.StringVar()
        tk.Entry(controls, textvariable=self.tab_name_var, width=24,
                 font=("Arial", 10)).pack(side=tk.LEFT)
        self.tab_name_var.trace_add("write", lambda *a: self._rename_tab())
        tk.Button(controls, text="Delete Tab", command=self._delete_tab,
                  font=("Arial", 9), relief="flat", padx=6).pack(side=tk.LEFT, padx=4)
        tk.Button(controls, text="+ Add Timer",
                  command=lambda: self._run(self.board.add_timer_to_active_group),
                  font=("Arial", 9, "bold"), relief="flat", padx=8).pack(side=tk.RIGHT)

        # Scrollable timer list
        list_frame = tk.Frame(main)
        list_frame.pack(fill=tk.BOTH, expand=True)
        self.canvas = tk.Canvas(list_frame, highlightthickness=0)
        scrollbar = ttk.Scrollbar(list_frame, orient="vertical", command=self.canvas.yview)
        self.timers_frame = tk.Frame(self.canvas)
        self.timers_frame.bind(
            "<Configure>",
            lambda e: self.canvas.configure(scrollregion=self.canvas.bbox("all"))
        )
        self._canvas_window = self.canvas.create_window((0, 0), window=self.timers_frame, anchor="nw")
        self.canvas.bind("<Configure>", lambda e: self.canvas.itemconfig(self._canvas_window, width=e.width))
        self.canvas.configure(yscrollcommand=scrollbar.set)
        self.canvas.pack(side="left", fill="both", expand=True)
        scrollbar.pack(side="right", fill="y")

    # ===================== RENDERING =====================

    def render_tabs(self):
        for widget in self.tabs_frame.winfo_children():
            widget.destroy()
        self.tab_buttons = {}

        active_id = self.board.state.active_group_id
        for group in self.board.groups:
            btn = tk.Button(self.tabs_frame, text=group.name or " ",
                            command=lambda gid=group.id: self._run(self.board.switch_active_group, gid),
                            font=("Arial", 10), relief="sunken" if group.id == active_id else "flat",
                            padx=10, pady=2)
            btn.pack(side=tk.LEFT, padx=1)
            self.tab_buttons[group.id] = btn

        group = self.board.active_group
        self._syncing_name = True
        try:
            self.tab_name_var.set(group.name if group else "")
        finally:
            self._syncing_name = False
        self._apply_theme()

    def render_timers(self):
        for widget in self.timers_frame.winfo_children():
            widget.destroy()
        self.cards = {}

        group = self.board.active_group
        if group is None:
            return

        grid = self.board.state.layout == "grid"
        columns = GRID_COLUMNS if grid else 1
        for col in range(GRID_COLUMNS):
            self.timers_frame.grid_columnconfigure(col, weight=1 if col < columns else 0,
                                                   uniform="cards" if col < columns else "")

        for idx, timer in enumerate(group.timers):
            card = self._create_card(timer)
            row, col = divmod(idx, columns)
            card.grid(row=row, column=col, sticky="nsew", padx=4, pady=4)
            self.update_timer_widgets(timer)
        self._apply_theme()

    def _create_card(self, timer):
        card = tk.Frame(self.timers_frame, bd=1, relief="solid", padx=8, pady=6)
        widgets = {"frame": card}

        header = tk.Frame(card)
        header.pack(fill=tk.X)
        name_var = tk.StringVar(value=timer.name)
        name_entry = tk.Entry(header, textvariable=name_var, font=("Arial", 10, "bold"), width=16)
        name_entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        commit_name = lambda e, tid=timer.id, v=name_var: self._commit_name(tid, v.get())
        name_entry.bind("<FocusOut>", commit_name)
        name_entry.bind("<Return>", commit_name)

        tk.Button(header, text="🗑", command=lambda tid=timer.id: self._run(self.board.delete_timer, tid),
                  font=("Arial", 9), relief="flat", padx=4).pack(side=tk.RIGHT)
        sound_var = tk.StringVar(value=SOUND_LABELS.get(timer.sound, SOUND_LABELS["none"]))
        sound_box = ttk.Combobox(header, textvariable=sound_var,
                                 values=[SOUND_LABELS[k] for k in SOUND_KINDS],
                                 width=14, state="readonly", font=("Arial", 8))
        sound_box.pack(side=tk.RIGHT, padx=4)
        sound_box.bind("<<ComboboxSelected>>",
                       lambda e, tid=timer.id, v=sound_var: self._run(
                           self.board.set_timer_field, tid, "sound", SOUND_BY_LABEL.get(v.get(), "none")))

        display = tk.Label(card, text=format_time(timer.remaining), font=("Arial", 30, "bold"))
        display.pack(pady=4)
        widgets["display"] = display

        if timer.is_editing:
            self._create_edit_form(card, timer)
        else:
            progress = ttk.Progressbar(card, maximum=100, mode="determinate")
            progress.pack(fill=tk.X, pady=4)
            widgets["progress"] = progress

            btns = tk.Frame(card)
            btns.pack(fill=tk.X)
            toggle_text = "⏸ Pause" if timer.is_running else "▶ Start"
            tk.Button(btns, text=toggle_text, command=lambda tid=timer.id: self._run(self.board.toggle_timer, tid),
                      font=("Arial", 9), relief="flat", padx=8).pack(side=tk.LEFT, padx=1)
            tk.Button(btns, text="⟲ Reset", command=lambda tid=timer.id: self._run(self.board.reset_timer, tid),
                      font=("Arial", 9), relief="flat", padx=8).pack(side=tk.LEFT, padx=1)
            tk.Button(btns, text="✎ Edit", command=lambda tid=timer.id: self._run(self.board.begin_edit_timer, tid),
                      font=("Arial", 9), relief="flat", padx=8).pack(side=tk.RIGHT, padx=1)

        self.cards[timer.id] = widgets
        return card

    def _create_edit_form(self, card, timer):
        form = tk.Frame(card)
        form.pack(pady=4)
        spins = []
        for value, unit, upper in zip(split_duration(timer.total_duration), ("h", "m", "s"), (999, 59, 59)):
            spin = tk.Spinbox(form, from_=0, to=upper, width=4, font=("Arial", 11), justify="center")
            spin.delete(0, tk.END)
            spin.insert(0, str(value))
            spin.pack(side=tk.LEFT, padx=1)
            tk.Label(form, text=unit, font=("Arial", 9)).pack(side=tk.LEFT, padx=(0, 6))
            spins.append(spin)

        h, m, s = spins
        tk.Button(form, text="Save",
                  command=lambda tid=timer.id: self._run(self.board.commit_edit_timer, tid, h.get(), m.get(), s.get()),
                  font=("Arial", 9, "bold"), relief="flat", padx=8).pack(side=tk.LEFT, padx=2)
        tk.Button(form, text="Cancel",
                  command=lambda tid=timer.id: self._run(self.board.cancel_edit_timer, tid),
                  font=("Arial", 9), relief="flat", padx=8).pack(side=tk.LEFT, padx=2)

    def update_timer_widgets(self, timer):
        """Cheap per-tick update: the number and the progress bar only."""
        widgets = self.cards.get(timer.id)
        if not widgets:
            return
        widgets["display"].config(text=format_time(timer.remaining))
        progress = widgets.get("progress")
        if progress is not None:
            percent = progress_percent(timer)
            progress.config(value=percent,
                            style="Low.Horizontal.TProgressbar" if percent < LOW_PERCENT else "Timer.Horizontal.TProgressbar")

    # ===================== THEME =====================

    def _change_theme(self):
        self._run(self.board.set_theme, self.theme_var.get())
        self.theme_var.set(self.board.state.theme)
        self._apply_theme()

    def _apply_theme(self):
        t = THEMES.get(self.board.state.theme) or next(iter(THEMES.values()))
        self.root.configure(bg=t["bg"])

        style = ttk.Style(self.root)
        style.configure("Timer.Horizontal.TProgressbar", background=t["accent"], troughcolor=t["card"])
        style.configure("Low.Horizontal.TProgressbar", background=t["paused"], troughcolor=t["card"])

        card_ids = {str(w["frame"]) for w in self.cards.values()}
        active_tab = self.tab_buttons.get(self.board.state.active_group_id)

        def apply_recursive(w, bg):
            if str(w) in card_ids:
                bg = t["card"]
            if isinstance(w, (tk.Frame, tk.Label, tk.Canvas)):
                w.configure(bg=bg)
                if isinstance(w, tk.Label):
                    w.configure(fg=t["fg"])
            elif isinstance(w, tk.Button):
                w.configure(bg=t["accent"] if w is active_tab else bg, fg=t["fg"],
                            activebackground=t["accent"], activeforeground=t["fg"])
            elif isinstance(w, (tk.Entry, tk.Spinbox)):
                w.configure(bg=t["card"], fg=t["fg"], insertbackground=t["fg"])
            for child in w.winfo_children():
                apply_recursive(child, bg)

        apply_recursive(self.root, t["bg"])

    # ===================== ACTIONS =====================

    def _run(self, mutator, *args):
        """Call a board mutator and redraw whatever it reports as changed."""
        try:
            change = mutator(*args)
        except StorageError as e:
            messagebox.showerror(APP_NAME, f"Could not save your timers:\n{e}")
            return
        except (UnknownGroupError, UnknownTimerError) as e:
            log.warning("Stale UI action %s%r: %s", mutator.__name__, args, e)
            self.render_tabs()
            self.render_timers()
            return
        if change.tabs:
            self.render_tabs()
        if change.timers:
            self.render_timers()

    def _commit_name(self, timer_id, name):
        # FocusOut also fires while a redraw destroys the entry
        group = self.board.active_group
        timer = group.find_timer(timer_id) if group else None
        if timer is None or timer.name == name:
            return
        self._run(self.board.set_timer_field, timer_id, "name", name)

    def _rename_tab(self):
        if self._syncing_name:
            return
        # Only relabel the tab button; a full redraw would reset the entry cursor.
        try:
            self.board.rename_active_group(self.tab_name_var.get())
        except StorageError as e:
            log.error("Rename not saved: %s", e)
        group = self.board.active_group
        if group and group.id in self.tab_buttons:
            self.tab_buttons[group.id].config(text=group.name or " ")

    def _delete_tab(self):
        try:
            self.board.check_can_delete_active_group()
        except LastGroupError as e:
            messagebox.showwarning(APP_NAME, str(e))
            return
        if messagebox.askyesno(APP_NAME, "Delete this tab and all its timers?"):
            self._run(self.board.delete_active_group)

    def _clear_all_data(self):
        if not messagebox.askyesno(APP_NAME, "Reset ALL tabs and settings?"):
            return
        self.sound_mgr.stop()
        self._run(self.board.clear_all_data)
        self.theme_var.set(self.board.state.theme)
        self.layout_var.set(self.board.state.layout)
        self._apply_theme()

    # ===================== TICK =====================

    def _tick(self):
        """Main loop - once per TICK_INTERVAL_MS"""
        try:
            summary = self.scheduler.tick()
        except StorageError as e:
            log.error("Tick could not save state: %s", e)
            summary = None

        if summary is not None:
            if summary.full_render:
                self.render_timers()
            else:
                group = self.board.active_group
                for timer_id in summary.updated_ids:
                    timer = group.find_timer(timer_id) if group else None
                    if timer is not None:
                        self.update_timer_widgets(timer)
            self._update_title(summary.min_remaining)

        self._tick_job = self.root.after(TICK_INTERVAL_MS, self._tick)

    def _update_title(self, min_remaining):
        if min_remaining is None:
            self.root.title(APP_NAME)
        else:
            self.root.title(f"{format_time(min_remaining)} - {APP_NAME}")

    def _on_close(self):
        if self._tick_job is not None:
            self.root.after_cancel(self._tick_job)
            self._tick_job = None
        self.sound_mgr.close()
        self.root.destroy()
