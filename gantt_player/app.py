"""
CPU Scheduling Gantt Player (GUI)
=================================

customtkinter front end. The user enters processes and a round-robin
quantum, the external simulation service computes the schedule, and the
result is shown as:

- a Gantt chart of the execution timeline,
- per-process waiting / turnaround times in the process table,
- average turnaround / waiting times,
- an animated replay that highlights the running process's row.

Pages (Dashboard, Help, Settings) live in a tab view. Dark mode and the
playback speed are remembered between runs.
"""

import logging
import tkinter as tk
from tkinter import messagebox, ttk
from typing import Optional

import customtkinter as ctk

from .backend import SimulationClient
from .config import (
    CANVAS_BG_DARK,
    CANVAS_BG_LIGHT,
    CHART_HEIGHT,
    LABEL_COLOR_DARK,
    LABEL_COLOR_LIGHT,
    MIN_CHART_WIDTH,
    SPEED_CHOICES,
    AppConfig,
)
from .errors import BackendError, InvalidTimeline, NoTimeline
from .gantt import GanttRenderer
from .rows import DONE, RUNNING, ProcessRow, ProcessTable
from .session import Session
from .settings import Preferences, format_speed

logger = logging.getLogger(__name__)

DEFAULT_ROWS = (("P1", 0, 5), ("P2", 1, 3), ("P3", 2, 1))

HELP_TEXT = [
    (
        "Processes",
        "Each row is one process: an identifier, the time it arrives, and the\n"
        "CPU time it needs (burst). Add rows with the form above the table;\n"
        "select a row to edit or remove it.",
    ),
    (
        "Running a simulation",
        "Set the time quantum and press Start. The simulation service runs\n"
        "Round Robin scheduling and returns the execution timeline together with\n"
        "waiting and turnaround times for every process.",
    ),
    (
        "Playback",
        "Play animates the Gantt chart: the row of the running process is\n"
        "highlighted, then marked done. Pause holds after the current slice,\n"
        "Reset rewinds and clears the highlights. Speed is set in Settings.",
    ),
    (
        "Metrics",
        "Turnaround Time = Completion - Arrival.\n"
        "Waiting Time    = Turnaround - Burst.",
    ),
]

# Treeview palettes: (background, foreground, field, heading bg, stripe even, stripe odd)
_TREE_DARK = ("#020617", "#E5E7EB", "#020617", "#0F172A", "#020617", "#111827")
_TREE_LIGHT = ("#FFFFFF", "#111827", "#FFFFFF", "#E5E7EB", "#FFFFFF", "#F3F4F6")


class GanttPlayerApp:
    """
    Main window.

    High-level structure:
        - Dashboard: process form + table, quantum, Start/Clear, Gantt chart
          with playback controls, averages and a textual results summary.
        - Help: short explanation of the workflow and metrics.
        - Settings: dark mode, playback speed, reset settings.
    """

    def __init__(self, root: Optional[ctk.CTk] = None, config: Optional[AppConfig] = None) -> None:
        self.config = config or AppConfig.from_env()
        self.preferences = Preferences(self.config.settings_path)

        ctk.set_appearance_mode("dark" if self.preferences.dark_mode else "light")
        ctk.set_default_color_theme("dark-blue")

        if root is None:
            root = ctk.CTk()
        self.root = root
        self.root.title("CPU Scheduling Gantt Player")
        self.root.geometry("1100x760")

        self._dark_var = ctk.BooleanVar(value=self.preferences.dark_mode)
        self._speed_var = ctk.StringVar(value=format_speed(self.preferences.speed))
        self._status_var = ctk.StringVar(value="Status: idle")

        self.table = ProcessTable(listener=self._on_row_changed)

        self._configure_treeview_style()
        self._build_ui()

        self.session = Session(
            client=SimulationClient(self.config.backend_url, self.config.request_timeout),
            table=self.table,
            renderer=GanttRenderer(self.gantt_canvas, label_color=self._label_color()),
            scheduler=self.root,
            on_status=self._status_var.set,
            speed=self.preferences.speed,
        )

        for pid, arrival, burst in DEFAULT_ROWS:
            self.table.add_row(pid, arrival, burst)

    # ------------------------------------------------------------------#
    # Styling                                                           #
    # ------------------------------------------------------------------#

    def _label_color(self) -> str:
        return LABEL_COLOR_DARK if self._dark_var.get() else LABEL_COLOR_LIGHT

    def _canvas_bg(self) -> str:
        return CANVAS_BG_DARK if self._dark_var.get() else CANVAS_BG_LIGHT

    def _configure_treeview_style(self) -> None:
        """Style ttk Treeview widgets to match the current appearance mode."""
        style = ttk.Style(self.root)
        try:
            style.theme_use("clam")
        except tk.TclError:
            pass

        bg, fg, field, heading, _even, _odd = _TREE_DARK if self._dark_var.get() else _TREE_LIGHT
        style.configure(
            "Treeview",
            background=bg,
            foreground=fg,
            fieldbackground=field,
            borderwidth=1,
            rowheight=22,
        )
        style.map("Treeview", background=[("selected", "#1D4ED8")], foreground=[("selected", "#F9FAFB")])
        style.configure("Treeview.Heading", background=heading, foreground=fg, font=("Segoe UI Semibold", 9))

    def _configure_row_tags(self) -> None:
        _bg, fg, _field, _heading, even, odd = _TREE_DARK if self._dark_var.get() else _TREE_LIGHT
        self.process_tree.tag_configure("evenrow", background=even, foreground=fg)
        self.process_tree.tag_configure("oddrow", background=odd, foreground=fg)
        # Configured after the stripes so they take precedence.
        self.process_tree.tag_configure(RUNNING, background="#CA8A04", foreground="#000000")
        self.process_tree.tag_configure(DONE, background="#15803D", foreground="#F9FAFB")

    # ------------------------------------------------------------------#
    # UI construction                                                   #
    # ------------------------------------------------------------------#

    def _build_ui(self) -> None:
        tabs = ctk.CTkTabview(self.root)
        tabs.pack(fill="both", expand=True, padx=12, pady=12)
        self.tabs = tabs

        self._build_dashboard(tabs.add("Dashboard"))
        self._build_help(tabs.add("Help"))
        self._build_settings(tabs.add("Settings"))
        tabs.set("Dashboard")

    def _build_dashboard(self, page: ctk.CTkFrame) -> None:
        main_frame = ctk.CTkScrollableFrame(page, corner_radius=0, fg_color="transparent")
        main_frame.pack(fill="both", expand=True)

        self._build_process_section(main_frame)
        self._build_run_section(main_frame)
        self._build_gantt_section(main_frame)
        self._build_results_section(main_frame)

    def _build_process_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="x", pady=(0, 10))

        header = ctk.CTkLabel(frame, text="Processes", font=("Segoe UI Semibold", 13))
        header.grid(row=0, column=0, columnspan=2, padx=12, pady=(10, 6), sticky="w")

        ctk.CTkLabel(frame, text="PID").grid(row=1, column=0, padx=(12, 4), pady=4, sticky="w")
        self.pid_entry = ctk.CTkEntry(frame, width=70)
        self.pid_entry.grid(row=1, column=1, padx=4, pady=4, sticky="w")

        ctk.CTkLabel(frame, text="Arrival").grid(row=1, column=2, padx=(12, 4), pady=4, sticky="w")
        self.arrival_entry = ctk.CTkEntry(frame, width=70)
        self.arrival_entry.grid(row=1, column=3, padx=4, pady=4, sticky="w")

        ctk.CTkLabel(frame, text="Burst").grid(row=1, column=4, padx=(12, 4), pady=4, sticky="w")
        self.burst_entry = ctk.CTkEntry(frame, width=70)
        self.burst_entry.grid(row=1, column=5, padx=4, pady=4, sticky="w")

        ctk.CTkButton(frame, text="Add Process", width=110, command=self.add_process).grid(
            row=1, column=6, padx=8, pady=4
        )
        ctk.CTkButton(frame, text="Update Selected", width=130, command=self.update_selected_process).grid(
            row=1, column=7, padx=8, pady=4
        )
        ctk.CTkButton(
            frame,
            text="Remove Selected",
            width=130,
            command=self.remove_selected_process,
            fg_color="#1F2937",
            hover_color="#111827",
        ).grid(row=1, column=8, padx=8, pady=4)

        columns = ("pid", "arrival", "burst", "wait", "tat")
        self.process_tree = ttk.Treeview(frame, columns=columns, show="headings", height=8)
        for col, label in zip(columns, ("PID", "Arrival", "Burst", "Wait", "TAT")):
            self.process_tree.heading(col, text=label)
            self.process_tree.column(col, anchor="center", width=90, stretch=True)
        self._configure_row_tags()

        self.process_tree.grid(row=2, column=0, columnspan=9, sticky="nsew", padx=12, pady=(8, 10))
        scrollbar = ttk.Scrollbar(frame, orient="vertical", command=self.process_tree.yview)
        self.process_tree.configure(yscroll=scrollbar.set)
        scrollbar.grid(row=2, column=9, sticky="ns", pady=(8, 10))

        self.process_tree.bind("<<TreeviewSelect>>", self._on_process_tree_select)

        for col_index in range(9):
            frame.columnconfigure(col_index, weight=1)

    def _build_run_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="x", pady=(0, 10))

        ctk.CTkLabel(frame, text="Time Quantum", font=("Segoe UI Semibold", 13)).grid(
            row=0, column=0, padx=12, pady=10, sticky="w"
        )
        self.quantum_entry = ctk.CTkEntry(frame, width=70)
        self.quantum_entry.insert(0, "2")
        self.quantum_entry.grid(row=0, column=1, padx=(0, 10), pady=10, sticky="w")

        ctk.CTkButton(frame, text="Start", width=120, command=self.start_simulation).grid(
            row=0, column=2, padx=(10, 5), pady=10
        )
        ctk.CTkButton(
            frame,
            text="Clear",
            width=120,
            command=self.clear_all,
            fg_color="#1F2937",
            hover_color="#111827",
        ).grid(row=0, column=3, padx=(5, 10), pady=10)

        averages = ctk.CTkFrame(frame, fg_color="transparent")
        averages.grid(row=0, column=4, padx=10, pady=10, sticky="e")
        self.avg_tat_label = ctk.CTkLabel(averages, text="Avg Turnaround: -", font=("Segoe UI Semibold", 14))
        self.avg_tat_label.pack(anchor="e")
        self.avg_wt_label = ctk.CTkLabel(averages, text="Avg Waiting: -", font=("Segoe UI Semibold", 14))
        self.avg_wt_label.pack(anchor="e")

        frame.columnconfigure(4, weight=1)

    def _build_gantt_section(self, parent: ctk.CTkFrame) -> None:
        gantt_frame = ctk.CTkFrame(parent, corner_radius=12)
        gantt_frame.pack(fill="x", pady=(0, 10))

        ctk.CTkLabel(gantt_frame, text="Gantt Chart", font=("Segoe UI Semibold", 13)).pack(
            anchor="w", padx=12, pady=(10, 4)
        )

        # Long timelines grow wider than the window; scroll horizontally.
        self.gantt_canvas = tk.Canvas(
            gantt_frame,
            width=MIN_CHART_WIDTH,
            height=CHART_HEIGHT,
            bg=self._canvas_bg(),
            highlightthickness=0,
        )
        self.gantt_canvas.pack(fill="x", padx=12)
        xscroll = ttk.Scrollbar(gantt_frame, orient="horizontal", command=self.gantt_canvas.xview)
        self.gantt_canvas.configure(xscrollcommand=xscroll.set)
        xscroll.pack(fill="x", padx=12, pady=(0, 6))

        playback = ctk.CTkFrame(gantt_frame, fg_color="transparent")
        playback.pack(fill="x", padx=12, pady=(0, 10))

        ctk.CTkButton(playback, text="▶ Play", width=80, command=self.play_timeline).pack(side="left", padx=(0, 6))
        ctk.CTkButton(playback, text="⏸ Pause", width=90, command=self.pause_timeline).pack(side="left", padx=(0, 6))
        ctk.CTkButton(playback, text="⏮ Reset", width=90, command=self.reset_timeline).pack(side="left", padx=(0, 6))

        ctk.CTkLabel(playback, textvariable=self._status_var, font=("Segoe UI", 11)).pack(side="right")

    def _build_results_section(self, parent: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(parent, corner_radius=12)
        frame.pack(fill="both", expand=True)

        ctk.CTkLabel(frame, text="Results", font=("Segoe UI Semibold", 13)).pack(anchor="w", padx=12, pady=(10, 4))
        self.results_text = ctk.CTkTextbox(frame, height=120, font=("Consolas", 11))
        self.results_text.pack(fill="both", expand=True, padx=12, pady=(0, 12))
        self._set_results_text("No results yet")

    def _build_help(self, page: ctk.CTkFrame) -> None:
        container = ctk.CTkScrollableFrame(page, corner_radius=0)
        container.pack(fill="both", expand=True, padx=12, pady=12)

        ctk.CTkLabel(container, text="How it works", font=("Segoe UI Semibold", 18)).pack(anchor="w", pady=(0, 8))
        for heading, body in HELP_TEXT:
            ctk.CTkLabel(container, text=heading, font=("Segoe UI Semibold", 14)).pack(anchor="w", pady=(10, 2))
            ctk.CTkLabel(container, text=body, font=("Segoe UI", 11), justify="left").pack(anchor="w")

    def _build_settings(self, page: ctk.CTkFrame) -> None:
        frame = ctk.CTkFrame(page, corner_radius=12)
        frame.pack(fill="x", padx=12, pady=12)

        ctk.CTkSwitch(frame, text="Dark mode", variable=self._dark_var, command=self._on_dark_toggled).grid(
            row=0, column=0, columnspan=2, padx=12, pady=(12, 6), sticky="w"
        )

        ctk.CTkLabel(frame, text="Playback speed").grid(row=1, column=0, padx=12, pady=6, sticky="w")
        ctk.CTkOptionMenu(
            frame,
            values=list(SPEED_CHOICES),
            variable=self._speed_var,
            command=self._on_speed_changed,
            width=100,
        ).grid(row=1, column=1, padx=12, pady=6, sticky="w")

        ctk.CTkButton(
            frame,
            text="Reset Settings",
            width=140,
            command=self.reset_settings,
            fg_color="#1F2937",
            hover_color="#111827",
        ).grid(row=2, column=0, columnspan=2, padx=12, pady=(6, 12), sticky="w")

    # ------------------------------------------------------------------#
    # Process table                                                     #
    # ------------------------------------------------------------------#

    def _on_row_changed(self, row: ProcessRow) -> None:
        """Reflect one ProcessTable row in the Treeview."""
        iid = str(row.row_id)
        values = (
            row.pid,
            row.arrival_time,
            row.burst_time,
            "-" if row.waiting_time is None else row.waiting_time,
            "-" if row.turnaround_time is None else row.turnaround_time,
        )
        if not self.process_tree.exists(iid):
            self.process_tree.insert("", "end", iid=iid, values=values)
        else:
            self.process_tree.item(iid, values=values)
        self._restyle_row(iid, row)

    def _restyle_row(self, iid: str, row: ProcessRow) -> None:
        index = self.process_tree.index(iid)
        tags = ["evenrow" if index % 2 == 0 else "oddrow"]
        if row.state is not None:
            tags.append(row.state)
        self.process_tree.item(iid, tags=tuple(tags))

    def _restyle_all_rows(self) -> None:
        for row in self.table:
            self._restyle_row(str(row.row_id), row)

    def _read_form(self) -> Optional[tuple]:
        """Read pid/arrival/burst from the form; blanks fall back to defaults."""
        pid = self.pid_entry.get().strip() or None
        arrival_text = self.arrival_entry.get().strip() or "0"
        burst_text = self.burst_entry.get().strip() or "1"
        try:
            arrival = int(arrival_text)
            burst = int(burst_text)
        except ValueError:
            messagebox.showerror("Invalid input", "Arrival and burst times must be integers.")
            return None
        if arrival < 0 or burst <= 0:
            messagebox.showerror("Invalid input", "Arrival time must be >= 0 and burst time must be > 0.")
            return None
        return pid, arrival, burst

    def _clear_form(self) -> None:
        for entry in (self.pid_entry, self.arrival_entry, self.burst_entry):
            entry.delete(0, tk.END)

    def add_process(self) -> None:
        form = self._read_form()
        if form is None:
            return
        pid, arrival, burst = form
        self.table.add_row(pid, arrival, burst)
        self._clear_form()

    def update_selected_process(self) -> None:
        selection = self.process_tree.selection()
        if not selection:
            messagebox.showinfo("No selection", "Select a process to update.")
            return
        form = self._read_form()
        if form is None:
            return
        pid, arrival, burst = form
        self.table.update_row(int(selection[0]), pid=pid, arrival_time=arrival, burst_time=burst)

    def remove_selected_process(self) -> None:
        for iid in self.process_tree.selection():
            self.table.remove_row(int(iid))
            self.process_tree.delete(iid)
        self._restyle_all_rows()

    def _on_process_tree_select(self, _event: tk.Event) -> None:
        selection = self.process_tree.selection()
        if not selection:
            return
        row = self.table.get(int(selection[0]))
        self._clear_form()
        self.pid_entry.insert(0, row.pid)
        self.arrival_entry.insert(0, str(row.arrival_time))
        self.burst_entry.insert(0, str(row.burst_time))

    # ------------------------------------------------------------------#
    # Simulation                                                        #
    # ------------------------------------------------------------------#

    def _read_quantum(self) -> int:
        try:
            quantum = int(self.quantum_entry.get().strip())
        except ValueError:
            return 1
        return quantum if quantum > 0 else 1

    def start_simulation(self) -> None:
        if not len(self.table):
            messagebox.showerror("No processes", "Add at least one process")
            return

        quantum = self._read_quantum()
        self._status_var.set("Status: calling backend...")
        self.root.update_idletasks()

        try:
            result = self.session.run(quantum)
        except InvalidTimeline as exc:
            self._reset_summary()
            messagebox.showerror("Invalid timeline", exc.message)
            return
        except BackendError as exc:
            messagebox.showerror(
                "Backend error",
                f"Backend error: {exc.message}\n\nMake sure the backend runs on {self.config.backend_url}",
            )
            return

        self.avg_tat_label.configure(text=f"Avg Turnaround: {result.averages.avg_turnaround_time:.2f}")
        self.avg_wt_label.configure(text=f"Avg Waiting: {result.averages.avg_waiting_time:.2f}")
        self._set_results_text(result.summary() or "No results yet")

    def clear_all(self) -> None:
        self.session.clear()
        for iid in self.process_tree.get_children():
            self.process_tree.delete(iid)
        self._reset_summary()

    def _reset_summary(self) -> None:
        self.avg_tat_label.configure(text="Avg Turnaround: -")
        self.avg_wt_label.configure(text="Avg Waiting: -")
        self._set_results_text("No results yet")

    def _set_results_text(self, text: str) -> None:
        self.results_text.configure(state="normal")
        self.results_text.delete("1.0", tk.END)
        self.results_text.insert("1.0", text)
        self.results_text.configure(state="disabled")

    # ------------------------------------------------------------------#
    # Playback                                                          #
    # ------------------------------------------------------------------#

    def play_timeline(self) -> None:
        try:
            self.session.play()
        except NoTimeline as exc:
            messagebox.showinfo("Nothing to play", exc.message)

    def pause_timeline(self) -> None:
        self.session.pause()

    def reset_timeline(self) -> None:
        self.session.reset()

    # ------------------------------------------------------------------#
    # Settings                                                          #
    # ------------------------------------------------------------------#

    def _apply_appearance(self) -> None:
        dark = self._dark_var.get()
        ctk.set_appearance_mode("dark" if dark else "light")
        self._configure_treeview_style()
        self._configure_row_tags()
        self.gantt_canvas.configure(bg=self._canvas_bg())
        self.session.renderer.set_label_color(self._label_color())

    def _on_dark_toggled(self) -> None:
        self.preferences.dark_mode = self._dark_var.get()
        self._apply_appearance()

    def _on_speed_changed(self, value: str) -> None:
        speed = float(value)
        self.session.set_speed(speed)
        self.preferences.speed = speed

    def reset_settings(self) -> None:
        self._dark_var.set(False)
        self._speed_var.set("1")
        self.session.set_speed(1.0)
        self.preferences.clear()
        self._apply_appearance()
        messagebox.showinfo("Settings", "Settings reset")

    # ------------------------------------------------------------------#
    # Mainloop                                                          #
    # ------------------------------------------------------------------#

    def run(self) -> None:
        """Start the Tk main event loop."""
        try:
            self.root.mainloop()
        finally:
            self.session.client.close()


def main() -> None:
    """Entry point for the ``gantt-player`` script."""
    config = AppConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = GanttPlayerApp(config=config)
    app.run()
