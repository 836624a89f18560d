"""Tkinter based desktop application for the lead finder."""
from __future__ import annotations

import logging
import queue
import tempfile
import tkinter as tk
import webbrowser
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from tkinter import filedialog, messagebox, ttk
from typing import Optional

from ..config import ConfigurationError, Settings, load_settings
from ..factory import build_orchestrators
from ..io import write_export
from ..models import BusinessRecord, ScrapeFailed, ScrapeInProgress, ScrapeSucceeded, SearchHistoryEntry
from ..orchestrator import PLACEHOLDER_TEXT, ScrapeOrchestrator, SearchOrchestrator, SearchState
from .map_view import save_map

LOGGER = logging.getLogger(__name__)

RESULT_COLUMNS = ("name", "category", "address", "phone", "rating", "website", "contacts")
RESULT_HEADINGS = ("Name", "Type", "Address", "Phone", "Rating", "Website", "Contacts")


def format_rating(record: BusinessRecord) -> str:
    if record.rating is None:
        return ""
    text = f"{record.rating:g}"
    if record.review_count is not None:
        text += f" ({record.review_count})"
    return text


def format_scrape_status(record: BusinessRecord) -> str:
    state = record.scrape_state
    if isinstance(state, ScrapeInProgress):
        return "Scraping..."
    if isinstance(state, ScrapeFailed):
        return f"Failed: {state.message}"
    if isinstance(state, ScrapeSucceeded):
        info = state.contact_info
        if info.is_empty():
            return "No contacts found"
        return f"{len(info.emails)} emails · {len(info.phones)} phones · {len(info.socials)} socials"
    if not record.website_url:
        return "No website"
    return ""


def format_record_values(record: BusinessRecord) -> tuple:
    """Return the Treeview cell values for ``record`` in :data:`RESULT_COLUMNS` order."""

    return (
        record.name,
        record.category or "—",
        record.address,
        record.phone or "—",
        format_rating(record) or "—",
        record.website_url or "—",
        format_scrape_status(record),
    )


def format_history_entry(entry: SearchHistoryEntry) -> str:
    when = datetime.fromtimestamp(entry.timestamp).strftime("%Y-%m-%d %H:%M")
    return f"{entry.query}  ·  {when} - {entry.result_count} results"


class LeadFinderApp:
    """Main application window."""

    def __init__(self, root: tk.Tk, settings: Optional[Settings] = None) -> None:
        self.root = root
        self.root.title("Lead Finder")
        self.root.geometry("1100x720")
        self.root.minsize(900, 600)

        self.settings = settings or self._load_settings()
        self.event_queue: "queue.Queue[tuple]" = queue.Queue()
        self._executor = ThreadPoolExecutor(max_workers=1)
        self.search_task: Optional[Future] = None
        self.scrape_task: Optional[Future] = None

        self.search_orchestrator, self.scrape_orchestrator = self._build_orchestrators()

        self.query_var = tk.StringVar(value=PLACEHOLDER_TEXT)
        self.status_var = tk.StringVar(value="Idle")

        self._build_layout()
        self.refresh_history()
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        self.root.after(100, self._poll_queue)

    # ------------------------------------------------------------------
    def _build_layout(self) -> None:
        container = ttk.Frame(self.root, padding=12)
        container.pack(fill="both", expand=True)
        container.columnconfigure(0, weight=1)
        container.rowconfigure(1, weight=1)

        self._build_search_section(container)

        self.notebook = ttk.Notebook(container)
        self.notebook.grid(row=1, column=0, sticky="nsew", pady=(12, 0))
        self._build_results_tab(self.notebook)
        self._build_history_tab(self.notebook)

        ttk.Label(container, textvariable=self.status_var).grid(row=2, column=0, sticky="w", pady=(8, 0))

    # ------------------------------------------------------------------
    def _build_search_section(self, parent: ttk.Frame) -> None:
        frame = ttk.LabelFrame(parent, text="Google Maps search")
        frame.grid(row=0, column=0, sticky="ew")
        frame.columnconfigure(0, weight=1)

        self.query_entry = ttk.Entry(frame, textvariable=self.query_var, foreground="grey")
        self.query_entry.grid(row=0, column=0, sticky="ew", padx=4, pady=4)
        self.query_entry.bind("<FocusIn>", self._on_query_focus)
        self.query_entry.bind("<FocusOut>", self._on_query_blur)
        self.query_entry.bind("<Return>", lambda _event: self.start_search())

        self.search_button = ttk.Button(frame, text="Search", command=self.start_search)
        self.search_button.grid(row=0, column=1, padx=4, pady=4)
        ttk.Button(frame, text="Export CSV", command=self.export_csv).grid(row=0, column=2, padx=4, pady=4)
        ttk.Button(frame, text="Export Excel", command=self.export_excel).grid(row=0, column=3, padx=4, pady=4)

    # ------------------------------------------------------------------
    def _build_results_tab(self, notebook: ttk.Notebook) -> None:
        frame = ttk.Frame(notebook, padding=4)
        notebook.add(frame, text="Current results")
        frame.columnconfigure(0, weight=1)
        frame.rowconfigure(1, weight=1)

        toolbar = ttk.Frame(frame)
        toolbar.grid(row=0, column=0, sticky="ew", pady=(0, 4))
        ttk.Button(toolbar, text="Scrape selected", command=self.scrape_selected).pack(side="left", padx=(0, 4))
        self.scrape_all_button = ttk.Button(toolbar, text="Scrape all websites", command=self.start_scrape_all)
        self.scrape_all_button.pack(side="left", padx=(0, 4))
        ttk.Button(toolbar, text="Open map", command=self.open_map).pack(side="left", padx=(0, 4))
        self.load_more_button = ttk.Button(toolbar, text="Load more", command=self.load_more)
        self.load_more_button.pack(side="right")

        self.results_tree = ttk.Treeview(frame, columns=RESULT_COLUMNS, show="headings", selectmode="browse")
        for column, heading in zip(RESULT_COLUMNS, RESULT_HEADINGS):
            self.results_tree.heading(column, text=heading)
            self.results_tree.column(column, anchor="w")
        self.results_tree.grid(row=1, column=0, sticky="nsew")
        self.results_tree.bind("<<TreeviewSelect>>", self._on_result_selected)

        scroll = ttk.Scrollbar(frame, orient="vertical", command=self.results_tree.yview)
        self.results_tree.configure(yscrollcommand=scroll.set)
        scroll.grid(row=1, column=1, sticky="ns")

    # ------------------------------------------------------------------
    def _build_history_tab(self, notebook: ttk.Notebook) -> None:
        frame = ttk.Frame(notebook, padding=4)
        notebook.add(frame, text="Search history")
        frame.columnconfigure(0, weight=1)
        frame.rowconfigure(0, weight=1)

        self.history_list = tk.Listbox(frame, activestyle="none")
        self.history_list.grid(row=0, column=0, sticky="nsew")
        self.history_list.bind("<Double-Button-1>", lambda _event: self.rerun_selected_history())

        buttons = ttk.Frame(frame)
        buttons.grid(row=1, column=0, sticky="ew", pady=(4, 0))
        ttk.Button(buttons, text="Rerun search", command=self.rerun_selected_history).pack(side="left")
        ttk.Button(buttons, text="Clear history", command=self.clear_history).pack(side="right")

    # ------------------------------------------------------------------
    def _on_query_focus(self, _event: tk.Event) -> None:
        if self.query_var.get() == PLACEHOLDER_TEXT:
            self.query_var.set("")
            self.query_entry.configure(foreground="black")

    def _on_query_blur(self, _event: tk.Event) -> None:
        if not self.query_var.get().strip():
            self.query_var.set(PLACEHOLDER_TEXT)
            self.query_entry.configure(foreground="grey")

    # ------------------------------------------------------------------
    def start_search(self, query: Optional[str] = None) -> None:
        text = (query if query is not None else self.query_var.get()).strip()
        if not text or text == PLACEHOLDER_TEXT:
            return
        if self.search_task and not self.search_task.done():
            messagebox.showinfo("Search running", "A search is already in progress.")
            return

        self.search_button.state(["disabled"])
        self.results_tree.delete(*self.results_tree.get_children())

        def worker() -> None:
            try:
                self.search_orchestrator.search(text)
            except Exception as exc:  # pragma: no cover - GUI surface
                LOGGER.exception("Search crashed")
                self.event_queue.put(("error", exc))
            self.event_queue.put(("search_done",))

        self.search_task = self._executor.submit(worker)

    # ------------------------------------------------------------------
    def start_scrape_all(self) -> None:
        if self.scrape_task and not self.scrape_task.done():
            return
        if not self.scrape_orchestrator.pending():
            self.status_var.set("Nothing left to scrape")
            return

        self.scrape_all_button.state(["disabled"])
        self.scrape_all_button.configure(text="Scraping all...")

        def progress_callback(current: int, total: int) -> None:
            self.event_queue.put(("progress", current, total))

        def worker() -> None:
            try:
                self.scrape_orchestrator.scrape_all(progress_callback=progress_callback)
            except Exception as exc:  # pragma: no cover - GUI surface
                LOGGER.exception("Scrape all crashed")
                self.event_queue.put(("error", exc))
            self.event_queue.put(("scrape_done",))

        self.scrape_task = self._executor.submit(worker)

    # ------------------------------------------------------------------
    def scrape_selected(self) -> None:
        record_id = self.search_orchestrator.selected_id
        if record_id is None:
            messagebox.showinfo("No selection", "Select a result to scrape its website.")
            return
        record = self.search_orchestrator.results.get(record_id)
        if record is None or record.is_scraping:
            return
        self._executor.submit(self.scrape_orchestrator.scrape, record_id)

    # ------------------------------------------------------------------
    def load_more(self) -> None:
        self.search_orchestrator.load_more()
        self.refresh_result_table()

    # ------------------------------------------------------------------
    def open_map(self) -> None:
        records = self.search_orchestrator.results.snapshot()
        path = Path(tempfile.gettempdir()) / "lead_finder_map.html"
        save_map(
            records,
            path,
            selected_id=self.search_orchestrator.selected_id,
            center=self.settings.location,
        )
        webbrowser.open(path.as_uri())

    # ------------------------------------------------------------------
    def export_csv(self) -> None:
        self._export(".csv", [("CSV", "*.csv")])

    def export_excel(self) -> None:
        self._export(".xlsx", [("Excel", "*.xlsx"), ("Excel macro-enabled", "*.xlsm")])

    def _export(self, extension: str, filetypes: list) -> None:
        records = self.search_orchestrator.results.snapshot()
        if not records:
            messagebox.showinfo("No results", "No leads to export.")
            return
        initial = Path(self.settings.export_filename).with_suffix(extension).name
        path = filedialog.asksaveasfilename(defaultextension=extension, initialfile=initial, filetypes=filetypes)
        if not path:
            return
        try:
            write_export(path, records)
        except Exception as exc:  # pragma: no cover - GUI surface
            messagebox.showerror("Export failed", str(exc))
            return
        messagebox.showinfo("Export complete", f"Leads exported to {path}")

    # ------------------------------------------------------------------
    def rerun_selected_history(self) -> None:
        selection = self.history_list.curselection()
        history = self.search_orchestrator.history
        if not selection or history is None:
            return
        entry = history.entries[selection[0]]
        self.notebook.select(0)
        self.query_var.set(entry.query)
        self.query_entry.configure(foreground="black")
        self.start_search(entry.query)

    def clear_history(self) -> None:
        history = self.search_orchestrator.history
        if history is not None:
            history.clear()
        self.refresh_history()

    def refresh_history(self) -> None:
        self.history_list.delete(0, "end")
        history = self.search_orchestrator.history
        if history is None:
            return
        for entry in history.entries:
            self.history_list.insert("end", format_history_entry(entry))

    # ------------------------------------------------------------------
    def _on_result_selected(self, _event: tk.Event) -> None:
        selection = self.results_tree.selection()
        if not selection:
            return
        record_id = selection[0]
        if record_id != self.search_orchestrator.selected_id:
            self.search_orchestrator.select(record_id)
            self.refresh_result_table()

    # ------------------------------------------------------------------
    def _poll_queue(self) -> None:
        try:
            while True:
                event = self.event_queue.get_nowait()
                self._handle_event(event)
        except queue.Empty:
            pass
        finally:
            self.root.after(100, self._poll_queue)

    # ------------------------------------------------------------------
    def _handle_event(self, event: tuple) -> None:
        kind = event[0]
        if kind == "state":
            _, state = event
            self.status_var.set(
                {
                    SearchState.SEARCHING: "Searching...",
                    SearchState.RECONCILING: "Locating results on the map...",
                    SearchState.IDLE: self.status_var.get(),
                }[state]
            )
        elif kind == "record":
            _, record = event
            if self.results_tree.exists(record.id):
                self.results_tree.item(record.id, values=format_record_values(record))
        elif kind == "progress":
            _, current, total = event
            self.status_var.set(f"Scraping website {current} of {total}")
        elif kind == "error":
            _, exc = event
            messagebox.showerror("Lead finder", str(exc))
        elif kind == "search_done":
            self.search_button.state(["!disabled"])
            error = self.search_orchestrator.error
            if error:
                self.status_var.set(error)
                messagebox.showerror("Search failed", error)
            else:
                self.status_var.set(f"Found {len(self.search_orchestrator.results)} leads")
            self.refresh_result_table()
            self.refresh_history()
        elif kind == "scrape_done":
            self.scrape_all_button.state(["!disabled"])
            self.scrape_all_button.configure(text="Scrape all websites")
            self.status_var.set("Scrape all finished")
            self.refresh_result_table()

    # ------------------------------------------------------------------
    def refresh_result_table(self) -> None:
        self.results_tree.delete(*self.results_tree.get_children())
        for record in self.search_orchestrator.visible_results():
            self.results_tree.insert("", "end", iid=record.id, values=format_record_values(record))

        selected = self.search_orchestrator.selected_id
        if selected and self.results_tree.exists(selected):
            self.results_tree.selection_set(selected)
            self.results_tree.see(selected)

        if self.search_orchestrator.has_more():
            self.load_more_button.state(["!disabled"])
        else:
            self.load_more_button.state(["disabled"])

    # ------------------------------------------------------------------
    def on_close(self) -> None:
        busy = any(task and not task.done() for task in (self.search_task, self.scrape_task))
        if busy and not messagebox.askyesno("Quit", "A search or scrape is still running. Quit anyway?"):
            return
        self._executor.shutdown(wait=False, cancel_futures=True)
        self.root.destroy()

    # ------------------------------------------------------------------
    def _load_settings(self) -> Settings:
        try:
            return load_settings()
        except ConfigurationError as exc:
            messagebox.showwarning("Configuration error", f"Failed to load configuration: {exc}")
            return Settings()

    def _build_orchestrators(self) -> tuple[SearchOrchestrator, ScrapeOrchestrator]:
        callbacks = dict(
            state_callback=lambda state: self.event_queue.put(("state", state)),
            result_callback=lambda record: self.event_queue.put(("record", record)),
        )
        try:
            return build_orchestrators(self.settings, **callbacks)
        except ConfigurationError as exc:
            messagebox.showwarning("Configuration error", f"Falling back to the default backend: {exc}")
            self.settings.backend_class = Settings.backend_class
            self.settings.backend_options = {}
            return build_orchestrators(self.settings, **callbacks)


def main(settings: Optional[Settings] = None) -> None:
    root = tk.Tk()
    LeadFinderApp(root, settings)
    root.mainloop()


if __name__ == "__main__":  # pragma: no cover - manual launch
    main()
