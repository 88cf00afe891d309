"""iopid - interactive textual view."""

from queue import Empty, Queue

import psutil
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.widgets import DataTable, Footer, Static

from iopid.errors import IOPidError
from iopid.formatting import format_magnitude
from iopid.models import FIELDS, DeltaRow
from iopid.monitor import IOMonitor, IOSampler, proc_io_path

# Rows kept in the table before the oldest are dropped
MAX_ROWS = 1000


def describe_process(pid: int) -> tuple[str, str]:
    """Return the name and command line of a process, or placeholders."""
    try:
        proc = psutil.Process(pid)
        with proc.oneshot():
            name = proc.name()
            cmdline = " ".join(proc.cmdline()) or name
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return "?", ""
    return name, cmdline


class ProcessHeader(Static):
    """Header widget describing the monitored process."""

    DEFAULT_CSS = """
    ProcessHeader {
        height: auto;
        padding: 0 1;
        background: $surface;
    }
    """

    def __init__(self, pid: int, interval: float, *args, **kwargs) -> None:
        """Initialize ProcessHeader."""
        super().__init__(*args, markup=False, **kwargs)
        self._pid = pid
        self._interval = interval
        self._name, self._cmdline = describe_process(pid)

    def on_mount(self) -> None:
        """Render the process description."""
        self.update(self.describe())

    def describe(self) -> str:
        """Get the header display."""
        return (
            f"PID {self._pid} ({self._name})  every {self._interval:g}s\n"
            f"{self._cmdline[:120]}"
        )


class DeltaTable(Container):
    """Container for the per-interval delta table."""

    DEFAULT_CSS = """
    DeltaTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize DeltaTable."""
        super().__init__(*args, **kwargs)
        self._next_key = 0

    def compose(self) -> ComposeResult:
        """Compose the delta table."""
        yield DataTable(id="delta-table")

    def on_mount(self) -> None:
        """Add the counter columns when mounted."""
        table = self.query_one("#delta-table", DataTable)
        table.cursor_type = "row"
        for counter in FIELDS:
            table.add_column(counter.label, key=counter.name, width=9)

    def add_delta(self, row: DeltaRow) -> None:
        """Append a row and drop the oldest beyond MAX_ROWS."""
        table = self.query_one("#delta-table", DataTable)
        table.add_row(
            *(format_magnitude(row[counter]).rstrip() for counter in FIELDS),
            key=str(self._next_key),
        )
        if table.row_count > MAX_ROWS:
            table.remove_row(str(self._next_key - MAX_ROWS))
        self._next_key += 1
        table.move_cursor(row=table.row_count - 1)


class IopidApp(App):
    """Interactive iopid application."""

    TITLE = "iopid"
    SUB_TITLE = "Per-process I/O monitor"

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(self, pid: int, interval: float, monitor: IOMonitor | None = None) -> None:
        """
        Initialize the IopidApp.

        Args:
            pid: Process to monitor.
            interval: Seconds between polls.
            monitor: Pre-built monitor. Defaults to one reading /proc/<pid>/io.
        """
        super().__init__()
        self._pid = pid
        self._interval = interval
        if monitor is None:
            queue: Queue[DeltaRow | IOPidError] = Queue()
            monitor = IOMonitor(queue, IOSampler(proc_io_path(pid)), interval)
        self._monitor = monitor
        self._update_queue = monitor.update_queue

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield ProcessHeader(self._pid, self._interval, id="process-header")
        yield DeltaTable()
        yield Footer()

    def on_mount(self) -> None:
        """Start the monitor when the app is mounted."""
        self._monitor.start()
        self.set_interval(0.25, self._check_for_updates)

    def _check_for_updates(self) -> None:
        """Drain the queue into the table."""
        while True:
            try:
                item = self._update_queue.get_nowait()
            except Empty:
                break
            if isinstance(item, IOPidError):
                self._monitor.stop()
                self.exit(return_code=1, message=f"iopid: {item}")
                return
            self.query_one(DeltaTable).add_delta(item)

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._monitor.stop()
        self.exit()
