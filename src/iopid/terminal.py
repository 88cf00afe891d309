"""Header redraw policy driven by terminal geometry."""

import logging
import os
import signal
import sys
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)

# Header line plus the data row printed right after it.
ROWS_AFTER_HEADER = 2


class TerminalState(Enum):
    """Geometry knowledge of the redraw policy."""

    NO_TERMINAL = "no-terminal"
    UNKNOWN_SIZE = "unknown-size"
    KNOWN_SIZE = "known-size"


def query_stdout_rows() -> int:
    """
    Return the row count of the terminal attached to stdout.

    Raises:
        OSError: If stdout is not a terminal or reports no rows.
    """
    rows = os.get_terminal_size(sys.stdout.fileno()).lines
    if rows <= 0:
        raise OSError("terminal reported no rows")
    return rows


class RedrawPolicy:
    """
    Decides when the column header is printed again.

    Without a terminal the header is printed once, before the first row.
    On a terminal the header is printed again each time a full screen of
    rows has scrolled by, and the screen height is re-read after a resize
    notification. The notification only raises ``resize_pending``; the
    query itself happens in :meth:`refresh_geometry` on the poll loop.
    """

    def __init__(
        self,
        is_terminal: bool,
        query_rows: Callable[[], int] = query_stdout_rows,
    ) -> None:
        """
        Initialize the RedrawPolicy.

        Args:
            is_terminal: Whether output goes to an interactive terminal.
            query_rows: Returns the terminal row count or raises OSError.
        """
        self._is_terminal = is_terminal
        self._query_rows = query_rows
        self.resize_pending = False
        self.rows_since_header = 0
        self.capacity: int | None = None
        self._printed_any = False
        if is_terminal:
            self._initial_query()

    @property
    def state(self) -> TerminalState:
        """Current geometry state."""
        if not self._is_terminal:
            return TerminalState.NO_TERMINAL
        if self.capacity is None:
            return TerminalState.UNKNOWN_SIZE
        return TerminalState.KNOWN_SIZE

    def _initial_query(self) -> None:
        try:
            self.capacity = self._query_rows()
        except OSError as exc:
            # Retried on the next poll
            logger.debug("initial terminal size query failed: %s", exc)
            self.resize_pending = True

    def notify_resize(self, signum: int | None = None, frame: object = None) -> None:
        """Record that the terminal geometry is stale. Safe as a signal handler."""
        self.resize_pending = True

    def install_resize_handler(self) -> Callable[[], None] | None:
        """
        Route SIGWINCH to :meth:`notify_resize`.

        Must be called from the main thread. Returns a callable that puts
        the previous SIGWINCH handler back, or None when nothing was installed
        (no terminal, or no SIGWINCH on this platform).
        """
        if not self._is_terminal or not hasattr(signal, "SIGWINCH"):
            return None
        previous = signal.signal(signal.SIGWINCH, self.notify_resize)

        def restore() -> None:
            signal.signal(signal.SIGWINCH, previous if previous is not None else signal.SIG_DFL)

        return restore

    def refresh_geometry(self) -> None:
        """Re-read the terminal size if a resize is pending."""
        if not self._is_terminal or not self.resize_pending:
            return
        try:
            rows = self._query_rows()
        except OSError as exc:
            logger.debug("terminal size query failed: %s", exc)
            return
        logger.debug("terminal resized to %d rows", rows)
        self.capacity = rows
        self.rows_since_header = ROWS_AFTER_HEADER
        self.resize_pending = False

    def should_print_header(self) -> bool:
        """
        Decide whether the header precedes the next data row.

        Updates the row accounting for the header (if any) and the data
        row, so it must be called exactly once per printed row.
        """
        if not self._printed_any:
            redraw = True
        elif self.capacity is not None:
            redraw = self.rows_since_header >= self.capacity
        else:
            redraw = False
        self._printed_any = True

        if redraw:
            self.rows_since_header = ROWS_AFTER_HEADER
        else:
            self.rows_since_header += 1
        return redraw
