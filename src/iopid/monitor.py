"""Sampling engine for iopid."""

import logging
import sys
import threading
import time
from collections.abc import Callable
from queue import Queue
from typing import NoReturn, TextIO

from iopid.buffer import SnapshotBuffer
from iopid.errors import IOPidError, SourceUnavailable
from iopid.formatting import format_header, format_row
from iopid.models import DeltaRow
from iopid.parser import parse_line
from iopid.terminal import RedrawPolicy

logger = logging.getLogger(__name__)


def proc_io_path(pid: int) -> str:
    """Return the path of the I/O counter file for a process."""
    return f"/proc/{pid}/io"


class IOSampler:
    """Reads the counter file and turns consecutive polls into rows."""

    def __init__(self, path: str) -> None:
        self.path = path
        self._buffer = SnapshotBuffer()

    def sample(self) -> DeltaRow:
        """
        Perform one full poll.

        The file is opened fresh on every call; it cannot be rewound.

        Raises:
            SourceUnavailable: If the file cannot be opened or read.
            ProtocolViolation: If a line names no known counter.
        """
        snapshot = self._buffer.begin_poll()
        try:
            with open(self.path, encoding="ascii", errors="replace") as source:
                for line in source:
                    parse_line(line, snapshot)
        except OSError as exc:
            raise SourceUnavailable(self.path, exc.strerror or str(exc)) from exc

        row = self._buffer.delta()
        self._buffer.swap()
        logger.debug("polled %s: %s", self.path, row.values)
        return row


class SampleLoop:
    """
    Console driver: prints one row per interval, forever.

    A single thread polls, formats and prints. The only state shared with
    anything else is the redraw policy's resize flag, set from SIGWINCH.
    """

    def __init__(
        self,
        sampler: IOSampler,
        interval: int,
        policy: RedrawPolicy,
        out: TextIO | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        """
        Initialize the SampleLoop.

        Args:
            sampler: Source of rows.
            interval: Seconds between polls.
            policy: Header redraw policy for ``out``.
            out: Output stream. Defaults to stdout.
            sleep: Sleep function. Defaults to time.sleep.
        """
        self._sampler = sampler
        self._interval = interval
        self._policy = policy
        self._out = out if out is not None else sys.stdout
        self._sleep = sleep if sleep is not None else time.sleep

    @property
    def interval(self) -> int:
        """Seconds between polls."""
        return self._interval

    def poll_once(self) -> DeltaRow:
        """Poll, print the header if due, then print the row."""
        row = self._sampler.sample()
        self._policy.refresh_geometry()
        if self._policy.should_print_header():
            logger.debug("printing header")
            print(format_header(), file=self._out, flush=True)
        print(format_row(row), file=self._out, flush=True)
        return row

    def run(self) -> NoReturn:
        """Poll forever. Only returns by raising."""
        while True:
            self.poll_once()
            # Interrupted sleeps resume for the remaining time (PEP 475)
            self._sleep(self._interval)


class IOMonitor:
    """
    Background sampler feeding the interactive view.

    Runs in a separate daemon thread and pushes rows to a thread-safe Queue.
    A fatal sampler error is pushed to the same queue and ends the thread.
    """

    def __init__(
        self,
        update_queue: "Queue[DeltaRow | IOPidError]",
        sampler: IOSampler,
        interval: float,
    ) -> None:
        """
        Initialize the IOMonitor.

        Args:
            update_queue: Thread-safe queue to push rows and errors to.
            sampler: Source of rows.
            interval: Seconds between polls.
        """
        self._queue = update_queue
        self._sampler = sampler
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        """Seconds between polls."""
        return self._interval

    @property
    def update_queue(self) -> "Queue[DeltaRow | IOPidError]":
        """Queue the monitor pushes rows and errors to."""
        return self._queue

    @property
    def is_running(self) -> bool:
        """Check if the monitor thread is running."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start sampling in a daemon thread. Does nothing while running."""
        if not self.is_running:
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, name="IOMonitor", daemon=True)
            self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Ask the thread to finish and wait up to ``timeout`` seconds for it."""
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if thread is not None:
            thread.join(timeout=timeout)

    def _run(self) -> None:
        """Queue one row per interval until stopped or a sampler error is queued."""
        try:
            while True:
                self._queue.put(self._sampler.sample())
                if self._stop_event.wait(timeout=self._interval):
                    return
        except IOPidError as exc:
            logger.debug("monitor stopping: %s", exc)
            self._queue.put(exc)
