"""Tests for the header redraw policy."""

import os
import signal

import pytest

from iopid.terminal import RedrawPolicy, TerminalState


class FakeTerminal:
    """Callable terminal geometry source."""

    def __init__(self, rows: int | None) -> None:
        self.rows = rows
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        if self.rows is None:
            raise OSError("not a terminal")
        return self.rows


def header_pattern(policy: RedrawPolicy, count: int) -> list[int]:
    """Return the 1-based row numbers that get a header."""
    return [i for i in range(1, count + 1) if policy.should_print_header()]


class TestNoTerminal:
    """Tests for output that is not a terminal."""

    def test_header_printed_once(self):
        """Test the header only precedes the very first row."""
        policy = RedrawPolicy(is_terminal=False, query_rows=FakeTerminal(5))
        assert header_pattern(policy, 100) == [1]

    def test_geometry_never_queried(self):
        """Test no geometry query happens without a terminal."""
        terminal = FakeTerminal(5)
        policy = RedrawPolicy(is_terminal=False, query_rows=terminal)
        policy.notify_resize()
        policy.refresh_geometry()

        assert terminal.calls == 0
        assert policy.state is TerminalState.NO_TERMINAL
        assert policy.capacity is None

    def test_no_resize_handler(self):
        """Test the resize handler is not installed without a terminal."""
        policy = RedrawPolicy(is_terminal=False)
        assert policy.install_resize_handler() is None


class TestKnownSize:
    """Tests for a terminal with known geometry."""

    def test_initial_query(self):
        """Test geometry is read on construction."""
        policy = RedrawPolicy(is_terminal=True, query_rows=FakeTerminal(24))
        assert policy.state is TerminalState.KNOWN_SIZE
        assert policy.capacity == 24
        assert not policy.resize_pending

    @pytest.mark.parametrize("rows", [3, 5, 24])
    def test_header_every_screen(self, rows):
        """Test the header returns every rows-1 data rows."""
        policy = RedrawPolicy(is_terminal=True, query_rows=FakeTerminal(rows))
        count = 4 * rows
        expected = list(range(1, count + 1, rows - 1))
        assert header_pattern(policy, count) == expected

    def test_row_accounting(self):
        """Test the header resets the row count to two."""
        policy = RedrawPolicy(is_terminal=True, query_rows=FakeTerminal(10))
        assert policy.should_print_header()
        assert policy.rows_since_header == 2
        assert not policy.should_print_header()
        assert policy.rows_since_header == 3

    def test_tiny_terminal(self):
        """Test a two-row terminal gets a header before every row."""
        policy = RedrawPolicy(is_terminal=True, query_rows=FakeTerminal(2))
        assert header_pattern(policy, 5) == [1, 2, 3, 4, 5]


class TestResize:
    """Tests for resize handling."""

    def test_resize_applies_on_next_refresh(self):
        """Test a resize takes effect when the loop refreshes geometry."""
        terminal = FakeTerminal(10)
        policy = RedrawPolicy(is_terminal=True, query_rows=terminal)
        header_pattern(policy, 3)

        terminal.rows = 4
        policy.notify_resize()
        assert policy.resize_pending
        assert policy.capacity == 10

        policy.refresh_geometry()
        assert policy.capacity == 4
        assert policy.rows_since_header == 2
        assert not policy.resize_pending
        assert [policy.should_print_header() for _ in range(3)] == [False, False, True]

    def test_refresh_without_resize_is_noop(self):
        """Test geometry is not re-read without a pending resize."""
        terminal = FakeTerminal(10)
        policy = RedrawPolicy(is_terminal=True, query_rows=terminal)
        policy.refresh_geometry()
        policy.refresh_geometry()
        assert terminal.calls == 1

    def test_failed_query_keeps_geometry(self):
        """Test a failed query keeps the old size and the pending flag."""
        terminal = FakeTerminal(10)
        policy = RedrawPolicy(is_terminal=True, query_rows=terminal)
        policy.rows_since_header = 7

        terminal.rows = None
        policy.notify_resize()
        policy.refresh_geometry()

        assert policy.capacity == 10
        assert policy.rows_since_header == 7
        assert policy.resize_pending

        terminal.rows = 30
        policy.refresh_geometry()
        assert policy.capacity == 30
        assert not policy.resize_pending

    @pytest.mark.skipif(not hasattr(signal, "SIGWINCH"), reason="no SIGWINCH")
    def test_sigwinch_sets_pending(self):
        """Test SIGWINCH only raises the pending flag."""
        terminal = FakeTerminal(10)
        policy = RedrawPolicy(is_terminal=True, query_rows=terminal)
        previous = signal.getsignal(signal.SIGWINCH)
        try:
            assert policy.install_resize_handler() is not None
            os.kill(os.getpid(), signal.SIGWINCH)
            assert policy.resize_pending
            assert terminal.calls == 1
            assert policy.capacity == 10
        finally:
            signal.signal(signal.SIGWINCH, previous)

    @pytest.mark.skipif(not hasattr(signal, "SIGWINCH"), reason="no SIGWINCH")
    def test_restore_previous_handler(self):
        """Test the returned callable puts the earlier SIGWINCH handler back."""
        seen = []

        def earlier(signum, frame):
            seen.append(signum)

        previous = signal.signal(signal.SIGWINCH, earlier)
        try:
            policy = RedrawPolicy(is_terminal=True, query_rows=FakeTerminal(10))
            restore = policy.install_resize_handler()
            assert signal.getsignal(signal.SIGWINCH) == policy.notify_resize

            restore()
            assert signal.getsignal(signal.SIGWINCH) is earlier
            os.kill(os.getpid(), signal.SIGWINCH)
            assert seen == [signal.SIGWINCH]
            assert not policy.resize_pending
        finally:
            signal.signal(signal.SIGWINCH, previous)


class TestUnknownSize:
    """Tests for a terminal whose size cannot be read."""

    def test_initial_failure(self):
        """Test a failed initial query leaves the size unknown."""
        policy = RedrawPolicy(is_terminal=True, query_rows=FakeTerminal(None))
        assert policy.state is TerminalState.UNKNOWN_SIZE
        assert policy.capacity is None
        assert header_pattern(policy, 50) == [1]

    def test_initial_failure_retried(self):
        """Test the next refresh retries a failed initial query."""
        terminal = FakeTerminal(None)
        policy = RedrawPolicy(is_terminal=True, query_rows=terminal)
        assert policy.resize_pending

        terminal.rows = 6
        policy.refresh_geometry()
        assert policy.state is TerminalState.KNOWN_SIZE
        assert policy.capacity == 6
