"""Two-slot counter buffer."""

from iopid.models import FIELDS, U64_MASK, DeltaRow, IOSnapshot


class SnapshotBuffer:
    """
    Double buffer holding the current and the previous poll.

    The slots are allocated once and their roles are exchanged after
    every poll; snapshots are never copied.
    """

    def __init__(self) -> None:
        self._slots = (IOSnapshot(), IOSnapshot())
        self._current = 0
        self._has_previous = False

    @property
    def has_previous(self) -> bool:
        """Whether a completed poll precedes the current one."""
        return self._has_previous

    def begin_poll(self) -> IOSnapshot:
        """Zero the current slot and return it for filling."""
        snapshot = self._slots[self._current]
        snapshot.reset()
        return snapshot

    def current_and_previous(self) -> tuple[IOSnapshot, IOSnapshot | None]:
        """Return the just-filled slot and the previous one, if any."""
        current = self._slots[self._current]
        if not self._has_previous:
            return current, None
        return current, self._slots[1 - self._current]

    def delta(self) -> DeltaRow:
        """
        Build the display row for the current slot.

        Differences use unsigned 64-bit wraparound: a counter that went
        backwards (process replaced, counter reset) shows up as a huge
        value rather than being clamped to zero.
        """
        current, previous = self.current_and_previous()
        if previous is None:
            return DeltaRow(values=tuple(current.values), is_delta=False)
        return DeltaRow(
            values=tuple((current[f] - previous[f]) & U64_MASK for f in FIELDS),
            is_delta=True,
        )

    def swap(self) -> None:
        """Make the current slot the previous one."""
        self._current = 1 - self._current
        self._has_previous = True
