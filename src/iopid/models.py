"""Data models for iopid."""

from dataclasses import dataclass, field

# Counters are reported as unsigned 64-bit values.
U64_MASK = (1 << 64) - 1


@dataclass(slots=True, frozen=True)
class CounterField:
    """One entry of the field registry."""

    ordinal: int
    name: str  # key in /proc/<pid>/io
    label: str  # column header


FIELDS: tuple[CounterField, ...] = (
    CounterField(0, "rchar", "rchar"),
    CounterField(1, "wchar", "wchar"),
    CounterField(2, "syscr", "syscr"),
    CounterField(3, "syscw", "syscw"),
    CounterField(4, "read_bytes", "rbytes"),
    CounterField(5, "write_bytes", "wbytes"),
    CounterField(6, "cancelled_write_bytes", "cancelled"),
)

RCHAR, WCHAR, SYSCR, SYSCW, READ_BYTES, WRITE_BYTES, CANCELLED = FIELDS

NUM_FIELDS = len(FIELDS)

FIELDS_BY_NAME: dict[str, CounterField] = {f.name: f for f in FIELDS}


@dataclass(slots=True)
class IOSnapshot:
    """Counter values of one poll, indexed by field ordinal."""

    values: list[int] = field(default_factory=lambda: [0] * NUM_FIELDS)

    def __getitem__(self, counter: CounterField) -> int:
        return self.values[counter.ordinal]

    def __setitem__(self, counter: CounterField, value: int) -> None:
        self.values[counter.ordinal] = value

    def reset(self) -> None:
        """Zero every counter."""
        for i in range(NUM_FIELDS):
            self.values[i] = 0


@dataclass(slots=True, frozen=True)
class DeltaRow:
    """Immutable row ready for display."""

    values: tuple[int, ...]
    is_delta: bool  # False for the first poll, which carries raw counters

    def __getitem__(self, counter: CounterField) -> int:
        return self.values[counter.ordinal]
