"""Parser for the lines of /proc/<pid>/io."""

from iopid.errors import ProtocolViolation
from iopid.models import (
    CANCELLED,
    RCHAR,
    READ_BYTES,
    SYSCR,
    SYSCW,
    U64_MASK,
    WCHAR,
    WRITE_BYTES,
    CounterField,
    IOSnapshot,
)


def classify(line: str) -> CounterField:
    """
    Identify the field a line names from its leading characters.

    Several names share prefixes, so the match looks at the first
    character and, where needed, the second (or the fifth for syscr/syscw).

    Raises:
        ProtocolViolation: If the first character matches no field.
    """
    match line[:1]:
        case "c":
            return CANCELLED
        case "r":
            return RCHAR if line[1:2] == "c" else READ_BYTES
        case "w":
            return WCHAR if line[1:2] == "c" else WRITE_BYTES
        case "s":
            return SYSCR if line[4:5] == "r" else SYSCW
        case _:
            raise ProtocolViolation(line)


def parse_value(line: str) -> int:
    """Extract the unsigned 64-bit value following the colon."""
    _, sep, raw = line.partition(":")
    raw = raw.strip()
    if not sep or not (raw.isascii() and raw.isdigit()):
        raise ProtocolViolation(line, "malformed counter value")
    value = int(raw)
    if value > U64_MASK:
        raise ProtocolViolation(line, "counter value out of range")
    return value


def parse_line(line: str, snapshot: IOSnapshot) -> CounterField:
    """Parse one line into the snapshot and return the field it set."""
    counter = classify(line)
    snapshot[counter] = parse_value(line)
    return counter
