"""Text rendering of counter magnitudes and table lines."""

from collections.abc import Iterable

from iopid.models import FIELDS, DeltaRow

# Unit divisors. The "G" and "M" divisors use 1014, not 1024.
GIGA_DIVISOR = 1014 * 1024 * 1024
MEGA_DIVISOR = 1014 * 1024
KILO_DIVISOR = 1024

COLUMN_WIDTH = 8


def format_magnitude(n: int) -> str:
    """
    Format a non-negative magnitude as a short left-justified string.

    The G threshold is inclusive while M and k are exclusive. A value
    exactly equal to the k divisor prints as a plain integer; one equal to
    the M divisor falls into the k range.
    """
    if n >= GIGA_DIVISOR:
        divisor, suffix = GIGA_DIVISOR, "G"
    elif n > MEGA_DIVISOR:
        divisor, suffix = MEGA_DIVISOR, "M"
    elif n > KILO_DIVISOR:
        divisor, suffix = KILO_DIVISOR, "k"
    else:
        return f"{n:<8d}"
    return f"{n / divisor:.1f}{suffix}".ljust(4)


def format_columns(cells: Iterable[str]) -> str:
    """Join cells into one table line."""
    return " ".join(f"{cell:<{COLUMN_WIDTH}}" for cell in cells)


def format_header() -> str:
    """Return the column header line."""
    return format_columns(f.label for f in FIELDS)


def format_row(row: DeltaRow) -> str:
    """Return the table line for one row."""
    return format_columns(format_magnitude(row[f]) for f in FIELDS)
