"""Shared fixtures for iopid tests."""

from pathlib import Path

import pytest

SAMPLE = {
    "rchar": 100,
    "wchar": 50,
    "syscr": 1,
    "syscw": 1,
    "read_bytes": 4096,
    "write_bytes": 0,
    "cancelled_write_bytes": 0,
}


def render_io(values: dict[str, int]) -> str:
    """Render counters the way /proc/<pid>/io lays them out."""
    return "".join(f"{name}: {value}\n" for name, value in values.items())


@pytest.fixture
def io_file(tmp_path: Path):
    """Return (path, write) where write(values) rewrites the counter file."""
    path = tmp_path / "io"

    def write(values: dict[str, int]) -> None:
        path.write_text(render_io(values), encoding="ascii")

    write(SAMPLE)
    return path, write
