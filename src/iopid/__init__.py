"""iopid - per-process I/O rate monitor."""

__version__ = "0.1.0"
