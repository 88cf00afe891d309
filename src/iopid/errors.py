"""Exceptions raised by iopid."""


class IOPidError(Exception):
    """Base class for every fatal iopid error."""


class UsageError(IOPidError):
    """The command line could not be parsed."""


class NoSuchProcess(IOPidError):
    """The target process does not exist."""

    def __init__(self, pid: int) -> None:
        super().__init__(f"no such process: {pid}")
        self.pid = pid


class SourceUnavailable(IOPidError):
    """The counter file could not be opened or read."""

    def __init__(self, path: str, strerror: str) -> None:
        super().__init__(f"unable to open {path}: {strerror}")
        self.path = path
        self.strerror = strerror


class ProtocolViolation(IOPidError):
    """A counter line did not match any known field."""

    def __init__(self, line: str, reason: str = "unrecognized counter line") -> None:
        super().__init__(f"{reason}: {line.rstrip()!r}")
        self.line = line
