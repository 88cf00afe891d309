"""Command line entry point for iopid."""

import argparse
import logging
import sys
from typing import NoReturn

import psutil

from iopid import __version__
from iopid.errors import IOPidError, NoSuchProcess, UsageError
from iopid.monitor import IOSampler, SampleLoop, proc_io_path
from iopid.terminal import RedrawPolicy

logger = logging.getLogger(__name__)

PROG = "iopid"


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = _ArgumentParser(
        prog=PROG,
        usage=f"{PROG} PID INTERVAL",
        description="Print per-interval I/O counter deltas of a process.",
    )
    parser.add_argument("pid", metavar="PID", type=_positive_int, help="process to monitor")
    parser.add_argument(
        "interval", metavar="INTERVAL", type=_positive_int, help="seconds between samples"
    )
    parser.add_argument("--tui", action="store_true", help="interactive table view")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(name)s: %(message)s",
    )


def _run_console(pid: int, interval: int) -> None:
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(line_buffering=True)
    policy = RedrawPolicy(is_terminal=sys.stdout.isatty())
    restore = policy.install_resize_handler()
    logger.debug("monitoring pid %d every %ds (%s)", pid, interval, policy.state.value)
    try:
        SampleLoop(IOSampler(proc_io_path(pid)), interval, policy).run()
    finally:
        if restore is not None:
            restore()


def _run_tui(pid: int, interval: int) -> int:
    from iopid.app import IopidApp

    app = IopidApp(pid, interval)
    app.run()
    return app.return_code or 0


def main(argv: list[str] | None = None) -> int:
    """Run iopid and return the process exit status."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        print(f"usage: {parser.usage}", file=sys.stderr)
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1

    _configure_logging(args.verbose)

    try:
        if not psutil.pid_exists(args.pid):
            raise NoSuchProcess(args.pid)
        if args.tui:
            return _run_tui(args.pid, args.interval)
        _run_console(args.pid, args.interval)
    except IOPidError as exc:
        print(f"{PROG}: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
