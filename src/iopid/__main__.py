from iopid.cli import run

run()
