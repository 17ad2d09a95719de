#!/usr/bin/env python3
"""Install TaskLens in editable mode, then run the test suite.

Unrecognised arguments are forwarded to pytest, e.g. ``scripts/test.py -k store``.
"""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent


def _parse_args(argv: list[str]) -> tuple[argparse.Namespace, list[str]]:
    parser = argparse.ArgumentParser(description="Run the TaskLens test suite")
    parser.add_argument("--skip-install", action="store_true", help="Do not reinstall the package before testing")
    parser.add_argument("--check", action="store_true", help="Run scripts/check.py before the tests")
    return parser.parse_known_args(argv)


def run(command: list[str]) -> None:
    print(f"+ {' '.join(command)}", flush=True)
    subprocess.run(command, check=True, cwd=REPO_ROOT)


def main(argv: list[str]) -> int:
    args, pytest_args = _parse_args(argv)
    print(f"Python interpreter: {sys.executable}", flush=True)
    try:
        if not args.skip_install:
            run([sys.executable, "-m", "pip", "install", "-e", ".[dev]"])
        if args.check:
            run([sys.executable, str(REPO_ROOT / "scripts" / "check.py")])
        run([sys.executable, "-m", "pytest", "-q", *pytest_args])
    except subprocess.CalledProcessError as exc:
        return exc.returncode or 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
