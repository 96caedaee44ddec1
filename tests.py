"""
Run the Pitch test suite.

Usage (from project root):

    python tests.py            # whole suite
    python tests.py -k orch    # extra arguments go to pytest

Installs the package with its test and torch extras (.[dev,rl]) first when
pytest or the package itself cannot be imported.
"""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent


def ensure_test_dependencies() -> None:
    try:
        import pitch  # noqa: F401
        import pytest  # noqa: F401
        # numpy/torch (rl extra) are optional; policy tests skip themselves without them
        return
    except ImportError:
        pass

    print("Installing pitch with test and RL extras (.[dev,rl]) ...")
    subprocess.check_call(
        [sys.executable, "-m", "pip", "install", "-e", ".[dev,rl]"],
        cwd=str(ROOT),
    )


def main(argv: list[str]) -> int:
    ensure_test_dependencies()
    return subprocess.call([sys.executable, "-m", "pytest", *argv], cwd=str(ROOT))


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
