#!/usr/bin/env python3
"""
Run the test suites in tests/.
Usage: from project root:
  python scripts/run_all_tests.py               # unit, integration and api
  python scripts/run_all_tests.py unit api      # selected suites only
  python scripts/run_all_tests.py -- -k export  # extra pytest arguments after --
"""
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SUITES = ("unit", "integration", "api")


def _pytest_command() -> list[str]:
    venv_pytest = PROJECT_ROOT / "venv" / "bin" / "pytest"
    if venv_pytest.exists():
        return [str(venv_pytest)]
    return [sys.executable, "-m", "pytest"]


def main(argv: list[str]) -> int:
    extra: list[str] = []
    if "--" in argv:
        split = argv.index("--")
        argv, extra = argv[:split], argv[split + 1:]

    unknown = [name for name in argv if name not in SUITES]
    if unknown:
        print(f"Unknown suite(s): {', '.join(unknown)}. Choose from: {', '.join(SUITES)}")
        return 2

    suites = argv or list(SUITES)
    paths = [str(PROJECT_ROOT / "tests" / name) for name in suites]
    cmd = [*_pytest_command(), *paths, "-v", "--tb=short", *extra]
    return subprocess.run(cmd, cwd=str(PROJECT_ROOT)).returncode


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
