"""Running a command with arguments read from standard input."""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Sequence


def run(command: Sequence[str], args: Sequence[str]) -> str:
    """Run ``command`` with ``args`` appended and return its standard output.

    Raises ValueError for an empty command, OSError when it cannot be
    started and subprocess.CalledProcessError when it exits with failure.
    """
    if not command:
        raise ValueError("no command given")
    completed = subprocess.run([*command, *args], capture_output=True, check=True)
    return completed.stdout.decode("utf-8", errors="replace")


def _strip_line(line: str) -> str:
    line = line[:-1] if line.endswith("\n") else line
    return line[:-1] if line.endswith("\r") else line


def main(argv: Sequence[str] | None = None) -> int:
    command = list(sys.argv[1:] if argv is None else argv)
    args = [_strip_line(line) for line in sys.stdin]
    try:
        output = run(command, args)
    except (ValueError, OSError, subprocess.CalledProcessError) as exc:
        print("An error occurred:", exc)
        return 1
    print(output, end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())