"""Rotating log files into gzip archives stamped with their modification time."""

from __future__ import annotations

import argparse
import contextlib
import gzip
import shutil
import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path


def rotate_file(path: str | Path, archive_dir: str | Path) -> Path:
    """Compress ``path`` into ``archive_dir`` and remove the original.

    The archive is named ``<name>_<mtime>.tar.gz`` where ``mtime`` is the
    file's modification time in Unix seconds. Returns the archive path and
    raises OSError when the file cannot be read or the archive written.
    """
    source = Path(path)
    timestamp = source.stat().st_mtime_ns // 1_000_000_000
    target = Path(archive_dir) / f"{source.name}_{timestamp}.tar.gz"
    with open(source, "rb") as src, gzip.open(target, "wb") as dst:
        shutil.copyfileobj(src, dst)
    with contextlib.suppress(OSError):
        source.unlink()
    return target


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Archive log files with gzip.")
    parser.add_argument("-a", dest="archive_dir", default="", help="Archive directory")
    parser.add_argument("files", nargs="*")
    args = parser.parse_args(argv)

    if not args.archive_dir:
        print("Archive directory must be specified")
        return 1

    def work(name: str) -> tuple[str, bool]:
        try:
            target = rotate_file(name, args.archive_dir)
        except OSError as exc:
            return f"Failed to rotate file {name}: {exc}", False
        return f"Successfully rotated file {name} to {target}", True

    status = 0
    with ThreadPoolExecutor() as pool:
        for line, ok in pool.map(work, args.files):
            print(line)
            if not ok:
                status = 1
    return status


if __name__ == "__main__":
    sys.exit(main())