"""Walking a directory tree and listing entries by type."""

from __future__ import annotations

import argparse
import enum
import os
import stat
import sys
from collections.abc import Iterator, Sequence


class _Kind(enum.Enum):
    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"
    OTHER = "other"


def _kind_from_mode(mode: int) -> _Kind:
    if stat.S_ISLNK(mode):
        return _Kind.SYMLINK
    if stat.S_ISDIR(mode):
        return _Kind.DIR
    if stat.S_ISREG(mode):
        return _Kind.FILE
    return _Kind.OTHER


def _kind_from_entry(entry: os.DirEntry) -> _Kind:
    if entry.is_symlink():
        return _Kind.SYMLINK
    if entry.is_dir(follow_symlinks=False):
        return _Kind.DIR
    if entry.is_file(follow_symlinks=False):
        return _Kind.FILE
    return _Kind.OTHER


def _walk(path: str, kind: _Kind) -> Iterator[tuple[str, _Kind]]:
    yield path, kind
    if kind is not _Kind.DIR:
        return
    with os.scandir(path) as scanner:
        entries = sorted(scanner, key=lambda entry: entry.name)
    for entry in entries:
        child = os.path.normpath(os.path.join(path, entry.name))
        yield from _walk(child, _kind_from_entry(entry))


def _extension(path: str) -> str:
    base = path.rsplit(os.sep, 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def _describe(path: str, kind: _Kind) -> str:
    if kind is _Kind.SYMLINK:
        try:
            return f"{path} -> {os.readlink(path)}"
        except OSError:
            return path
    if kind is _Kind.DIR:
        return f"{path}/"
    return path


def _describe_link(path: str) -> str:
    try:
        target = os.readlink(path)
    except OSError:
        return f"{path} -> [broken]"
    parent = os.path.dirname(path) or "."
    resolved = os.path.normpath(os.path.join(parent, target.lstrip(os.sep)))
    try:
        mode = os.lstat(resolved).st_mode
    except OSError:
        return f"{path} -> [broken]"
    if stat.S_ISDIR(mode):
        return f"{path} -> {target}/"
    return f"{path} -> {target}"


def find_entries(
    root: str | os.PathLike,
    only_files: bool = False,
    only_dirs: bool = False,
    only_symlinks: bool = False,
    ext: str = "",
) -> Iterator[str]:
    """Yield one line per matching entry under ``root``, in lexical order.

    Symbolic links are listed but not followed. Raises OSError when the
    root or a directory cannot be read.
    """
    start = os.fspath(root)
    root_kind = _kind_from_mode(os.lstat(start).st_mode)
    no_filter = not (only_files or only_dirs or only_symlinks)
    for path, kind in _walk(start, root_kind):
        if no_filter:
            yield _describe(path, kind)
        elif only_files and kind is _Kind.FILE and (not ext or _extension(path) == "." + ext):
            yield path
        elif only_dirs and kind is _Kind.DIR:
            yield f"{path}/"
        elif only_symlinks and kind is _Kind.SYMLINK:
            yield _describe_link(path)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="List directory entries by type.")
    parser.add_argument("-f", dest="only_files", action="store_true", help="Print only files")
    parser.add_argument("-d", dest="only_dirs", action="store_true", help="Print only directories")
    parser.add_argument("-sl", dest="only_symlinks", action="store_true", help="Print only symbolic links")
    parser.add_argument("-ext", dest="ext", default="", help="Print only files with a certain extension")
    parser.add_argument("root", nargs="?")
    args = parser.parse_args(argv)

    if args.root is None:
        print("Please provide a directory path")
        return 1
    try:
        for line in find_entries(args.root, args.only_files, args.only_dirs, args.only_symlinks, args.ext):
            print(line)
    except OSError as exc:
        print(exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())