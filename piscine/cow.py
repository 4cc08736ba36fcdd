"""A cow saying a phrase inside a speech bubble."""

from __future__ import annotations

import sys
from collections.abc import Sequence

_COW = (
    "        \\   ^__^\n"
    "         \\  (oo)\\_______\n"
    "            (__)\\       )\\/\\\n"
    "                ||----w |\n"
    "                ||     ||\n"
)


def ask_cow(phrase: str) -> str:
    """The phrase in a bubble above a cow; borders match its UTF-8 length."""
    width = len(phrase.encode("utf-8")) + 2
    return f" {'_' * width}\n< {phrase} >\n {'-' * width}\n{_COW}"


def main(argv: Sequence[str] | None = None) -> int:
    words = sys.argv[1:] if argv is None else list(argv)
    print(ask_cow(" ".join(words) if words else "Thank you!"), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())