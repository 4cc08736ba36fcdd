"""Drawing a small round mascot logo."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from PIL import Image, ImageDraw

WIDTH = 300
HEIGHT = 300


def _rgb(red: float, green: float, blue: float) -> tuple[int, int, int]:
    return int(red * 255), int(green * 255), int(blue * 255)


def _circle(draw: ImageDraw.ImageDraw, x: float, y: float, radius: float, fill: tuple[int, int, int]) -> None:
    draw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=fill)


def draw_logo() -> Image.Image:
    """The logo as a 300x300 RGB image."""
    background = _rgb(0.9, 0.9, 0.9)
    body = _rgb(0.2, 0.3, 0.4)
    white = _rgb(1, 1, 1)
    black = _rgb(0, 0, 0)
    cx, cy = WIDTH / 2, HEIGHT / 2

    image = Image.new("RGB", (WIDTH, HEIGHT), background)
    draw = ImageDraw.Draw(image)

    _circle(draw, cx, cy, 100, body)
    for dx in (-35, 35):
        _circle(draw, cx + dx, cy - 10, 30, white)
    for dx in (-35, 35):
        _circle(draw, cx + dx, cy - 10, 15, black)
    for dx in (-70, 70):
        _circle(draw, cx + dx, cy - 70, 30, body)
    _circle(draw, cx, cy + 10, 10, black)
    draw.arc((cx - 40, cy + 20 - 40, cx + 40, cy + 20 + 40), start=45, end=135, fill=white, width=3)
    return image


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Draw the logo as a PNG file.")
    parser.add_argument("--output", default="amazing_logo.png", help="Where to save the image")
    args = parser.parse_args(argv)
    try:
        draw_logo().save(args.output, format="PNG")
    except OSError as exc:
        print(f"error while creating logo: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())