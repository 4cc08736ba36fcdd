"""Command-line client that orders candy from the candy server."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import requests

from piscine.candy import Order

DEFAULT_URL = "https://localhost/buy_candy"
DEFAULT_CA = "minica.pem"


def format_response(payload: dict[str, Any]) -> str:
    """Human-readable line for a server reply."""
    thanks = payload.get("thanks") or ""
    if thanks:
        return f"{thanks} Your change is {payload.get('change') or 0}"
    return f"Error: {payload.get('error') or ''}"


def send_order(url: str, order: Order, cafile: str | None = None) -> dict[str, Any]:
    """Post ``order`` and return the decoded reply.

    Server certificates are checked against ``cafile`` when given. Raises
    requests.RequestException on transport failure and ValueError when the
    reply is not a JSON object.
    """
    body = {"money": order.money, "candyType": order.candy_type, "candyCount": order.candy_count}
    response = requests.post(url, json=body, verify=cafile if cafile else True, timeout=30)
    try:
        payload = response.json()
    except ValueError as exc:
        raise ValueError(f"Failed to unmarshal response: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError("Failed to unmarshal response: expected a JSON object")
    return payload


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Buy candy from the candy server.")
    parser.add_argument("-k", dest="candy_type", default="", help="Candy type")
    parser.add_argument("-c", dest="candy_count", type=int, default=0, help="Candy count")
    parser.add_argument("-m", dest="money", type=int, default=0, help="Money inserted")
    parser.add_argument("--url", default=DEFAULT_URL, help="Server endpoint")
    parser.add_argument("--ca", default=DEFAULT_CA, help="CA certificate file")
    args = parser.parse_args(argv)

    try:
        Path(args.ca).read_bytes()
    except OSError as exc:
        print(f"Reading CA certificate failed: {exc}", file=sys.stderr)
        return 1

    order = Order(money=args.money, candy_type=args.candy_type, candy_count=args.candy_count)
    try:
        payload = send_order(args.url, order, args.ca)
    except requests.RequestException as exc:
        print(f"Failed to send request: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(format_response(payload))
    return 0


if __name__ == "__main__":
    sys.exit(main())