"""Candy orders: parsing requests and working out change."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

CANDY_PRICES: dict[str, int] = {
    "CE": 10,  # Cool Eskimo
    "AA": 15,  # Apricot Aardvark
    "NT": 17,  # Natural Tiger
    "DE": 21,  # Dazzling Elderberry
    "YR": 23,  # Yellow Rambutan
}
DEFAULT_THANKS = "Thank you!"
INVALID_ORDER = "Invalid order format"

_FIELDS = {
    "money": ("money", int),
    "candytype": ("candy_type", str),
    "candycount": ("candy_count", int),
}
_INT64 = range(-(2**63), 2**63)


@dataclass(frozen=True)
class Order:
    money: int = 0
    candy_type: str = ""
    candy_count: int = 0


class PurchaseError(Exception):
    """An order that cannot be served, with the HTTP status it maps to."""

    def __init__(self, message: str, status: int) -> None:
        super().__init__(message)
        self.message = message
        self.status = int(status)

    @property
    def payload(self) -> dict[str, str]:
        return {"error": self.message}


def parse_order(data: str | bytes) -> Order:
    """Decode the first JSON value of ``data`` into an order.

    Keys match case-insensitively, unknown keys are ignored, and anything
    after the first value is ignored. Raises ValueError on malformed input.
    """
    try:
        text = data.decode("utf-8") if isinstance(data, (bytes, bytearray)) else data
        document, _ = json.JSONDecoder().raw_decode(text.lstrip(" \t\n\r"))
    except (ValueError, TypeError) as exc:
        raise ValueError(INVALID_ORDER) from exc
    if document is None:
        return Order()
    if not isinstance(document, dict):
        raise ValueError(INVALID_ORDER)

    values: dict[str, Any] = {}
    for key, value in document.items():
        spec = _FIELDS.get(key.lower())
        if spec is None or value is None:
            continue
        name, kind = spec
        if kind is int:
            if isinstance(value, bool) or not isinstance(value, int) or value not in _INT64:
                raise ValueError(INVALID_ORDER)
        elif not isinstance(value, str):
            raise ValueError(INVALID_ORDER)
        values[name] = value
    return Order(**values)


def buy_candy(order: Order, thanks: str = DEFAULT_THANKS) -> dict[str, Any]:
    """Response payload for a successful order; empty fields are left out.

    Raises PurchaseError for a negative count, an unknown candy type or
    too little money.
    """
    if order.candy_count < 0:
        raise PurchaseError("Invalid candy count", HTTPStatus.BAD_REQUEST)
    price = CANDY_PRICES.get(order.candy_type)
    if price is None:
        raise PurchaseError("Invalid candy type", HTTPStatus.BAD_REQUEST)
    total = price * order.candy_count
    if total > order.money:
        raise PurchaseError(
            f"You need {total - order.money} more money!", HTTPStatus.PAYMENT_REQUIRED
        )
    response = {"thanks": thanks, "change": order.money - total}
    return {key: value for key, value in response.items() if value}