"""Web front end for the places index: HTML pages, a JSON API and JWT-guarded recommendations."""

from __future__ import annotations

import argparse
import json
import logging
import math
import re
import sys
import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from http import HTTPStatus
from socketserver import ThreadingMixIn
from typing import Any, Callable, Protocol
from urllib.parse import parse_qs
from wsgiref.simple_server import WSGIServer, make_server

import jinja2
import jwt
import requests

from piscine.places_store import DEFAULT_ADDRESS, PAGE_SIZE, ElasticsearchStore, Place

log = logging.getLogger(__name__)

RECOMMEND_LIMIT = 3
TOKEN_LIFETIME = 30 * 60
TOKEN_ISSUER = "test"
LAST_PAGE_LINK = 1365
DEFAULT_SECRET = "secret"

_HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT64 = range(-(2**63), 2**63)
_JSON_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}
_PLAIN_TEXT = "text/plain; charset=utf-8"

_PAGE_TEMPLATE = jinja2.Environment(autoescape=True).from_string(
    """<!doctype html>
<html>
<head>
    <meta charset="utf-8">
    <title>Places</title>
    <meta name="description" content="">
    <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body>
<h5>Total: {{ total }}</h5>
<ul>
    {% for place in places %}
    <li>
        <div>{{ place.name }}</div>
        <div>{{ place.address }}</div>
        <div>{{ place.phone }}</div>
    </li>
    {% endfor %}
</ul>
{% if page > 1 %}<a href="/?page={{ page - 1 }}">Previous</a>{% endif %}
{% if page < last_link %}<a href="/?page={{ page + 1 }}">Next</a>{% endif %}
<a href="/?page={{ last_link }}">Last</a>
</body>
</html>"""
)


class _Store(Protocol):
    def get_places(self, limit: int, offset: int) -> tuple[list[Place], int]: ...

    def get_closest_places(self, lat: float, lon: float, limit: int) -> list[Place]: ...


@dataclass(frozen=True)
class Response:
    """An HTTP response produced by one of the application's handlers."""

    status: int
    content_type: str
    body: str

    @property
    def headers(self) -> list[tuple[str, str]]:
        headers = [("Content-Type", self.content_type)]
        if self.content_type.startswith("text/plain"):
            headers.append(("X-Content-Type-Options", "nosniff"))
        return headers

    @property
    def status_line(self) -> str:
        try:
            phrase = HTTPStatus(self.status).phrase
        except ValueError:
            phrase = ""
        return f"{self.status} {phrase}".rstrip()


def _error(status: int, message: str) -> Response:
    return Response(int(status), _PLAIN_TEXT, message + "\n")


def _plain(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _json_response(document: Any) -> Response:
    text = json.dumps(_plain(document), ensure_ascii=False, separators=(",", ":"))
    body = "".join(_JSON_ESCAPES.get(char, char) for char in text) + "\n"
    return Response(int(HTTPStatus.OK), "application/json", body)


def _atoi(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer: {text!r}")
    value = int(text)
    if value not in _INT64:
        raise ValueError(f"integer out of range: {text!r}")
    return value


def _parse_float(text: str) -> float:
    if not text or text != text.strip() or "_" in text:
        raise ValueError(f"invalid number: {text!r}")
    return float(text)


def render_page(places: Iterable[Place], total: int, page: int) -> str:
    """HTML listing of one page of places, with navigation links."""
    return _PAGE_TEMPLATE.render(places=list(places), total=total, page=page, last_link=LAST_PAGE_LINK)


def issue_token(secret: str | bytes, now: float | None = None) -> str:
    """HS256 token issued by ``test`` and valid for thirty minutes from ``now``."""
    issued = int(time.time() if now is None else now)
    claims = {"exp": issued + TOKEN_LIFETIME, "iss": TOKEN_ISSUER}
    return jwt.encode(claims, secret, algorithm="HS256")


def validate_token(secret: str | bytes, header: str | None) -> dict[str, Any]:
    """Claims of the token in an Authorization value, with or without ``Bearer``.

    Raises jwt.InvalidTokenError when the token is missing, malformed,
    not signed with HMAC under ``secret``, or expired.
    """
    token = header or ""
    if len(token) > 7 and token[:7].upper() == "BEARER ":
        token = token[7:]
    return jwt.decode(token, secret, algorithms=_HMAC_ALGORITHMS)


_STORE_ERRORS = (requests.RequestException, ValueError, OSError)


class PlacesApp:
    """WSGI application serving pages, the places API and recommendations.

    With a ``secret`` the recommendation endpoint requires a token from
    ``/api/get_token``; without one it is open and no tokens are issued.
    """

    def __init__(self, store: _Store, secret: str | bytes | None = None) -> None:
        self.store = store
        self.secret = secret

    def index(self, query: Mapping[str, str]) -> Response:
        param = query.get("page", "") or "1"
        try:
            page = _atoi(param)
        except ValueError:
            page = 0
        if page < 1:
            return _error(HTTPStatus.BAD_REQUEST, f"Invalid 'page' value: {param}")
        try:
            places, total = self.store.get_places(PAGE_SIZE, (page - 1) * PAGE_SIZE)
        except _STORE_ERRORS as exc:
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        last_page = (total + PAGE_SIZE - 1) // PAGE_SIZE
        if page > last_page:
            return _error(
                HTTPStatus.BAD_REQUEST, f"Invalid 'page' value: {page}. Total pages: {last_page}."
            )
        return Response(int(HTTPStatus.OK), "text/html; charset=utf-8", render_page(places, total, page))

    def api_places(self, query: Mapping[str, str]) -> Response:
        try:
            page = _atoi(query.get("page", ""))
        except ValueError:
            page = 0
        if page < 1:
            return _error(HTTPStatus.BAD_REQUEST, "Invalid 'page' value")
        try:
            places, total = self.store.get_places(PAGE_SIZE, (page - 1) * PAGE_SIZE)
        except _STORE_ERRORS as exc:
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        last_page = (total + PAGE_SIZE - 1) // PAGE_SIZE
        return _json_response(
            {
                "name": "Places",
                "total": total,
                "places": [place.to_dict() for place in places],
                "prev_page": page - 1 if page > 1 else None,
                "next_page": page + 1 if page < last_page else None,
                "last_page": last_page,
            }
        )

    def recommend(self, query: Mapping[str, str], authorization: str | None = None) -> Response:
        if self.secret is not None:
            try:
                validate_token(self.secret, authorization)
            except jwt.InvalidTokenError as exc:
                log.warning("Error parsing token: %s", exc)
                return _error(HTTPStatus.UNAUTHORIZED, "Invalid token")
        try:
            lat = _parse_float(query.get("lat", ""))
        except ValueError:
            return _error(HTTPStatus.BAD_REQUEST, "Invalid 'lat' value")
        try:
            lon = _parse_float(query.get("lon", ""))
        except ValueError:
            return _error(HTTPStatus.BAD_REQUEST, "Invalid 'lon' value")
        try:
            places = self.store.get_closest_places(lat, lon, RECOMMEND_LIMIT)
        except _STORE_ERRORS as exc:
            return _error(HTTPStatus.INTERNAL_SERVER_ERROR, str(exc))
        return _json_response({"name": "Recommendation", "places": [place.to_dict() for place in places]})

    def get_token(self) -> Response:
        if self.secret is None:
            raise ValueError("tokens need a secret")
        token = issue_token(self.secret)
        return Response(int(HTTPStatus.OK), "application/json", json.dumps({"token": token}, separators=(",", ":")))

    def _dispatch(self, path: str, query: Mapping[str, str], authorization: str | None) -> Response:
        if path == "/api/places":
            return self.api_places(query)
        if path == "/api/recommend":
            return self.recommend(query, authorization)
        if path == "/api/get_token" and self.secret is not None:
            return self.get_token()
        return self.index(query)

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> list[bytes]:
        parsed = parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True)
        query = {key: values[0] for key, values in parsed.items()}
        response = self._dispatch(
            environ.get("PATH_INFO", "/") or "/", query, environ.get("HTTP_AUTHORIZATION")
        )
        body = response.body.encode("utf-8")
        start_response(response.status_line, [*response.headers, ("Content-Length", str(len(body)))])
        return [body]


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve places from Elasticsearch.")
    parser.add_argument("--es", default=DEFAULT_ADDRESS, help="Elasticsearch address")
    parser.add_argument("--host", default="", help="Address to listen on")
    parser.add_argument("--port", type=int, default=8888, help="Port to listen on")
    parser.add_argument("--secret", default=DEFAULT_SECRET, help="Key for signing tokens")
    parser.add_argument("--no-auth", action="store_true", help="Serve recommendations without tokens")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    store = ElasticsearchStore(args.es)
    try:
        store.ensure_index()
    except requests.RequestException as exc:
        print(f"Error checking if index exists: {exc}", file=sys.stderr)
        return 1

    app = PlacesApp(store, None if args.no_auth else args.secret)
    with make_server(args.host, args.port, app, server_class=_ThreadingWSGIServer) as server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())