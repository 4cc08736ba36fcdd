"""Places kept in an Elasticsearch index, loaded from a tab-separated file."""

from __future__ import annotations

import argparse
import csv
import json
import logging
import re
import sys
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import parse_qs, urlsplit

import requests

log = logging.getLogger(__name__)

DEFAULT_ADDRESS = "http://localhost:9200"
INDEX = "places"
PAGE_SIZE = 10
MAPPINGS: dict[str, Any] = {
    "mappings": {
        "properties": {
            "name": {"type": "text"},
            "address": {"type": "text"},
            "phone": {"type": "text"},
            "location": {"type": "geo_point"},
        }
    }
}

_JSON_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}
_INTEGER = re.compile(r"[+-]?[0-9]+")


def _dumps(document: Any) -> str:
    text = json.dumps(document, ensure_ascii=False, separators=(",", ":"))
    return "".join(_JSON_ESCAPES.get(char, char) for char in text)


@dataclass(frozen=True)
class Place:
    id: str
    name: str
    address: str
    phone: str
    lat: float
    lon: float

    def to_dict(self) -> dict[str, Any]:
        """The document stored in the index."""
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "location": {"lat": self.lat, "lon": self.lon},
        }

    @classmethod
    def from_source(cls, source: Any) -> Place:
        """Build a place from an indexed document; raises ValueError if malformed."""
        if not isinstance(source, dict):
            raise ValueError("place document must be an object")
        texts = {}
        for key in ("id", "name", "address", "phone"):
            value = source.get(key)
            if not isinstance(value, str):
                raise ValueError(f"place field {key!r} must be a string")
            texts[key] = value
        location = source.get("location")
        if not isinstance(location, dict):
            raise ValueError("place field 'location' must be an object")
        coords = {}
        for key in ("lat", "lon"):
            value = location.get(key)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"location field {key!r} must be a number")
            coords[key] = float(value)
        return cls(**texts, **coords)


def _parse_hits(document: Any) -> list[Place]:
    try:
        hits = document["hits"]["hits"]
        return [Place.from_source(hit["_source"]) for hit in hits]
    except (KeyError, TypeError) as exc:
        raise ValueError("malformed search response") from exc


def _status(response: Any) -> str:
    return f"{response.status_code} {getattr(response, 'reason', '') or ''}".rstrip()


class ElasticsearchStore:
    """Access to the places index over the Elasticsearch HTTP API."""

    def __init__(
        self,
        address: str = DEFAULT_ADDRESS,
        session: requests.Session | None = None,
        index: str = INDEX,
        timeout: float = 30.0,
    ) -> None:
        self.address = address.rstrip("/")
        self.index = index
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        return self._session.request(method, f"{self.address}/{path}", timeout=self.timeout, **kwargs)

    def ensure_index(self) -> bool:
        """Create the index with its mappings if missing; True when it was created."""
        response = self._request("HEAD", self.index)
        if response.status_code == HTTPStatus.NOT_FOUND:
            created = self._request("PUT", self.index, json=MAPPINGS)
            if created.status_code >= 400:
                log.warning("[%s] Error creating index", _status(created))
                return False
            log.info("[%s] Index created", _status(created))
            return True
        if response.status_code >= 400:
            log.warning("[%s] Error checking if index exists", _status(response))
        return False

    def _search(self, body: dict[str, Any], params: dict[str, Any] | None = None) -> Any:
        response = self._request("POST", f"{self.index}/_search", params=params, json=body)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            raise ValueError("malformed search response") from exc

    def get_places(self, limit: int, offset: int) -> tuple[list[Place], int]:
        """A page of places and the total number of places in the index."""
        document = self._search({"track_total_hits": True}, params={"from": offset, "size": limit})
        places = _parse_hits(document)
        try:
            total = int(document["hits"]["total"]["value"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError("malformed search response") from exc
        return places, total

    def get_closest_places(self, lat: float, lon: float, limit: int) -> list[Place]:
        """Up to ``limit`` places nearest to the given point, nearest first."""
        body = {
            "size": limit,
            "sort": [
                {
                    "_geo_distance": {
                        "location": {"lat": float(f"{lat:f}"), "lon": float(f"{lon:f}")},
                        "order": "asc",
                        "unit": "km",
                        "mode": "min",
                        "distance_type": "arc",
                        "ignore_unmapped": True,
                    }
                }
            ],
        }
        return _parse_hits(self._search(body))

    def bulk_index(self, places: Iterable[Place]) -> None:
        """Index ``places`` in one bulk request, refreshing the index afterwards."""
        response = self._request(
            "POST",
            "_bulk",
            params={"refresh": "true"},
            data=build_bulk_body(places).encode("utf-8"),
            headers={"Content-Type": "application/x-ndjson"},
        )
        response.raise_for_status()


def build_bulk_body(places: Iterable[Place]) -> str:
    """Newline-delimited bulk request: an index action then the document."""
    return "".join(
        f"{_dumps({'index': {'_id': place.id}})}\n{_dumps(place.to_dict())}\n" for place in places
    )


def _parse_float(text: str, what: str) -> float:
    try:
        return float(text)
    except ValueError as exc:
        raise ValueError(f"Error converting {what} to float: {text!r}") from exc


def load_csv(path: str | Path) -> list[Place]:
    """Read places from a tab-separated file with a header row.

    Rows with an empty id are skipped. Raises ValueError for an empty
    file, rows of the wrong width or unreadable coordinates.
    """
    with open(path, newline="", encoding="utf-8") as handle:
        reader = csv.reader(handle, delimiter="\t")
        try:
            header = next(reader)
            rows = [row for row in reader if row]
        except StopIteration as exc:
            raise ValueError("Error reading file: no header") from exc
        except csv.Error as exc:
            raise ValueError(f"Error reading file: {exc}") from exc

    places: list[Place] = []
    for number, row in enumerate(rows, start=2):
        if len(row) != len(header):
            raise ValueError(f"Error reading file: record on line {number}: wrong number of fields")
        if len(row) < 6:
            raise ValueError(f"Error reading file: record on line {number} has too few fields")
        if not row[0]:
            log.warning("Skipping record with empty ID: %s", row)
            continue
        places.append(
            Place(
                id=row[0],
                name=row[1],
                address=row[2],
                phone=row[3],
                lat=_parse_float(row[4], "latitude"),
                lon=_parse_float(row[5], "longitude"),
            )
        )
    return places


class _PlaceSource(Protocol):
    def get_places(self, limit: int, offset: int) -> tuple[list[Place], int]: ...


def _render_listing(places: Iterable[Place]) -> str:
    items = "".join(
        f"<li><div>{p.name}</div><div>{p.address}</div><div>{p.phone}</div></li>\n" for p in places
    )
    return f"<!doctype html>\n<html>\n<body>\n<h1>Places</h1>\n<ul>\n{items}</ul>\n</body>\n</html>\n"


def _make_server(store: _PlaceSource, host: str, port: int) -> ThreadingHTTPServer:
    class Handler(BaseHTTPRequestHandler):
        def _send(self, status: int, content_type: str, body: str) -> None:
            data = body.encode("utf-8")
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(data)))
            if content_type.startswith("text/plain"):
                self.send_header("X-Content-Type-Options", "nosniff")
            self.end_headers()
            self.wfile.write(data)

        def _handle(self) -> None:
            query = parse_qs(urlsplit(self.path).query, keep_blank_values=True)
            param = query.get("page", [""])[0]
            page = 1
            if param:
                page = int(param) if _INTEGER.fullmatch(param) else 0
                if page < 1:
                    self._send(HTTPStatus.BAD_REQUEST, "text/plain; charset=utf-8", "Invalid page number\n")
                    return
            try:
                places, _ = store.get_places(PAGE_SIZE, (page - 1) * PAGE_SIZE)
            except (requests.RequestException, ValueError):
                self._send(
                    HTTPStatus.INTERNAL_SERVER_ERROR, "text/plain; charset=utf-8", "Error getting places\n"
                )
                return
            self._send(HTTPStatus.OK, "text/html; charset=utf-8", _render_listing(places))

        do_GET = do_POST = do_HEAD = _handle

        def log_message(self, format: str, *args: Any) -> None:
            log.info("%s - %s", self.address_string(), format % args)

    server = ThreadingHTTPServer((host, port), Handler)
    server.daemon_threads = True
    return server


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load places into Elasticsearch and list them.")
    parser.add_argument("--es", default=DEFAULT_ADDRESS, help="Elasticsearch address")
    parser.add_argument("--data", default="data.csv", help="Tab-separated places file")
    parser.add_argument("--host", default="", help="Address to listen on")
    parser.add_argument("--port", type=int, default=8888, help="Port to listen on")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO)

    store = ElasticsearchStore(args.es)
    try:
        store.ensure_index()
    except requests.RequestException as exc:
        print(f"Error checking if index exists: {exc}", file=sys.stderr)
        return 1
    try:
        places = load_csv(args.data)
    except OSError as exc:
        print(f"Error opening file: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1
    try:
        store.bulk_index(places)
    except requests.RequestException as exc:
        print(f"Error sending bulk request: {exc}", file=sys.stderr)
        return 1

    with _make_server(store, args.host, args.port) as server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())