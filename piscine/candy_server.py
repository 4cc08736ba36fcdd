"""HTTP(S) server selling candy at ``/buy_candy``."""

from __future__ import annotations

import argparse
import json
import ssl
import sys
from collections.abc import Sequence
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

from piscine.candy import DEFAULT_THANKS, INVALID_ORDER, PurchaseError, buy_candy, parse_order
from piscine.cow import ask_cow

BUY_CANDY_PATH = "/buy_candy"

_JSON_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}


def _encode_json(payload: dict) -> bytes:
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return ("".join(_JSON_ESCAPES.get(char, char) for char in text) + "\n").encode("utf-8")


class CandyHandler(BaseHTTPRequestHandler):
    """Serves candy orders; answers with a cow when the server asks for it."""

    server_version = "CandyServer"

    def _send(self, status: int, content_type: str, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _read_body(self) -> bytes:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            length = 0
        return self.rfile.read(length) if length > 0 else b""

    def _handle(self) -> None:
        if urlsplit(self.path).path != BUY_CANDY_PATH:
            self._send(HTTPStatus.NOT_FOUND, "text/plain; charset=utf-8", b"404 page not found\n")
            return
        try:
            order = parse_order(self._read_body())
        except ValueError:
            self._send(HTTPStatus.BAD_REQUEST, "text/plain; charset=utf-8", f"{INVALID_ORDER}\n".encode())
            return
        thanks = ask_cow(DEFAULT_THANKS) if getattr(self.server, "cowsay", False) else DEFAULT_THANKS
        try:
            payload, status = buy_candy(order, thanks), int(HTTPStatus.OK)
        except PurchaseError as exc:
            payload, status = exc.payload, exc.status
        self._send(status, "application/json", _encode_json(payload))

    do_GET = do_POST = do_PUT = do_PATCH = do_DELETE = _handle


class _CandyServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], cowsay: bool) -> None:
        super().__init__(address, CandyHandler)
        self.cowsay = cowsay


def make_server(
    host: str,
    port: int,
    certfile: str | None = None,
    keyfile: str | None = None,
    cowsay: bool = False,
) -> ThreadingHTTPServer:
    """A bound candy server, serving TLS when a certificate is given."""
    server = _CandyServer((host, port), cowsay)
    if certfile:
        try:
            context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
            context.load_cert_chain(certfile, keyfile)
        except (OSError, ssl.SSLError):
            server.server_close()
            raise
        server.socket = context.wrap_socket(server.socket, server_side=True)
    return server


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve candy orders over HTTPS.")
    parser.add_argument("--host", default="", help="Address to listen on")
    parser.add_argument("--port", type=int, default=443, help="Port to listen on")
    parser.add_argument("--cert", default="localhost/cert.pem", help="Certificate file")
    parser.add_argument("--key", default="localhost/key.pem", help="Private key file")
    parser.add_argument("--cowsay", action="store_true", help="Thank buyers with a cow")
    args = parser.parse_args(argv)

    try:
        server = make_server(args.host, args.port, args.cert, args.key, args.cowsay)
    except (OSError, ssl.SSLError) as exc:
        print("ListenAndServeTLS:", exc, file=sys.stderr)
        return 1
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())