"""Fetching pages concurrently with a bounded number of workers."""

from __future__ import annotations

import argparse
import logging
import queue
import signal
import sys
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor

import requests

log = logging.getLogger(__name__)

DEFAULT_WORKERS = 8
DEFAULT_URLS = ["https://example.com", "https://example.org", "https://example.net"]
PREVIEW_LENGTH = 500

_DONE = object()


def page_parser(url: str, timeout: float | None = 30.0) -> str:
    """Body of the page at ``url``; raises requests.RequestException on failure."""
    response = requests.get(url, timeout=timeout)
    return response.text


def _acquire(slots: threading.Semaphore, stop: threading.Event) -> bool:
    while not slots.acquire(timeout=0.05):
        if stop.is_set():
            return False
    return True


def crawl_web(
    urls: Iterable[str],
    fetch: Callable[[str], str] = page_parser,
    workers: int = DEFAULT_WORKERS,
    stop: threading.Event | None = None,
) -> Iterator[str]:
    """Yield page bodies as they arrive, fetching at most ``workers`` at once.

    Failed fetches are logged and skipped. Setting ``stop`` stops new
    fetches and drops results still in flight.
    """
    if workers < 1:
        raise ValueError("workers must be positive")
    stop_event = stop if stop is not None else threading.Event()
    results: queue.Queue = queue.Queue()
    slots = threading.BoundedSemaphore(workers)

    def work(url: str) -> None:
        try:
            body = fetch(url)
        except Exception as exc:  # a failing page must not end the crawl
            log.warning("Error fetching URL %s: %s", url, exc)
            return
        finally:
            slots.release()
        if not stop_event.is_set():
            results.put(body)

    def feed() -> None:
        try:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                for url in urls:
                    if stop_event.is_set() or not _acquire(slots, stop_event):
                        break
                    pool.submit(work, url)
        finally:
            results.put(_DONE)

    threading.Thread(target=feed, daemon=True).start()
    while (item := results.get()) is not _DONE:
        yield item


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Fetch pages concurrently and print their start.")
    parser.add_argument("urls", nargs="*", help="Pages to fetch")
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS, help="Concurrent fetches")
    parser.add_argument("--timeout", type=float, default=30.0, help="Seconds per request")
    args = parser.parse_args(argv)

    stop = threading.Event()

    def on_signal(signum: int, frame: object) -> None:
        print("\nReceived shutdown signal, exiting...")
        stop.set()

    previous: dict[int, object] = {}
    if threading.current_thread() is threading.main_thread():
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.signal(signum, on_signal)
    try:
        fetch = lambda url: page_parser(url, args.timeout)  # noqa: E731
        results = crawl_web(args.urls or DEFAULT_URLS, fetch, args.workers, stop)
        for number, body in enumerate(results):
            print(f"Result {number}: {body[:PREVIEW_LENGTH]}")
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
    print("end...")
    return 0


if __name__ == "__main__":
    sys.exit(main())