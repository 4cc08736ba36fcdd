"""Detecting anomalous frequencies in a stream of transmitter readings."""

from __future__ import annotations

import argparse
import json
import logging
import math
import random
import sys
import threading
import time
import uuid
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from itertools import islice

log = logging.getLogger(__name__)

DEFAULT_WARMUP = 50


@dataclass(frozen=True)
class Anomaly:
    session_id: str
    frequency: float
    timestamp: datetime


@dataclass(frozen=True)
class TransmitterData:
    session_id: str
    frequency: float
    timestamp: int


def _sample_std(values: Sequence[float], mean: float) -> float:
    if len(values) < 2:
        return math.nan
    squared = sum((value - mean) ** 2 for value in values)
    return math.sqrt(squared / (len(values) - 1))


class AnomalyDetector:
    """Running mean and sample deviation with outlier detection.

    The first ``warmup`` readings only train the statistics; afterwards a
    reading further than ``coefficient`` deviations from the mean is an
    anomaly. Anomalies found by ``detect`` are handed to ``sink``.
    """

    def __init__(
        self,
        coefficient: float,
        warmup: int = DEFAULT_WARMUP,
        sink: Callable[[Anomaly], None] | None = None,
    ) -> None:
        self.coefficient = coefficient
        self.warmup = warmup
        self.sink = sink
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        """Forget all readings and counts."""
        with self._lock:
            self.count_of_records = 0
            self.count_of_anomalies = 0
            self.mean = 0.0
            self.std = 0.0
            self.values: list[float] = []
            self._sum = 0.0

    def observe(self, frequency: float) -> bool:
        """Record a reading; True when it is an anomaly."""
        with self._lock:
            self.count_of_records += 1
            self._sum += frequency
            self.mean = self._sum / self.count_of_records
            self.values.append(frequency)
            self.std = _sample_std(self.values, self.mean)
            if (
                self.count_of_records > self.warmup
                and abs(frequency - self.mean) > self.coefficient * self.std
            ):
                self.count_of_anomalies += 1
                return True
            return False

    def detect(self, messages: Iterable[TransmitterData]) -> Iterator[Anomaly]:
        """Observe each message and yield those that are anomalies."""
        for message in messages:
            if not self.observe(message.frequency):
                continue
            anomaly = Anomaly(
                session_id=message.session_id,
                frequency=message.frequency,
                timestamp=datetime.fromtimestamp(message.timestamp, timezone.utc),
            )
            if self.sink is not None:
                self.sink(anomaly)
            yield anomaly


def stream_data(
    session_id: str | None = None, rng: random.Random | None = None
) -> Iterator[TransmitterData]:
    """Endless readings, each drawn from a normal law with random mean and spread."""
    session = session_id or str(uuid.uuid4())
    generator = rng if rng is not None else random.Random()
    while True:
        mean = generator.random() * 20 - 10
        std_dev = generator.random() * 1.2 + 0.3
        frequency = generator.gauss(mean, std_dev)
        log.debug("Session ID: %s, Mean: %f, StdDev: %f, Frequency: %f", session, mean, std_dev, frequency)
        yield TransmitterData(session_id=session, frequency=frequency, timestamp=int(time.time()))


def _paced(messages: Iterable[TransmitterData], interval: float) -> Iterator[TransmitterData]:
    for number, message in enumerate(messages):
        if number and interval > 0:
            time.sleep(interval)
        yield message


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Detect anomalies in transmitter frequencies.")
    parser.add_argument("-k", dest="coefficient", type=float, default=0.0, help="STD anomaly coefficient")
    parser.add_argument("--interval", type=float, default=1.0, help="Seconds between readings")
    parser.add_argument("--limit", type=int, default=None, help="Stop after this many readings")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the readings")
    parser.add_argument("--output", default=None, help="Append anomalies as JSON lines to this file")
    parser.add_argument("extra", nargs="*", help=argparse.SUPPRESS)
    args = parser.parse_args(argv)

    if args.extra or args.coefficient == 0:
        parser.print_usage(sys.stderr)
        return 1
    logging.basicConfig(level=logging.INFO)

    output = open(args.output, "a", encoding="utf-8") if args.output else None

    def store(anomaly: Anomaly) -> None:
        if output is not None:
            record = {
                "session_id": anomaly.session_id,
                "frequency": anomaly.frequency,
                "timestamp": anomaly.timestamp.isoformat(),
            }
            output.write(json.dumps(record) + "\n")
            output.flush()

    detector = AnomalyDetector(args.coefficient, DEFAULT_WARMUP, store)
    messages: Iterable[TransmitterData] = stream_data(rng=random.Random(args.seed))
    if args.limit is not None:
        messages = islice(messages, args.limit)

    print(f"Calculation of parameters. Enter {detector.warmup} frequencies.")
    try:
        for message in _paced(messages, args.interval):
            log.info(
                "Received message: session_id: %s, frequency: %f, timestamp: %d",
                message.session_id,
                message.frequency,
                message.timestamp,
            )
            for anomaly in detector.detect([message]):
                print(f"Anomaly: {anomaly.frequency:.4f}")
            if detector.count_of_records == detector.warmup:
                print(
                    f"Anomaly Detection. Mean: {detector.mean:.4f} STD: {detector.std:.4f} "
                    f"k*STD: {detector.coefficient * detector.std:.4f}"
                )
    except KeyboardInterrupt:
        pass
    finally:
        if output is not None:
            output.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())