"""Command-line utilities, algorithms and small services: statistics, diffs, file tools, candy shop, places search, concurrency helpers and anomaly detection."""

__version__ = "0.1.0"