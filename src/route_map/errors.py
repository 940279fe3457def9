"""Exceptions and warnings raised by the route-map pipeline and client."""

from collections import Counter


class ConfigurationError(ValueError):
    """No configured route identifier resolves to a route in the feed."""


class FeedFormatError(ValueError):
    """A GTFS table is missing a required column."""


class DataIntegrityWarning(UserWarning):
    """Rows were skipped because of bad coordinates or dangling references."""


class FetchError(RuntimeError):
    """An emitted artifact could not be retrieved."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to load {url}: {reason}")
        self.url = url
        self.reason = reason


class Diagnostics:
    """Counts of rows skipped during extraction, keyed by reason."""

    def __init__(self):
        self.skipped: Counter[str] = Counter()

    def record(self, reason: str, count: int = 1) -> None:
        if count:
            self.skipped[reason] += count

    def has_skips(self) -> bool:
        return sum(self.skipped.values()) > 0

    def summary(self) -> str:
        return ", ".join(
            f"{reason}={count}" for reason, count in sorted(self.skipped.items())
        )
