"""Writers that record consequence results as they are computed."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TextIO, TypeVar, Union

from .results import Result
from .statistics import InlineHistogram

_W = TypeVar("_W", bound="_StreamWriter")

_HEADER = '{"consequences":['
_FOOTER = "]}"


def format_money(amount: float) -> str:
    """Dollars with thousands separators and two decimals, such as ``$1,234.50``."""
    text = f"{abs(amount):,.2f}"
    if amount < 0 and text != "0.00":
        return f"$-{text}"
    return f"${text}"


def _open_append(path: Union[str, Path]) -> TextIO:
    descriptor = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
    return os.fdopen(descriptor, "a", encoding="utf-8")


class _StreamWriter:
    """Shared handling of a text stream, closed only if the writer opened it."""

    def __init__(self, stream: TextIO, *, owns_stream: bool = False) -> None:
        self.stream = stream
        self._owns_stream = owns_stream

    def _release(self) -> None:
        if self._owns_stream and not self.stream.closed:
            self.stream.close()

    def __enter__(self: _W) -> _W:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()  # type: ignore[attr-defined]


class JsonResultsWriter(_StreamWriter):
    """Writes results as elements of a ``consequences`` array, each followed by a comma."""

    def __init__(self, stream: TextIO, *, owns_stream: bool = False) -> None:
        super().__init__(stream, owns_stream=owns_stream)
        self._header_written = False

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> JsonResultsWriter:
        """A writer that appends to the file at ``path``, creating it if needed."""
        return cls(_open_append(path), owns_stream=True)

    def write(self, result: Result) -> None:
        if not self._header_written:
            self.stream.write(_HEADER)
            self._header_written = True
        self.stream.write(result.to_json() + ",")

    def close(self) -> None:
        self.stream.write(_FOOTER)
        self._release()


class StreamingResultsWriter(_StreamWriter):
    """Writes one JSON object per line."""

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> StreamingResultsWriter:
        """A writer that appends to the file at ``path``, creating it if needed."""
        return cls(_open_append(path), owns_stream=True)

    def write(self, result: Result) -> None:
        self.stream.write(result.to_json() + "\n")

    def close(self) -> None:
        self._release()


class SummaryResultsWriter(_StreamWriter):
    """Totals structure and content damage by damage category and reports them on close."""

    def __init__(self, stream: TextIO, *, owns_stream: bool = False) -> None:
        super().__init__(stream, owns_stream=owns_stream)
        self.grand_total = 0.0
        self.totals: dict[str, float] = {}
        self.histograms: dict[str, InlineHistogram] = {}

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> SummaryResultsWriter:
        """A writer that appends to the file at ``path``, creating it if needed."""
        return cls(_open_append(path), owns_stream=True)

    def write(self, result: Result) -> None:
        total = 0.0
        category = ""
        for header, value in zip(result.headers, result.values):
            if header == "damage category":
                category = value
            elif header in ("structure damage", "content damage"):
                total += value
        self.grand_total += total
        histogram = self.histograms.get(category)
        if histogram is None:
            # The first observation of a category only opens its histogram.
            self.histograms[category] = InlineHistogram(1000, 0, 10000)
        else:
            histogram.add_observation(total)
        self.totals[category] = self.totals.get(category, 0.0) + total

    def close(self) -> None:
        self.stream.write(f"Grand Total is {format_money(self.grand_total)}\n")
        for category, total in self.totals.items():
            self.stream.write(f"Damages for {category} were {format_money(total)}\n")
        for category, histogram in self.histograms.items():
            self.stream.write(f"Histogram for {category}:\n{histogram.string_sparse()}")
        self._release()


class VirtualResultsWriter:
    """Collects results in memory in the same form as JsonResultsWriter."""

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._header_written = False
        self._closed = False

    def write(self, result: Result) -> None:
        if self._closed:
            raise ValueError("cannot write to a closed results writer")
        if not self._header_written:
            self._parts.append(_HEADER)
            self._header_written = True
        self._parts.append(result.to_json() + ",")

    def close(self) -> None:
        if not self._closed:
            self._parts.append(_FOOTER)
            self._closed = True

    def getvalue(self) -> bytes:
        """Close the writer and return everything written, as UTF-8 bytes."""
        self.close()
        return "".join(self._parts).encode("utf-8")

    def __enter__(self) -> VirtualResultsWriter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AggregatedStageDamageWriter(_StreamWriter):
    """Builds histograms of aggregated damage by damage category and elevation."""

    def __init__(self, stream: TextIO, *, owns_stream: bool = False) -> None:
        super().__init__(stream, owns_stream=owns_stream)
        self.current_elevation = 0.0
        self.histograms: dict[str, dict[float, InlineHistogram]] = {}

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> AggregatedStageDamageWriter:
        """A writer that appends to the file at ``path``, creating it if needed."""
        return cls(_open_append(path), owns_stream=True)

    def set_aggregation_elevation(self, elevation: float) -> None:
        self.current_elevation = elevation

    def write(self, result: Result) -> None:
        try:
            category = result.fetch("damage category")
        except KeyError:
            raise ValueError("couldnt find the damage category") from None
        try:
            damage = float(result.fetch("damage"))
        except KeyError:
            raise ValueError("couldnt find the damage") from None
        by_elevation = self.histograms.setdefault(category, {})
        histogram = by_elevation.get(self.current_elevation)
        if histogram is None:
            histogram = InlineHistogram(1000.0, damage - 500.0, damage + 500.0)
            by_elevation[self.current_elevation] = histogram
        histogram.add_observation(damage)

    def close(self) -> None:
        self._release()


__all__ = [
    "AggregatedStageDamageWriter",
    "JsonResultsWriter",
    "StreamingResultsWriter",
    "SummaryResultsWriter",
    "VirtualResultsWriter",
    "format_money",
]