"""Écriture incrémentale des résultats de balayage au format CSV."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence

from .outcome import RunMeasurement


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class ResultSink:
    """Append-only CSV dataset for one sweep.

    The header is written once when the sink is opened, then every run
    appends ``coordinate,rss,throughput,`` and closes the file again so that
    an interrupted sweep keeps all completed rows.
    """

    def __init__(self, path: Path, header: Sequence[str]) -> None:
        self.path = Path(path)
        self.header = list(header)
        self.rows_written = 0

    def write_header(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", newline="", encoding="utf8") as handle:
            writer = csv.writer(handle, lineterminator="\n")
            writer.writerow(self.header)

    def append(self, measurement: RunMeasurement) -> None:
        with self.path.open("a", newline="", encoding="utf8") as handle:
            writer = csv.writer(handle, lineterminator="\n")
            writer.writerow(
                [
                    _format_number(measurement.coordinate),
                    _format_number(measurement.rss_dbm),
                    _format_number(measurement.throughput_kbps),
                    "",
                ]
            )
        self.rows_written += 1


def distance_header(model_name: str) -> list[str]:
    return ["distanceMeters", "rssDBm", "throughputKbps", model_name]


RUNTIME_HEADER: tuple[str, ...] = ("runtime", "rssDBm", "throughputKbps")


__all__ = ["RUNTIME_HEADER", "ResultSink", "distance_header"]
