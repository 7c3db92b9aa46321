"""Extraction des mesures (RSS, débit) à la fin d'un run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from .runtime import FlowStats


class FlowAggregation(str, Enum):
    """Traitement des runs rapportant plusieurs flux."""

    AGGREGATE = "aggregate"
    PER_FLOW = "per_flow"


@dataclass(frozen=True)
class RunMeasurement:
    """Result of one run, as appended to the output dataset."""

    coordinate: float
    rss_dbm: float
    throughput_kbps: float
    received_any_bytes: bool
    rx_bytes: int = 0
    flow_id: int | None = None


def throughput_kbps(rx_bytes: int, duration_s: float) -> float:
    """Return ``rx_bytes * 8 / duration_s / 1024``."""

    return rx_bytes * 8.0 / duration_s / 1024


def extract(
    flow_stats: Sequence[FlowStats],
    duration_s: float,
    rss_estimate: float,
    coordinate: float,
    aggregation: FlowAggregation = FlowAggregation.AGGREGATE,
) -> list[RunMeasurement]:
    """Construit les mesures d'un run terminé.

    En mode agrégé, les octets reçus de tous les flux sont sommés et une seule
    mesure est produite. En mode par flux, chaque entrée du fournisseur de
    statistiques produit sa propre ligne. Un run sans aucune entrée de flux
    donne une mesure à zéro octet, le RSS restant renseigné.
    """

    aggregation = FlowAggregation(aggregation)
    if not flow_stats or aggregation is FlowAggregation.AGGREGATE:
        total = sum(int(stats.rx_bytes) for stats in flow_stats)
        return [
            RunMeasurement(
                coordinate=coordinate,
                rss_dbm=rss_estimate,
                throughput_kbps=throughput_kbps(total, duration_s),
                received_any_bytes=total > 0,
                rx_bytes=total,
            )
        ]
    return [
        RunMeasurement(
            coordinate=coordinate,
            rss_dbm=rss_estimate,
            throughput_kbps=throughput_kbps(int(stats.rx_bytes), duration_s),
            received_any_bytes=stats.rx_bytes > 0,
            rx_bytes=int(stats.rx_bytes),
            flow_id=stats.flow_id,
        )
        for stats in flow_stats
    ]


__all__ = ["FlowAggregation", "RunMeasurement", "extract", "throughput_kbps"]
