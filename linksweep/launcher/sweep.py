"""Pilote de balayage générique et politique d'arrêt.

Un balayage enchaîne des runs strictement séquentiels. Chaque run construit
son propre runtime, l'exécute jusqu'au temps d'arrêt, extrait la mesure,
l'ajoute au CSV puis détruit le runtime avant que le suivant ne commence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from .outcome import FlowAggregation, RunMeasurement, extract
from .result_sink import ResultSink
from .rss_sampler import RssSampler
from .runtime import RuntimeFactory
from .scenario import LinkScenario, build_scenario

logger = logging.getLogger(__name__)

COORDINATE_DECIMALS = 9

ContinuationPredicate = Callable[["SweepState", Sequence[RunMeasurement]], bool]


@dataclass
class SweepState:
    """État mutable d'un balayage en cours."""

    name: str
    coordinate: float
    output_path: Path
    connection_possible: bool = True
    runs: int = 0
    measurements: list[RunMeasurement] = field(default_factory=list)


@dataclass(frozen=True)
class SweepPlan:
    """Configuration of one sweep.

    ``scenario_for`` maps a coordinate to the scenario of that run,
    ``advance`` maps ``start`` and a run index to that run's coordinate and
    ``should_continue`` decides, after the run has been recorded, whether
    another run follows.
    """

    name: str
    header: Sequence[str]
    output_path: Path
    start: float
    scenario_for: Callable[[float], LinkScenario]
    advance: Callable[[float, int], float]
    should_continue: ContinuationPredicate


def fixed_step(step: float) -> Callable[[float, int], float]:
    """Coordonnée ``start + index * step``, arrondie à ``COORDINATE_DECIMALS``."""

    def _advance(start: float, index: int) -> float:
        return round(start + index * step, COORDINATE_DECIMALS)

    return _advance


def until_disconnected(
    forced_stop: float | None = None,
    max_coordinate: float | None = None,
) -> ContinuationPredicate:
    """Continue tant que le dernier run a reçu des octets.

    ``forced_stop`` arrête le balayage dès que la coordonnée l'atteint, même si
    le lien reste établi. ``max_coordinate`` est une borne de sécurité.
    """

    def _predicate(state: SweepState, measurements: Sequence[RunMeasurement]) -> bool:
        if not state.connection_possible:
            return False
        if forced_stop is not None and state.coordinate >= forced_stop:
            logger.info(
                "Arrêt forcé à %s (seuil %s)",
                state.coordinate,
                forced_stop,
                extra={"sweep": state.name, "coordinate": state.coordinate},
            )
            return False
        if max_coordinate is not None and state.coordinate >= max_coordinate:
            return False
        return True

    return _predicate


def up_to(max_coordinate: float) -> ContinuationPredicate:
    """Parcourt toutes les coordonnées jusqu'à ``max_coordinate`` inclus.

    The connectivity flag is still tracked in the state but never ends the
    sweep early.
    """

    def _predicate(state: SweepState, measurements: Sequence[RunMeasurement]) -> bool:
        return state.coordinate < max_coordinate

    return _predicate


class SweepDriver:
    """Runs sweep plans against fresh simulation runtimes."""

    def __init__(
        self,
        runtime_factory: RuntimeFactory,
        *,
        flow_aggregation: FlowAggregation = FlowAggregation.AGGREGATE,
        flow_xml_path: Path | None = None,
    ) -> None:
        self.runtime_factory = runtime_factory
        self.flow_aggregation = FlowAggregation(flow_aggregation)
        self.flow_xml_path = flow_xml_path

    def execute_run(self, scenario: LinkScenario, coordinate: float) -> list[RunMeasurement]:
        """Build, simulate and measure one scenario, then tear it down."""

        runtime = self.runtime_factory()
        sampler = RssSampler()
        try:
            handle = build_scenario(runtime, scenario, sampler.record)
            sampler.reset()
            runtime.stop_at(scenario.duration_s)
            runtime.run()

            monitor = handle.flow_monitor
            monitor.check_for_lost_packets()
            if self.flow_xml_path is not None:
                monitor.serialize_to_file(self.flow_xml_path)
            flow_stats = list(monitor.get_flow_stats())
        finally:
            runtime.destroy()

        return extract(
            flow_stats,
            scenario.duration_s,
            sampler.current_estimate(),
            coordinate,
            self.flow_aggregation,
        )

    def run(self, plan: SweepPlan) -> SweepState:
        sink = ResultSink(plan.output_path, plan.header)
        sink.write_header()
        state = SweepState(name=plan.name, coordinate=plan.start, output_path=sink.path)
        logger.info("Démarrage du balayage %s", plan.name, extra={"sweep": plan.name})

        while True:
            context = {"sweep": plan.name, "coordinate": state.coordinate}
            logger.info("Run pour la coordonnée %s", state.coordinate, extra=context)
            measurements = self.execute_run(plan.scenario_for(state.coordinate), state.coordinate)
            for measurement in measurements:
                logger.info(
                    "RSS : %s dBm, débit : %s Kbps",
                    measurement.rss_dbm,
                    measurement.throughput_kbps,
                    extra=context,
                )
                sink.append(measurement)
                if not measurement.received_any_bytes:
                    state.connection_possible = False
            state.measurements.extend(measurements)
            state.runs += 1

            if not plan.should_continue(state, measurements):
                break
            state.coordinate = plan.advance(plan.start, state.runs)

        logger.info(
            "Fin du balayage %s après %d runs",
            plan.name,
            state.runs,
            extra={"sweep": plan.name, "coordinate": state.coordinate},
        )
        return state


__all__ = [
    "ContinuationPredicate",
    "SweepDriver",
    "SweepPlan",
    "SweepState",
    "fixed_step",
    "until_disconnected",
    "up_to",
]
