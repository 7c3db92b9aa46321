"""Balayage en distance : RSS et débit pour chaque modèle de propagation.

Pour chaque modèle, la distance part de 1 m et augmente d'un pas fixe
jusqu'au premier run sans octet reçu (ce run est enregistré). FixedRSS et
Nakagami s'arrêtent en plus à 500 m. Chaque modèle écrit son propre fichier
``output_<modèle>.csv``.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path

from linksweep.launcher.config import SweepConfig, validate_config
from linksweep.launcher.propagation import PropagationModel, get_model
from linksweep.launcher.result_sink import distance_header
from linksweep.launcher.runtime import RuntimeFactory
from linksweep.launcher.scenario import LinkScenario
from linksweep.launcher.sweep import SweepDriver, SweepPlan, SweepState, fixed_step, until_disconnected

from .common import add_common_arguments, configure_logging, default_runtime_factory, resolve_config

logger = logging.getLogger(__name__)


def output_path_for(output_dir: Path, model: PropagationModel) -> Path:
    return output_dir / f"output_{model.name}.csv"


def build_plan(config: SweepConfig, model: PropagationModel) -> SweepPlan:
    sweep = config.distance_sweep

    def scenario_for(distance_m: float) -> LinkScenario:
        return LinkScenario.from_link(config.link, model, distance_m, sweep.duration_s)

    return SweepPlan(
        name=model.name,
        header=distance_header(model.name),
        output_path=output_path_for(config.output_dir, model),
        start=sweep.start_m,
        scenario_for=scenario_for,
        advance=fixed_step(sweep.step_m),
        should_continue=until_disconnected(
            forced_stop=model.forced_stop_distance_m,
            max_coordinate=sweep.max_distance_m,
        ),
    )


def run_distance_sweep(
    config: SweepConfig,
    runtime_factory: RuntimeFactory,
) -> dict[str, SweepState]:
    """Exécute le balayage pour chaque modèle configuré, dans l'ordre."""

    driver = SweepDriver(
        runtime_factory,
        flow_aggregation=config.flow_aggregation,
        flow_xml_path=config.output_dir / "flow.xml",
    )
    results: dict[str, SweepState] = {}
    for name in config.distance_sweep.models:
        model = get_model(name)
        logger.info("Exécution avec le modèle %s", model.name, extra={"sweep": model.name})
        results[model.name] = driver.run(build_plan(config, model))
    return results


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    add_common_arguments(parser)
    parser.add_argument(
        "--models",
        nargs="+",
        default=None,
        help="Modèles à examiner (Friis, FixedRSS, ThreeLogDistance, TwoRayGround, Nakagami)",
    )
    return parser


def main(argv: list[str] | None = None, runtime_factory: RuntimeFactory | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_dir, quiet=args.quiet)

    config = resolve_config(args)
    if args.models:
        config = dataclasses.replace(
            config,
            distance_sweep=dataclasses.replace(config.distance_sweep, models=tuple(args.models)),
        )
    validate_config(config)

    factory = runtime_factory or default_runtime_factory()
    results = run_distance_sweep(config, factory)
    if not args.quiet:
        for name, state in results.items():
            print(f"{name}: {state.runs} runs -> {state.output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
