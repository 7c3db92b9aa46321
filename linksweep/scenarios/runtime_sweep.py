"""Balayage en durée d'observation pour un modèle et une distance fixes.

La durée part de 1 s et augmente d'un pas fixe jusqu'à 200 s inclus, sans
arrêt anticipé : la perte de connectivité est suivie mais ne termine pas le
balayage. Les résultats sont écrits dans ``output_runtime.csv``.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging

from linksweep.launcher.config import SweepConfig, validate_config
from linksweep.launcher.propagation import get_model
from linksweep.launcher.result_sink import RUNTIME_HEADER
from linksweep.launcher.runtime import RuntimeFactory
from linksweep.launcher.scenario import LinkScenario
from linksweep.launcher.sweep import SweepDriver, SweepPlan, SweepState, fixed_step, up_to

from .common import add_common_arguments, configure_logging, default_runtime_factory, resolve_config

logger = logging.getLogger(__name__)

OUTPUT_FILENAME = "output_runtime.csv"


def build_plan(config: SweepConfig) -> SweepPlan:
    sweep = config.runtime_sweep
    model = get_model(sweep.model)

    def scenario_for(duration_s: float) -> LinkScenario:
        return LinkScenario.from_link(config.link, model, sweep.distance_m, duration_s)

    return SweepPlan(
        name="runtime",
        header=RUNTIME_HEADER,
        output_path=config.output_dir / OUTPUT_FILENAME,
        start=sweep.start_s,
        scenario_for=scenario_for,
        advance=fixed_step(sweep.step_s),
        should_continue=up_to(sweep.max_s),
    )


def run_runtime_sweep(config: SweepConfig, runtime_factory: RuntimeFactory) -> SweepState:
    driver = SweepDriver(
        runtime_factory,
        flow_aggregation=config.flow_aggregation,
        flow_xml_path=config.output_dir / "flow.xml",
    )
    state = driver.run(build_plan(config))
    if not state.connection_possible:
        logger.warning(
            "Au moins un run sans octet reçu ; le balayage en durée a tout de même été mené à terme",
            extra={"sweep": "runtime"},
        )
    return state


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    add_common_arguments(parser)
    parser.add_argument(
        "--max-runtime",
        type=float,
        default=None,
        help="Durée maximale balayée en secondes (200 par défaut)",
    )
    return parser


def main(argv: list[str] | None = None, runtime_factory: RuntimeFactory | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_dir, quiet=args.quiet)

    config = resolve_config(args)
    if args.max_runtime is not None:
        config = dataclasses.replace(
            config,
            runtime_sweep=dataclasses.replace(config.runtime_sweep, max_s=args.max_runtime),
        )
    validate_config(config)

    factory = runtime_factory or default_runtime_factory()
    state = run_runtime_sweep(config, factory)
    if not args.quiet:
        print(f"runtime: {state.runs} runs -> {state.output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
