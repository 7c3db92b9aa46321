"""Éléments partagés par les points d'entrée des balayages."""

from __future__ import annotations

import argparse
import dataclasses
import logging
from datetime import datetime
from pathlib import Path

from linksweep.launcher.config import SweepConfig, load_config
from linksweep.launcher.outcome import FlowAggregation
from linksweep.launcher.runtime import RuntimeFactory

LOGGER_NAME = "linksweep"


class _SweepContextFilter(logging.Filter):
    """Injecte des champs de contexte par défaut pour le formatage des logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key in ("sweep", "coordinate"):
            if not hasattr(record, key):
                setattr(record, key, "-")
        return True


def configure_logging(log_dir: Path | None = None, *, quiet: bool = False) -> Path | None:
    """Configure le logger du paquet : console INFO + fichier DEBUG optionnel."""

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(
        fmt="%(asctime)s | sweep=%(sweep)s | coord=%(coordinate)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    context_filter = _SweepContextFilter()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING if quiet else logging.INFO)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(context_filter)
    logger.addHandler(console_handler)

    if log_dir is None:
        return None
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"sweep_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    file_handler.addFilter(context_filter)
    logger.addHandler(file_handler)
    return log_path


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, default=None, help="Fichier YAML de configuration")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Répertoire de sortie des fichiers CSV et du flow.xml",
    )
    parser.add_argument(
        "--flow-aggregation",
        choices=[mode.value for mode in FlowAggregation],
        default=None,
        help="Une ligne par run (aggregate) ou par flux (per_flow)",
    )
    parser.add_argument("--log-dir", type=Path, default=None, help="Répertoire du journal DEBUG")
    parser.add_argument("--quiet", action="store_true", help="Réduit les impressions de progression")


def resolve_config(args: argparse.Namespace) -> SweepConfig:
    """Charge le YAML éventuel puis applique les options de ligne de commande."""

    config = load_config(args.config)
    updates: dict[str, object] = {}
    if args.output_dir is not None:
        updates["output_dir"] = args.output_dir
    if args.flow_aggregation is not None:
        updates["flow_aggregation"] = FlowAggregation(args.flow_aggregation)
    if updates:
        config = dataclasses.replace(config, **updates)
    return config


def default_runtime_factory() -> RuntimeFactory:
    from linksweep.launcher.ns3_runtime import Ns3Runtime

    return Ns3Runtime


__all__ = [
    "LOGGER_NAME",
    "add_common_arguments",
    "configure_logging",
    "default_runtime_factory",
    "resolve_config",
]
