"""Configuration des balayages (valeurs par défaut et chargement YAML)."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from .outcome import FlowAggregation
from .propagation import DEFAULT_MODEL_ORDER, get_model

DEFAULT_OUTPUT_DIR = Path("results")


@dataclass(frozen=True)
class LinkConfig:
    """Paramètres du lien communs aux deux balayages."""

    antenna_height_m: float = 1.5
    tx_power_dbm: float = 10.0
    tx_gain_db: float = 1.0
    rx_gain_db: float = 1.0
    packet_size_bytes: int = 1450
    data_rate_bps: float = 75e6
    port: int = 9
    server_start_s: float = 1.0
    client_start_s: float = 2.0


@dataclass(frozen=True)
class DistanceSweepConfig:
    """Paramètres du balayage en distance."""

    models: Sequence[str] = DEFAULT_MODEL_ORDER
    duration_s: float = 50.0
    start_m: float = 1
    step_m: float = 1
    # Borne de sécurité optionnelle, absente des campagnes historiques.
    max_distance_m: float | None = None


@dataclass(frozen=True)
class RuntimeSweepConfig:
    """Paramètres du balayage en durée d'observation."""

    model: str = "Friis"
    distance_m: float = 10.0
    start_s: float = 1
    step_s: float = 1
    max_s: float = 200


@dataclass(frozen=True)
class SweepConfig:
    link: LinkConfig = field(default_factory=LinkConfig)
    distance_sweep: DistanceSweepConfig = field(default_factory=DistanceSweepConfig)
    runtime_sweep: RuntimeSweepConfig = field(default_factory=RuntimeSweepConfig)
    output_dir: Path = DEFAULT_OUTPUT_DIR
    flow_aggregation: FlowAggregation = FlowAggregation.AGGREGATE


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Charge un fichier YAML et retourne son contenu."""

    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: un mapping YAML est attendu à la racine")
    return data


def _replace_section(section: Any, values: Mapping[str, Any], label: str) -> Any:
    if not isinstance(values, Mapping):
        raise ValueError(f"Section {label!r} : un mapping est attendu")
    known = {item.name for item in dataclasses.fields(section)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Clés inconnues dans {label!r} : {', '.join(unknown)}")
    updates = dict(values)
    if "models" in updates:
        updates["models"] = tuple(str(name) for name in updates["models"])
    return dataclasses.replace(section, **updates)


def validate_config(config: SweepConfig) -> SweepConfig:
    """Vérifie la cohérence des paramètres et retourne ``config``."""

    link = config.link
    if link.packet_size_bytes <= 0:
        raise ValueError("packet_size_bytes doit être strictement positif")
    if link.data_rate_bps <= 0:
        raise ValueError("data_rate_bps doit être strictement positif")
    distance = config.distance_sweep
    if distance.duration_s <= 0:
        raise ValueError("distance_sweep.duration_s doit être strictement positif")
    if distance.step_m <= 0:
        raise ValueError("distance_sweep.step_m doit être strictement positif")
    if distance.max_distance_m is not None and distance.max_distance_m < distance.start_m:
        raise ValueError("distance_sweep.max_distance_m doit être supérieur ou égal à start_m")
    if not distance.models:
        raise ValueError("distance_sweep.models ne peut pas être vide")
    for name in distance.models:
        get_model(name)
    runtime = config.runtime_sweep
    if runtime.step_s <= 0:
        raise ValueError("runtime_sweep.step_s doit être strictement positif")
    if runtime.start_s <= 0:
        raise ValueError("runtime_sweep.start_s doit être strictement positif")
    if runtime.max_s < runtime.start_s:
        raise ValueError("runtime_sweep.max_s doit être supérieur ou égal à start_s")
    get_model(runtime.model)
    return config


def load_config(path: str | Path | None = None) -> SweepConfig:
    """Construit la configuration, éventuellement surchargée par un YAML.

    Le fichier peut contenir les sections ``link``, ``distance_sweep`` et
    ``runtime_sweep`` ainsi que les clés ``output_dir`` et
    ``flow_aggregation``.
    """

    config = SweepConfig()
    if path is None:
        return validate_config(config)
    data = load_yaml(path)
    sections = {"link", "distance_sweep", "runtime_sweep"}
    scalars = {"output_dir", "flow_aggregation"}
    unknown = sorted(set(data) - sections - scalars)
    if unknown:
        raise ValueError(f"Sections inconnues dans {path} : {', '.join(unknown)}")
    updates: dict[str, Any] = {}
    for name in sections & set(data):
        updates[name] = _replace_section(getattr(config, name), data[name] or {}, name)
    if "output_dir" in data:
        updates["output_dir"] = Path(data["output_dir"])
    if "flow_aggregation" in data:
        updates["flow_aggregation"] = FlowAggregation(data["flow_aggregation"])
    return validate_config(dataclasses.replace(config, **updates))


__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "DistanceSweepConfig",
    "LinkConfig",
    "RuntimeSweepConfig",
    "SweepConfig",
    "load_config",
    "load_yaml",
    "validate_config",
]
