"""Modèles de perte de propagation comparés par les balayages.

Chaque variante est une dataclass figée portant ses propres paramètres. Les
valeurs par défaut reproduisent exactement la configuration historique des
campagnes afin que les jeux de données restent comparables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from .runtime import ChannelConfig


class UnknownPropagationModelError(ValueError):
    """Erreur levée pour un identifiant de modèle de propagation inconnu."""


@dataclass(frozen=True)
class Friis:
    frequency_hz: float = 5.18e9
    system_loss: float = 1.0

    name: ClassVar[str] = "Friis"
    type_id: ClassVar[str] = "ns3::FriisPropagationLossModel"
    forced_stop_distance_m: ClassVar[float | None] = None

    def loss_attributes(self, antenna_height_m: float) -> dict[str, float]:
        return {"Frequency": self.frequency_hz, "SystemLoss": self.system_loss}


@dataclass(frozen=True)
class FixedRss:
    """Puissance reçue constante, indépendante de la distance."""

    rss_dbm: float = -75.0

    name: ClassVar[str] = "FixedRSS"
    type_id: ClassVar[str] = "ns3::FixedRssLossModel"
    # The link never degrades with distance, so the sweep needs a bound.
    forced_stop_distance_m: ClassVar[float | None] = 500.0

    def loss_attributes(self, antenna_height_m: float) -> dict[str, float]:
        return {"Rss": self.rss_dbm}


@dataclass(frozen=True)
class ThreeLogDistance:
    distance0_m: float = 1.0
    distance1_m: float = 100.0
    distance2_m: float = 500.0
    reference_loss_db: float = 46.77

    name: ClassVar[str] = "ThreeLogDistance"
    type_id: ClassVar[str] = "ns3::ThreeLogDistancePropagationLossModel"
    forced_stop_distance_m: ClassVar[float | None] = None

    def loss_attributes(self, antenna_height_m: float) -> dict[str, float]:
        return {
            "Distance0": self.distance0_m,
            "Distance1": self.distance1_m,
            "Distance2": self.distance2_m,
            "ReferenceLoss": self.reference_loss_db,
        }


@dataclass(frozen=True)
class TwoRayGround:
    """Two-ray ground reflection model.

    ``height_above_z_m`` defaults to the antenna height of the scenario when
    left to ``None``.
    """

    frequency_hz: float = 5.18e9
    min_distance_m: float = 0.5
    system_loss: float = 1.0
    height_above_z_m: float | None = None

    name: ClassVar[str] = "TwoRayGround"
    type_id: ClassVar[str] = "ns3::TwoRayGroundPropagationLossModel"
    forced_stop_distance_m: ClassVar[float | None] = None

    def loss_attributes(self, antenna_height_m: float) -> dict[str, float]:
        height = self.height_above_z_m
        if height is None:
            height = antenna_height_m
        return {
            "Frequency": self.frequency_hz,
            "MinDistance": self.min_distance_m,
            "SystemLoss": self.system_loss,
            "HeightAboveZ": height,
        }


@dataclass(frozen=True)
class Nakagami:
    distance1_m: float = 80.0
    distance2_m: float = 200.0
    m0: float = 1.5
    m1: float = 0.75
    m2: float = 0.75

    name: ClassVar[str] = "Nakagami"
    type_id: ClassVar[str] = "ns3::NakagamiPropagationLossModel"
    # Fading alone does not guarantee a disconnection.
    forced_stop_distance_m: ClassVar[float | None] = 500.0

    def loss_attributes(self, antenna_height_m: float) -> dict[str, float]:
        return {
            "Distance1": self.distance1_m,
            "Distance2": self.distance2_m,
            "m0": self.m0,
            "m1": self.m1,
            "m2": self.m2,
        }


PropagationModel = Union[Friis, FixedRss, ThreeLogDistance, TwoRayGround, Nakagami]

_VARIANTS: tuple[type, ...] = (Friis, FixedRss, ThreeLogDistance, TwoRayGround, Nakagami)

# Ordre historique des campagnes de distance.
DEFAULT_MODEL_ORDER: tuple[str, ...] = tuple(variant.name for variant in _VARIANTS)

MODELS: dict[str, PropagationModel] = {
    variant.name.lower(): variant() for variant in _VARIANTS
}

_ALIASES: dict[str, str] = {
    "fixed_rss": "fixedrss",
    "fixed-rss": "fixedrss",
    "three_log_distance": "threelogdistance",
    "three-log-distance": "threelogdistance",
    "3logdistance": "threelogdistance",
    "two_ray_ground": "tworayground",
    "two-ray-ground": "tworayground",
    "tworay": "tworayground",
}


def register_model(model: PropagationModel) -> None:
    """Register (or replace) the parameterisation used for ``model.name``."""

    if not isinstance(model, _VARIANTS):
        raise TypeError(f"Modèle de propagation non supporté : {model!r}")
    MODELS[model.name.lower()] = model


def get_model(name: str) -> PropagationModel:
    """Retourne le modèle enregistré sous ``name`` (insensible à la casse)."""

    key = str(name).strip().lower()
    key = _ALIASES.get(key, key)
    if key not in MODELS:
        known = ", ".join(DEFAULT_MODEL_ORDER)
        raise UnknownPropagationModelError(
            f"Modèle de propagation inconnu : {name!r} (attendu : {known})"
        )
    return MODELS[key]


def channel_config(model: PropagationModel, antenna_height_m: float) -> ChannelConfig:
    """Traduit un modèle en configuration de canal pour le runtime."""

    if not isinstance(model, _VARIANTS):
        raise TypeError(f"Modèle de propagation non supporté : {model!r}")
    return ChannelConfig(
        loss_model=model.type_id,
        loss_attributes=model.loss_attributes(antenna_height_m),
    )


__all__ = [
    "DEFAULT_MODEL_ORDER",
    "FixedRss",
    "Friis",
    "MODELS",
    "Nakagami",
    "PropagationModel",
    "ThreeLogDistance",
    "TwoRayGround",
    "UnknownPropagationModelError",
    "channel_config",
    "get_model",
    "register_model",
]
