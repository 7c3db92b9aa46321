"""Contrôleur de balayage : scénario, échantillonnage RSS, mesures, CSV."""

from .config import (
    DistanceSweepConfig,
    LinkConfig,
    RuntimeSweepConfig,
    SweepConfig,
    load_config,
)
from .outcome import FlowAggregation, RunMeasurement, extract, throughput_kbps
from .propagation import (
    DEFAULT_MODEL_ORDER,
    FixedRss,
    Friis,
    Nakagami,
    PropagationModel,
    ThreeLogDistance,
    TwoRayGround,
    UnknownPropagationModelError,
    channel_config,
    get_model,
    register_model,
)
from .result_sink import RUNTIME_HEADER, ResultSink, distance_header
from .rss_sampler import RssSampler
from .runtime import ChannelConfig, FlowStats, MacConfig, PhyConfig, SimulationRuntime
from .scenario import LinkScenario, ScenarioHandle, build_scenario
from .sweep import SweepDriver, SweepPlan, SweepState, fixed_step, until_disconnected, up_to

__all__ = [
    "ChannelConfig",
    "DEFAULT_MODEL_ORDER",
    "DistanceSweepConfig",
    "FixedRss",
    "FlowAggregation",
    "FlowStats",
    "Friis",
    "LinkConfig",
    "LinkScenario",
    "MacConfig",
    "Nakagami",
    "PhyConfig",
    "PropagationModel",
    "RUNTIME_HEADER",
    "ResultSink",
    "RssSampler",
    "RunMeasurement",
    "RuntimeSweepConfig",
    "ScenarioHandle",
    "SimulationRuntime",
    "SweepConfig",
    "SweepDriver",
    "SweepPlan",
    "SweepState",
    "ThreeLogDistance",
    "TwoRayGround",
    "UnknownPropagationModelError",
    "build_scenario",
    "channel_config",
    "distance_header",
    "extract",
    "fixed_step",
    "get_model",
    "load_config",
    "register_model",
    "throughput_kbps",
    "until_disconnected",
    "up_to",
]
