"""Configurations de balayage : distance et durée d'observation."""

from .distance_sweep import run_distance_sweep
from .runtime_sweep import run_runtime_sweep

__all__ = ["run_distance_sweep", "run_runtime_sweep"]
