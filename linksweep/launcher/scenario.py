"""Construction d'un scénario à deux nœuds (émetteur, récepteur)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .config import LinkConfig
from .propagation import PropagationModel, channel_config
from .runtime import (
    FlowStatisticsProvider,
    FrameCallback,
    MacConfig,
    PhyConfig,
    SimulationRuntime,
)

logger = logging.getLogger(__name__)

SERVER_NODE = 0
CLIENT_NODE = 1
# Device 0 is the loopback interface, the Wi-Fi device comes next.
RADIO_DEVICE_INDEX = 1


@dataclass(frozen=True)
class LinkScenario:
    """Complete description of one simulated run."""

    model: PropagationModel
    distance_m: float
    duration_s: float
    antenna_height_m: float = 1.5
    tx_power_dbm: float = 10.0
    tx_gain_db: float = 1.0
    rx_gain_db: float = 1.0
    packet_size_bytes: int = 1450
    data_rate_bps: float = 75e6
    port: int = 9
    server_start_s: float = 1.0
    client_start_s: float = 2.0

    @classmethod
    def from_link(
        cls,
        link: LinkConfig,
        model: PropagationModel,
        distance_m: float,
        duration_s: float,
    ) -> "LinkScenario":
        return cls(
            model=model,
            distance_m=distance_m,
            duration_s=duration_s,
            antenna_height_m=link.antenna_height_m,
            tx_power_dbm=link.tx_power_dbm,
            tx_gain_db=link.tx_gain_db,
            rx_gain_db=link.rx_gain_db,
            packet_size_bytes=link.packet_size_bytes,
            data_rate_bps=link.data_rate_bps,
            port=link.port,
            server_start_s=link.server_start_s,
            client_start_s=link.client_start_s,
        )

    @property
    def interval_s(self) -> float:
        """Délai entre deux paquets pour tenir le débit cible."""

        return 1 / (self.data_rate_bps / (self.packet_size_bytes * 8))

    @property
    def packet_limit(self) -> int:
        """Nombre maximal de paquets que la durée du run permet d'émettre."""

        return int(self.duration_s / self.interval_s)

    def positions(self) -> list[tuple[float, float, float]]:
        z = self.antenna_height_m
        return [(0.0, 0.0, z), (float(self.distance_m), 0.0, z)]

    def phy_config(self) -> PhyConfig:
        return PhyConfig(
            tx_power_dbm=self.tx_power_dbm,
            tx_gain_db=self.tx_gain_db,
            rx_gain_db=self.rx_gain_db,
        )


@dataclass
class ScenarioHandle:
    """Objets du runtime nécessaires après l'installation du scénario."""

    scenario: LinkScenario
    runtime: SimulationRuntime
    server_address: Any
    flow_monitor: FlowStatisticsProvider


def build_scenario(
    runtime: SimulationRuntime,
    scenario: LinkScenario,
    on_frame_received: FrameCallback,
) -> ScenarioHandle:
    """Installe ``scenario`` dans ``runtime`` et branche ``on_frame_received``.

    Parameters are not validated here: a non-positive distance or duration is
    the caller's responsibility.
    """

    runtime.create_nodes(2)
    runtime.install_network_stack()
    runtime.install_mobility(scenario.positions())
    runtime.install_radio_devices(
        channel_config(scenario.model, scenario.antenna_height_m),
        scenario.phy_config(),
        MacConfig(),
    )

    server_address = runtime.install_traffic_sink(
        SERVER_NODE, scenario.port, scenario.server_start_s, scenario.duration_s
    )
    runtime.install_traffic_generator(
        CLIENT_NODE,
        server_address,
        scenario.port,
        packet_size=scenario.packet_size_bytes,
        interval_s=scenario.interval_s,
        max_packets=scenario.packet_limit,
        start_s=scenario.client_start_s,
        stop_s=scenario.duration_s,
    )
    flow_monitor = runtime.install_flow_monitor()
    runtime.register_frame_received_callback(
        SERVER_NODE, RADIO_DEVICE_INDEX, on_frame_received
    )
    logger.debug(
        "Scénario %s installé : d=%s m, durée=%s s, %d paquets max toutes les %.3e s",
        scenario.model.name,
        scenario.distance_m,
        scenario.duration_s,
        scenario.packet_limit,
        scenario.interval_s,
    )
    return ScenarioHandle(
        scenario=scenario,
        runtime=runtime,
        server_address=server_address,
        flow_monitor=flow_monitor,
    )


__all__ = [
    "CLIENT_NODE",
    "LinkScenario",
    "RADIO_DEVICE_INDEX",
    "SERVER_NODE",
    "ScenarioHandle",
    "build_scenario",
]
