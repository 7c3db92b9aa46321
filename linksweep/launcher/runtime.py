"""Interfaces of the external discrete-event simulation runtime."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Protocol, Sequence

FrameCallback = Callable[[float], None]
Position = tuple[float, float, float]


@dataclass(frozen=True)
class ChannelConfig:
    """Propagation loss and delay models installed on the shared channel."""

    loss_model: str
    loss_attributes: Mapping[str, float] = field(default_factory=dict)
    delay_model: str = "ns3::ConstantSpeedPropagationDelayModel"


@dataclass(frozen=True)
class PhyConfig:
    """PHY parameters applied identically to every radio device."""

    standard: str = "80211n"
    channel_settings: str = "{0, 40, BAND_5GHZ, 0}"
    tx_power_dbm: float = 10.0
    tx_gain_db: float = 1.0
    rx_gain_db: float = 1.0


@dataclass(frozen=True)
class MacConfig:
    type_id: str = "ns3::AdhocWifiMac"
    network_base: str = "10.1.1.0"
    network_mask: str = "255.255.255.0"


@dataclass(frozen=True)
class FlowStats:
    """Counters reported for one flow at the end of a run."""

    flow_id: int
    rx_bytes: int
    tx_bytes: int = 0
    rx_packets: int = 0
    tx_packets: int = 0
    lost_packets: int = 0


class FlowStatisticsProvider(Protocol):
    def check_for_lost_packets(self) -> None: ...

    def get_flow_stats(self) -> Sequence[FlowStats]: ...

    def serialize_to_file(self, path: Path) -> None: ...


class SimulationRuntime(Protocol):
    """One single-use simulation instance: configured, run once, destroyed."""

    def create_nodes(self, count: int) -> Sequence[int]: ...

    def install_network_stack(self) -> None: ...

    def install_mobility(self, positions: Sequence[Position]) -> None: ...

    def install_radio_devices(
        self, channel: ChannelConfig, phy: PhyConfig, mac: MacConfig
    ) -> None: ...

    def install_traffic_sink(
        self, node: int, port: int, start_s: float, stop_s: float
    ) -> Any: ...

    def install_traffic_generator(
        self,
        node: int,
        destination: Any,
        port: int,
        *,
        packet_size: int,
        interval_s: float,
        max_packets: int,
        start_s: float,
        stop_s: float,
    ) -> None: ...

    def install_flow_monitor(self) -> FlowStatisticsProvider: ...

    def register_frame_received_callback(
        self, node: int, device_index: int, callback: FrameCallback
    ) -> None: ...

    def stop_at(self, time_s: float) -> None: ...

    def run(self) -> None: ...

    def destroy(self) -> None: ...


RuntimeFactory = Callable[[], SimulationRuntime]

__all__ = [
    "ChannelConfig",
    "FlowStatisticsProvider",
    "FlowStats",
    "FrameCallback",
    "MacConfig",
    "PhyConfig",
    "Position",
    "RuntimeFactory",
    "SimulationRuntime",
]
