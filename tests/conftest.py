import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from typing import Callable

import pytest

# Ensure the project root is on the module search path when the package is not
# installed. This allows ``import linksweep`` and ``import scripts`` to succeed
# during test collection without requiring an editable installation.
ROOT_DIR = os.path.dirname(os.path.dirname(__file__))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from linksweep.launcher.runtime import FlowStats  # noqa: E402

# (loss model type id, distance, duration) -> (rx bytes per flow, signal levels)
LinkTable = Callable[[str, float, float], tuple[list[int], list[float]]]


class FakeFlowMonitor:
    def __init__(self, runtime: "FakeRuntime") -> None:
        self.runtime = runtime
        self.lost_checked = False
        self.serialized_to = []

    def check_for_lost_packets(self) -> None:
        self.lost_checked = True

    def get_flow_stats(self):
        if not self.runtime.has_run:
            raise AssertionError("flow stats read before the run completed")
        return [
            FlowStats(flow_id=index + 1, rx_bytes=rx_bytes, tx_bytes=rx_bytes)
            for index, rx_bytes in enumerate(self.runtime.rx_bytes)
        ]

    def serialize_to_file(self, path) -> None:
        path.write_text(f"<FlowMonitor flows='{len(self.runtime.rx_bytes)}'/>", encoding="utf8")
        self.serialized_to.append(path)


class FakeRuntime:
    """Deterministic in-memory runtime following the SimulationRuntime protocol."""

    def __init__(self, link_table: LinkTable, history: list) -> None:
        self.link_table = link_table
        self.calls: list[tuple] = []
        self.positions = None
        self.channel = None
        self.phy = None
        self.mac = None
        self.sink = None
        self.generator = None
        self.callback = None
        self.stop_time = None
        self.rx_bytes: list[int] = []
        self.has_run = False
        self.destroyed = False
        history.append(self)

    def create_nodes(self, count):
        self.calls.append(("create_nodes", count))
        return list(range(count))

    def install_network_stack(self):
        self.calls.append(("install_network_stack",))

    def install_mobility(self, positions):
        self.calls.append(("install_mobility",))
        self.positions = list(positions)

    def install_radio_devices(self, channel, phy, mac):
        self.calls.append(("install_radio_devices",))
        self.channel, self.phy, self.mac = channel, phy, mac

    def install_traffic_sink(self, node, port, start_s, stop_s):
        self.calls.append(("install_traffic_sink",))
        self.sink = {"node": node, "port": port, "start_s": start_s, "stop_s": stop_s}
        return "10.1.1.1"

    def install_traffic_generator(self, node, destination, port, **kwargs):
        self.calls.append(("install_traffic_generator",))
        self.generator = {"node": node, "destination": destination, "port": port, **kwargs}

    def install_flow_monitor(self):
        self.calls.append(("install_flow_monitor",))
        self.monitor = FakeFlowMonitor(self)
        return self.monitor

    def register_frame_received_callback(self, node, device_index, callback):
        self.calls.append(("register_frame_received_callback", node, device_index))
        self.callback = callback

    def stop_at(self, time_s):
        self.calls.append(("stop_at", time_s))
        self.stop_time = time_s

    def run(self):
        self.calls.append(("run",))
        distance = self.positions[1][0]
        rx_bytes, signals = self.link_table(self.channel.loss_model, distance, self.stop_time)
        for signal in signals:
            self.callback(signal)
        self.rx_bytes = list(rx_bytes)
        self.has_run = True

    def destroy(self):
        self.calls.append(("destroy",))
        self.destroyed = True


@dataclass
class FakeRuntimeFactory:
    link_table: LinkTable
    history: list = field(default_factory=list)

    def __call__(self) -> FakeRuntime:
        return FakeRuntime(self.link_table, self.history)


def range_limited_link(max_distance: float, rx_bytes: int = 14_500_000) -> LinkTable:
    """Link that delivers ``rx_bytes`` up to ``max_distance`` then nothing."""

    def _table(loss_model, distance, duration):
        if distance <= max_distance:
            return [rx_bytes], [-40.0 - distance, -40.0 - distance]
        return [0], [-95.0]

    return _table


@pytest.fixture
def fake_runtime_factory():
    def _make(link_table: LinkTable) -> FakeRuntimeFactory:
        return FakeRuntimeFactory(link_table)

    return _make


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("linksweep")
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture(autouse=True)
def _cleanup_tmp_path(tmp_path):
    """Remove temporary files created during tests."""
    yield
    for path in tmp_path.iterdir():
        if path.is_dir():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink()


@pytest.fixture
def range_limited():
    return range_limited_link
