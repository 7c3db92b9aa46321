"""Adaptateur du runtime de simulation vers les bindings Python de ns-3.

Les bindings (paquet ``ns3``, module ``ns``) sont importés à la construction
du premier runtime afin que le reste du paquet reste utilisable sans ns-3.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

from .runtime import (
    ChannelConfig,
    FlowStats,
    FrameCallback,
    MacConfig,
    PhyConfig,
    Position,
)

logger = logging.getLogger(__name__)

_MONITOR_SNIFFER_RX_PATH = (
    "/NodeList/{node}/DeviceList/{device}/$ns3::WifiNetDevice/Phy/MonitorSnifferRx"
)

# MonitorSnifferRx only accepts a C++ callback with the full trace signature;
# this trampoline forwards the reported signal level to a Python callable.
_TRAMPOLINE_SOURCE = """
#include "ns3/wifi-module.h"
#include <functional>

namespace linksweep
{
std::function<void(double)> g_frameSink;

void
MonitorSnifferRxTrampoline(ns3::Ptr<const ns3::Packet> packet,
                           uint16_t channelFreqMhz,
                           ns3::WifiTxVector txVector,
                           ns3::MpduInfo aMpdu,
                           ns3::SignalNoiseDbm signalNoise,
                           uint16_t staId)
{
    if (g_frameSink)
    {
        g_frameSink(signalNoise.signal);
    }
}

ns3::Callback<void,
              ns3::Ptr<const ns3::Packet>,
              uint16_t,
              ns3::WifiTxVector,
              ns3::MpduInfo,
              ns3::SignalNoiseDbm,
              uint16_t>
MakeMonitorSnifferRxCallback()
{
    return ns3::MakeCallback(&MonitorSnifferRxTrampoline);
}

void
SetFrameSink(std::function<void(double)> sink)
{
    g_frameSink = sink;
}

void
ClearFrameSink()
{
    g_frameSink = nullptr;
}
} // namespace linksweep
"""

_ns = None


def _load_ns():
    """Importe les bindings ns-3 une seule fois et prépare le trampoline."""

    global _ns
    if _ns is None:
        from ns import ns

        ns.Time.SetResolution(ns.Time.NS)
        ns.cppyy.cppdef(_TRAMPOLINE_SOURCE)
        _ns = ns
    return _ns


class Ns3FlowMonitor:
    """FlowMonitor vu comme fournisseur de statistiques de flux."""

    def __init__(self, helper: Any, monitor: Any) -> None:
        self._helper = helper
        self._monitor = monitor

    def check_for_lost_packets(self) -> None:
        self._monitor.CheckForLostPackets()

    def get_flow_stats(self) -> list[FlowStats]:
        flows = []
        for entry in self._monitor.GetFlowStats():
            stats = entry.second
            flows.append(
                FlowStats(
                    flow_id=int(entry.first),
                    rx_bytes=int(stats.rxBytes),
                    tx_bytes=int(stats.txBytes),
                    rx_packets=int(stats.rxPackets),
                    tx_packets=int(stats.txPackets),
                    lost_packets=int(stats.lostPackets),
                )
            )
        return flows

    def serialize_to_file(self, path: Path) -> None:
        self._monitor.SerializeToXmlFile(str(path), True, True)


class Ns3Runtime:
    """Single-use ns-3 simulation: Wi-Fi ad hoc nodes with UDP traffic."""

    def __init__(self) -> None:
        self.ns = _load_ns()
        self._nodes = None
        self._interfaces: list[Any] = []
        # Helpers and applications must outlive the installation calls.
        self._keep_alive: list[Any] = []

    def create_nodes(self, count: int) -> Sequence[int]:
        ns = self.ns
        self._nodes = ns.NodeContainer()
        self._nodes.Create(count)
        return list(range(count))

    def install_network_stack(self) -> None:
        stack = self.ns.InternetStackHelper()
        stack.Install(self._nodes)
        self._keep_alive.append(stack)

    def install_mobility(self, positions: Sequence[Position]) -> None:
        ns = self.ns
        allocator = ns.CreateObject[ns.ListPositionAllocator]()
        for x, y, z in positions:
            allocator.Add(ns.Vector(x, y, z))
        mobility = ns.MobilityHelper()
        mobility.SetPositionAllocator(allocator)
        mobility.SetMobilityModel("ns3::ConstantPositionMobilityModel")
        mobility.Install(self._nodes)
        self._keep_alive.extend([allocator, mobility])

    def install_radio_devices(
        self, channel: ChannelConfig, phy: PhyConfig, mac: MacConfig
    ) -> None:
        ns = self.ns
        wifi = ns.WifiHelper()
        wifi.SetStandard(getattr(ns, f"WIFI_STANDARD_{phy.standard}"))

        wifi_phy = ns.YansWifiPhyHelper()
        wifi_phy.Set("TxPowerStart", ns.DoubleValue(phy.tx_power_dbm))
        wifi_phy.Set("TxPowerEnd", ns.DoubleValue(phy.tx_power_dbm))
        wifi_phy.Set("RxGain", ns.DoubleValue(phy.rx_gain_db))
        wifi_phy.Set("TxGain", ns.DoubleValue(phy.tx_gain_db))
        wifi_phy.Set("ChannelSettings", ns.StringValue(phy.channel_settings))

        wifi_channel = ns.YansWifiChannelHelper()
        wifi_channel.SetPropagationDelay(channel.delay_model)
        loss_arguments: list[Any] = []
        for name, value in channel.loss_attributes.items():
            loss_arguments.extend([name, ns.DoubleValue(float(value))])
        wifi_channel.AddPropagationLoss(channel.loss_model, *loss_arguments)
        wifi_phy.SetChannel(wifi_channel.Create())

        wifi_mac = ns.WifiMacHelper()
        wifi_mac.SetType(mac.type_id)

        address = ns.Ipv4AddressHelper()
        address.SetBase(ns.Ipv4Address(mac.network_base), ns.Ipv4Mask(mac.network_mask))
        for index in range(self._nodes.GetN()):
            device = wifi.Install(wifi_phy, wifi_mac, self._nodes.Get(index))
            self._interfaces.append(address.Assign(device))
        self._keep_alive.extend([wifi, wifi_phy, wifi_channel, wifi_mac, address])

    def install_traffic_sink(self, node: int, port: int, start_s: float, stop_s: float) -> Any:
        ns = self.ns
        server = ns.UdpServerHelper(port)
        apps = server.Install(self._nodes.Get(node))
        apps.Start(ns.Seconds(start_s))
        apps.Stop(ns.Seconds(stop_s))
        self._keep_alive.extend([server, apps])
        return self._interfaces[node].GetAddress(0)

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
    ) -> None:
        ns = self.ns
        client = ns.UdpClientHelper(destination.ConvertTo(), port)
        client.SetAttribute("MaxPackets", ns.UintegerValue(max_packets))
        client.SetAttribute("Interval", ns.TimeValue(ns.Seconds(interval_s)))
        client.SetAttribute("PacketSize", ns.UintegerValue(packet_size))
        apps = client.Install(self._nodes.Get(node))
        apps.Start(ns.Seconds(start_s))
        apps.Stop(ns.Seconds(stop_s))
        self._keep_alive.extend([client, apps])

    def install_flow_monitor(self) -> Ns3FlowMonitor:
        helper = self.ns.FlowMonitorHelper()
        monitor = helper.InstallAll()
        return Ns3FlowMonitor(helper, monitor)

    def register_frame_received_callback(
        self, node: int, device_index: int, callback: FrameCallback
    ) -> None:
        ns = self.ns
        ns.cppyy.gbl.linksweep.SetFrameSink(callback)
        self._keep_alive.append(callback)
        path = _MONITOR_SNIFFER_RX_PATH.format(node=node, device=device_index)
        ns.Config.ConnectWithoutContext(
            path, ns.cppyy.gbl.linksweep.MakeMonitorSnifferRxCallback()
        )
        logger.debug("Callback RSS branché sur %s", path)

    def stop_at(self, time_s: float) -> None:
        self.ns.Simulator.Stop(self.ns.Seconds(time_s))

    def run(self) -> None:
        self.ns.Simulator.Run()

    def destroy(self) -> None:
        self.ns.Simulator.Destroy()
        self.ns.cppyy.gbl.linksweep.ClearFrameSink()
        self._keep_alive.clear()
        self._interfaces.clear()
        self._nodes = None


__all__ = ["Ns3FlowMonitor", "Ns3Runtime"]
