import pytest

from linksweep.launcher.outcome import FlowAggregation, extract, throughput_kbps
from linksweep.launcher.runtime import FlowStats


def test_throughput_formula():
    assert throughput_kbps(14_500_000, 50) == pytest.approx(2265.625)


def test_single_flow_measurement():
    [measurement] = extract([FlowStats(flow_id=1, rx_bytes=14_500_000)], 50, -47.5, 12)
    assert measurement.coordinate == 12
    assert measurement.rss_dbm == -47.5
    assert measurement.throughput_kbps == pytest.approx(2265.625)
    assert measurement.received_any_bytes is True


def test_zero_bytes_is_a_valid_outcome():
    [measurement] = extract([FlowStats(flow_id=1, rx_bytes=0)], 50, -93.0, 180)
    assert measurement.throughput_kbps == 0.0
    assert measurement.received_any_bytes is False
    assert measurement.rss_dbm == -93.0


def test_aggregate_sums_all_flows():
    flows = [FlowStats(flow_id=1, rx_bytes=1024), FlowStats(flow_id=2, rx_bytes=0)]
    measurements = extract(flows, 8, -60.0, 3)
    assert len(measurements) == 1
    assert measurements[0].rx_bytes == 1024
    assert measurements[0].throughput_kbps == pytest.approx(1.0)
    assert measurements[0].received_any_bytes is True


def test_per_flow_emits_one_row_per_entry():
    flows = [FlowStats(flow_id=1, rx_bytes=1024), FlowStats(flow_id=2, rx_bytes=0)]
    measurements = extract(flows, 8, -60.0, 3, FlowAggregation.PER_FLOW)
    assert [m.flow_id for m in measurements] == [1, 2]
    assert [m.received_any_bytes for m in measurements] == [True, False]


def test_no_flow_entry_yields_zero_measurement():
    measurements = extract([], 10, -88.0, 7, "per_flow")
    assert len(measurements) == 1
    assert measurements[0].received_any_bytes is False
    assert measurements[0].rss_dbm == -88.0
