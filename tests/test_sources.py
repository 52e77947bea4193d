"""Tests for the psutil backed metrics source."""

import os
import time
from types import SimpleNamespace

import pytest
from structlog.testing import capture_logs

from hostprobe import sources
from hostprobe.sources import HostMetricsSource, counter_delta


class NetCounters:
    """Stand-in for psutil.net_io_counters(pernic=True)."""

    def __init__(self):
        self.readings = {}
        self.error = None

    def set(self, name, received, transmitted):
        self.readings[name] = SimpleNamespace(bytes_recv=received, bytes_sent=transmitted)

    def drop(self, name):
        del self.readings[name]

    def __call__(self, pernic=False):
        assert pernic
        if self.error:
            raise self.error
        return dict(self.readings)


@pytest.fixture
def net(monkeypatch):
    counters = NetCounters()
    monkeypatch.setattr(sources.psutil, "net_io_counters", counters)
    return counters


def by_name(interfaces):
    return {nic.name: nic for nic in interfaces}


def test_counter_delta():
    assert counter_delta(150, 100) == 50
    assert counter_delta(100, 100) == 0
    assert counter_delta(10, 100) == 0
    assert counter_delta(10, None) == 0


def test_refresh_yields_cycle_deltas(net):
    net.set("eth0", 1_000, 500)
    source = HostMetricsSource()

    net.set("eth0", 1_600, 700)
    eth0 = by_name(source.refresh_networks())["eth0"]

    assert (eth0.received, eth0.transmitted) == (600, 200)
    assert (eth0.total_received, eth0.total_transmitted) == (1_600, 700)

    net.set("eth0", 1_650, 700)
    eth0 = by_name(source.refresh_networks())["eth0"]

    assert (eth0.received, eth0.transmitted) == (50, 0)


def test_counter_reset_clamped_to_zero(net):
    """A reset interface reports no traffic for the cycle instead of wrapping."""
    net.set("eth0", 5_000, 5_000)
    source = HostMetricsSource()

    net.set("eth0", 40, 30)
    eth0 = by_name(source.refresh_networks())["eth0"]

    assert (eth0.received, eth0.transmitted) == (0, 0)
    assert eth0.total_received == 40

    net.set("eth0", 140, 80)
    eth0 = by_name(source.refresh_networks())["eth0"]

    assert (eth0.received, eth0.transmitted) == (100, 50)


def test_new_and_removed_interfaces(net):
    net.set("eth0", 100, 100)
    source = HostMetricsSource()

    net.set("wg0", 9_000, 9_000)
    interfaces = by_name(source.refresh_networks())

    assert interfaces["wg0"].received == 0
    assert interfaces["wg0"].total_received == 9_000

    net.drop("eth0")
    assert set(by_name(source.refresh_networks())) == {"wg0"}


def test_no_interfaces(net):
    assert HostMetricsSource().refresh_networks() == []


def test_memory(monkeypatch, net):
    monkeypatch.setattr(
        sources.psutil, "virtual_memory",
        lambda: SimpleNamespace(total=16_000, available=12_000, used=3_000),
    )
    monkeypatch.setattr(
        sources.psutil, "swap_memory",
        lambda: SimpleNamespace(total=4_000, used=1_000),
    )

    mem = HostMetricsSource().memory()

    assert mem.total_memory == 16_000
    assert mem.used_memory == 4_000
    assert mem.total_swap == 4_000
    assert mem.used_swap == 1_000


def test_load_average_unsupported(monkeypatch, net):
    monkeypatch.delattr(os, "getloadavg", raising=False)

    assert HostMetricsSource().load_average() is None


def test_load_average(monkeypatch, net):
    monkeypatch.setattr(os, "getloadavg", lambda: (2.0, 1.0, 0.5), raising=False)

    assert HostMetricsSource().load_average() == (2.0, 1.0, 0.5)


def test_cpu_count_missing(monkeypatch, net):
    monkeypatch.setattr(sources.psutil, "cpu_count", lambda logical=True: None)

    assert HostMetricsSource().cpu_count() == 0


def test_cpu_usage_per_core(monkeypatch, net):
    calls = []

    def cpu_percent(interval=None, percpu=False):
        calls.append((interval, percpu))
        return [5.0, 15.0]

    monkeypatch.setattr(sources.psutil, "cpu_percent", cpu_percent)
    source = HostMetricsSource()

    source.prime_cpu()
    assert source.cpu_usage() == [5.0, 15.0]
    assert calls == [(None, True), (None, True)]


def test_uptime(monkeypatch, net):
    monkeypatch.setattr(sources.psutil, "boot_time", lambda: time.time() - 100)

    assert 99 <= HostMetricsSource().uptime() <= 101


def test_unreadable_counters_at_startup(net):
    """Startup survives missing network counters and measures from the next read."""
    net.error = FileNotFoundError("/proc/net/dev")

    with capture_logs() as logs:
        source = HostMetricsSource()

    assert any(
        e["event"] == "Error reading network counters" and e["log_level"] == "warning"
        for e in logs
    )

    net.error = None
    net.set("eth0", 5_000, 2_000)
    eth0 = by_name(source.refresh_networks())["eth0"]

    assert (eth0.received, eth0.transmitted) == (0, 0)
    assert eth0.total_received == 5_000

    net.set("eth0", 5_300, 2_100)
    eth0 = by_name(source.refresh_networks())["eth0"]

    assert (eth0.received, eth0.transmitted) == (300, 100)


def test_failed_refresh_drops_baseline(net):
    """Traffic accumulated across a failed read is not reported as one cycle."""
    net.set("eth0", 1_000, 1_000)
    source = HostMetricsSource()

    net.error = PermissionError("denied")
    with pytest.raises(PermissionError):
        source.refresh_networks()

    net.error = None
    net.set("eth0", 9_000, 4_000)
    eth0 = by_name(source.refresh_networks())["eth0"]

    assert (eth0.received, eth0.transmitted) == (0, 0)

    net.set("eth0", 9_500, 4_200)
    eth0 = by_name(source.refresh_networks())["eth0"]

    assert (eth0.received, eth0.transmitted) == (500, 200)
