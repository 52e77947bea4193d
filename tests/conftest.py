"""Shared test doubles for the probe tests."""

from typing import List, Optional, Tuple

import pytest

from hostprobe.config import ProbeConfig
from hostprobe.models import InterfaceCounters, MemorySnapshot


class FakeSource:
    """Metrics source returning fixed values."""

    def __init__(
        self,
        interfaces: Optional[List[InterfaceCounters]] = None,
        per_core: Optional[List[float]] = None,
        cpu_count: int = 4,
        load: Optional[Tuple[float, float, float]] = (2.0, 1.0, 0.5),
        memory: Optional[MemorySnapshot] = None,
        uptime: int = 3600,
    ):
        self.interfaces = interfaces if interfaces is not None else []
        self.per_core = per_core if per_core is not None else [10.0, 20.0, 30.0, 40.0]
        self._cpu_count = cpu_count
        self.load = load
        self._memory = memory or MemorySnapshot(
            total_memory=8_000, used_memory=2_000, total_swap=1_000, used_swap=100
        )
        self._uptime = uptime
        self.calls: List[str] = []

    def refresh_networks(self):
        self.calls.append("refresh_networks")
        return self.interfaces

    def prime_cpu(self):
        self.calls.append("prime_cpu")

    def cpu_usage(self):
        self.calls.append("cpu_usage")
        return self.per_core

    def cpu_count(self):
        return self._cpu_count

    def memory(self):
        return self._memory

    def load_average(self):
        return self.load

    def uptime(self):
        return self._uptime


class FakeClock:
    """Monotonic clock whose sleep advances time instead of waiting."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def make_config():
    """Factory for probe configurations with test defaults."""

    def _make(**overrides) -> ProbeConfig:
        values = {
            "node_name": "node-1",
            "api_host": "http://collector.test",
            "token": "s3cret",
            "interval_seconds": 1,
        }
        values.update(overrides)
        return ProbeConfig(_env_file=None, **values)

    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_source():
    """Factory for fake metrics sources."""
    return FakeSource
