"""Metrics sampling for one probe cycle."""

import asyncio
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence, Tuple

import structlog

from .config import ProbeConfig
from .exceptions import ConfigurationError
from .models import InterfaceCounters, SystemReport

logger = structlog.get_logger(__name__)

# Minimum time between two CPU readings for usage to be meaningful.
CPU_SETTLE_INTERVAL = 0.2


def per_second(total: int, interval_seconds: int) -> int:
    """Bytes per second over the interval, truncated. Zero for a zero interval."""
    if interval_seconds <= 0:
        return 0
    return total // interval_seconds


def average_usage(per_core: Sequence[float]) -> float:
    """Unweighted mean of per-core usage percentages."""
    if not per_core:
        return 0.0
    return sum(per_core) / len(per_core)


def normalize_load(raw: float, cpu_count: int) -> float:
    """Load average as a percentage of the logical CPU capacity."""
    if cpu_count <= 0:
        return 0.0
    return (raw / cpu_count) * 100.0


def aggregate_interfaces(
    interfaces: Iterable[InterfaceCounters],
) -> Tuple[int, int, int, int]:
    """Sum (received, transmitted, total_received, total_transmitted)."""
    received = transmitted = total_received = total_transmitted = 0
    for nic in interfaces:
        received += nic.received
        transmitted += nic.transmitted
        total_received += nic.total_received
        total_transmitted += nic.total_transmitted
    return received, transmitted, total_received, total_transmitted


class Sampler:
    """Builds one :class:`SystemReport` per cycle from a metrics source."""

    def __init__(self, config: ProbeConfig, source, sleep=asyncio.sleep):
        """Initialize the sampler.

        ``source`` is the owned OS metrics handle (see ``HostMetricsSource``).
        """
        if config.interval_seconds < 1:
            raise ConfigurationError(
                f"interval must be at least 1 second, got {config.interval_seconds}"
            )
        self.config = config
        self.source = source
        self._sleep = sleep

    async def sample(self) -> SystemReport:
        """Collect the current metrics. Never raises for a missing metric."""
        report = SystemReport.for_node(self.config.node_name)

        interfaces = self._refresh_networks()

        # CPU usage needs two readings separated by the settling interval
        per_core = await self._measure_cpu()

        self._fill_network(report, interfaces)
        self._fill_memory(report)
        report.avg_cpu_usage = average_usage(per_core)
        self._fill_load(report)

        report.submit_timestamp = int(datetime.now(timezone.utc).timestamp())
        try:
            report.uptime = self.source.uptime()
        except Exception as e:
            logger.warning("Error reading uptime", error=str(e))

        return report

    def _refresh_networks(self) -> Optional[List[InterfaceCounters]]:
        try:
            return self.source.refresh_networks()
        except Exception as e:
            logger.warning("Error collecting network metrics", error=str(e))
            return None

    async def _measure_cpu(self) -> List[float]:
        try:
            self.source.prime_cpu()
        except Exception as e:
            logger.warning("Error refreshing CPU metrics", error=str(e))
        await self._sleep(CPU_SETTLE_INTERVAL)
        try:
            return self.source.cpu_usage()
        except Exception as e:
            logger.warning("Error collecting CPU metrics", error=str(e))
            return []

    def _fill_network(
        self, report: SystemReport, interfaces: Optional[List[InterfaceCounters]]
    ) -> None:
        if interfaces is None:
            return
        if not interfaces:
            logger.warning("No network interfaces found")
            return

        (
            report.network_received,
            report.network_transmitted,
            report.network_total_received,
            report.network_total_transmitted,
        ) = aggregate_interfaces(interfaces)

        interval = self.config.interval_seconds
        report.network_received_speed = per_second(report.network_received, interval)
        report.network_transmitted_speed = per_second(report.network_transmitted, interval)

    def _fill_memory(self, report: SystemReport) -> None:
        try:
            mem = self.source.memory()
        except Exception as e:
            logger.warning("Error collecting memory metrics", error=str(e))
            return
        report.total_memory = mem.total_memory
        report.used_memory = mem.used_memory
        report.total_swap = mem.total_swap
        report.used_swap = mem.used_swap

    def _fill_load(self, report: SystemReport) -> None:
        try:
            load = self.source.load_average()
            cpu_count = self.source.cpu_count()
        except Exception as e:
            logger.warning("Error collecting load average", error=str(e))
            return

        if load is None:
            logger.warning("System load average not supported on this OS")
            return
        if cpu_count <= 0:
            logger.warning("No logical CPUs reported, load average left at zero")
            return

        one, five, fifteen = load
        report.load_avg_one_minute = normalize_load(one, cpu_count)
        report.load_avg_five_minute = normalize_load(five, cpu_count)
        report.load_avg_fifteen_minute = normalize_load(fifteen, cpu_count)
