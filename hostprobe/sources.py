"""OS metrics source backed by psutil."""

import os
import time
from typing import Dict, List, Optional, Tuple

import psutil
import structlog

from .models import InterfaceCounters, MemorySnapshot

logger = structlog.get_logger(__name__)


def counter_delta(current: int, previous: Optional[int]) -> int:
    """Growth of a monotonic counter since the previous reading.

    A counter seen for the first time, or one that went backwards because
    the interface was reset, contributes nothing to this cycle.
    """
    if previous is None or current < previous:
        return 0
    return current - previous


class HostMetricsSource:
    """Reads counters from the local machine.

    Owned by the probe loop and refreshed in place each cycle. The previous
    per-interface counters are kept so a refresh yields per-cycle deltas.
    """

    def __init__(self):
        """Take the initial network reading the first deltas are measured from."""
        self._last_net_io: Dict[str, Tuple[int, int]] = {}
        try:
            self._last_net_io = self._read_net_io()
        except Exception as e:
            logger.warning("Error reading network counters", error=str(e))

    def _read_net_io(self) -> Dict[str, Tuple[int, int]]:
        counters = psutil.net_io_counters(pernic=True)
        return {
            name: (nic.bytes_recv, nic.bytes_sent)
            for name, nic in counters.items()
        }

    def refresh_networks(self) -> List[InterfaceCounters]:
        """Refresh interface counters and return them with per-cycle deltas.

        A failed read drops the baseline, so the next successful refresh
        reports zero deltas instead of traffic spanning several cycles.
        """
        try:
            current = self._read_net_io()
        except Exception:
            self._last_net_io = {}
            raise
        interfaces = []
        for name, (received, transmitted) in current.items():
            previous = self._last_net_io.get(name)
            interfaces.append(InterfaceCounters(
                name=name,
                received=counter_delta(received, previous[0] if previous else None),
                transmitted=counter_delta(transmitted, previous[1] if previous else None),
                total_received=received,
                total_transmitted=transmitted,
            ))
            if previous and (received < previous[0] or transmitted < previous[1]):
                logger.debug("Interface counters reset", interface=name)
        self._last_net_io = current
        return interfaces

    def prime_cpu(self) -> None:
        """Start a CPU usage measurement window."""
        psutil.cpu_percent(interval=None, percpu=True)

    def cpu_usage(self) -> List[float]:
        """Per-logical-CPU usage since :meth:`prime_cpu`, in percent."""
        return list(psutil.cpu_percent(interval=None, percpu=True))

    def cpu_count(self) -> int:
        """Number of logical CPUs, 0 when unknown."""
        return psutil.cpu_count(logical=True) or 0

    def memory(self) -> MemorySnapshot:
        """Physical memory and swap usage."""
        mem = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return MemorySnapshot(
            total_memory=mem.total,
            used_memory=max(mem.total - mem.available, 0),
            total_swap=swap.total,
            used_swap=swap.used,
        )

    def load_average(self) -> Optional[Tuple[float, float, float]]:
        """1, 5 and 15 minute load averages, or None when the OS has none."""
        if not hasattr(os, "getloadavg"):
            return None
        one, five, fifteen = os.getloadavg()
        return one, five, fifteen

    def uptime(self) -> int:
        """Seconds since boot."""
        return max(int(time.time() - psutil.boot_time()), 0)
