"""
hostprobe - Host Metrics Probe

Samples CPU, memory, swap, network and load statistics from the local
machine and pushes them to a remote collection endpoint.
"""

__version__ = "0.1.0"

from .config import ProbeConfig
from .exceptions import ConfigurationError, ProbeError
from .models import (
    Accepted,
    Rejected,
    SubmissionOutcome,
    SystemReport,
    TransportFailure,
)
from .collector import Sampler
from .reporter import Reporter
from .service import ProbeService
from .sources import HostMetricsSource

__all__ = [
    "ProbeConfig",
    "ConfigurationError",
    "ProbeError",
    "Accepted",
    "Rejected",
    "SubmissionOutcome",
    "SystemReport",
    "TransportFailure",
    "Sampler",
    "Reporter",
    "ProbeService",
    "HostMetricsSource",
]
