"""Exceptions raised by the probe."""


class ProbeError(Exception):
    """Base class for probe errors."""


class ConfigurationError(ProbeError):
    """Raised at startup when the probe cannot run with the given settings."""
