"""Data models for the host probe."""

from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class SystemReport(BaseModel):
    """Point-in-time snapshot of the host, submitted once per cycle.

    Serialized with short wire keys; every field defaults to zero so the
    payload always carries all keys.
    """

    model_config = ConfigDict(populate_by_name=True)

    node_name: str = Field(default="", alias="nn")

    # Network, bytes
    network_received: int = Field(default=0, ge=0, alias="nr")
    network_transmitted: int = Field(default=0, ge=0, alias="nt")
    network_received_speed: int = Field(default=0, ge=0, alias="nrs")  # bytes/s
    network_transmitted_speed: int = Field(default=0, ge=0, alias="nts")  # bytes/s
    network_total_received: int = Field(default=0, ge=0, alias="ntr")
    network_total_transmitted: int = Field(default=0, ge=0, alias="ntt")

    # Memory, bytes
    total_memory: int = Field(default=0, ge=0, alias="tm")
    used_memory: int = Field(default=0, ge=0, alias="um")
    total_swap: int = Field(default=0, ge=0, alias="ts")
    used_swap: int = Field(default=0, ge=0, alias="us")

    # CPU, percent
    avg_cpu_usage: float = Field(default=0.0, alias="acu")
    load_avg_one_minute: float = Field(default=0.0, alias="laom")
    load_avg_five_minute: float = Field(default=0.0, alias="lafm")
    load_avg_fifteen_minute: float = Field(default=0.0, alias="lafifm")

    submit_timestamp: int = Field(default=0, alias="st")  # UTC epoch seconds
    uptime: int = Field(default=0, ge=0, alias="ut")  # seconds

    @classmethod
    def for_node(cls, node_name: str) -> "SystemReport":
        """Empty report for a node."""
        return cls(node_name=node_name)

    def to_wire(self) -> str:
        """Compact JSON body with the short keys."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_wire(cls, payload: Union[str, bytes]) -> "SystemReport":
        """Parse a JSON body produced by :meth:`to_wire`."""
        return cls.model_validate_json(payload)


class Accepted(BaseModel):
    """The endpoint answered with a 2xx status."""

    model_config = ConfigDict(frozen=True)

    status_code: int


class Rejected(BaseModel):
    """The endpoint answered with a non-2xx status."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    body: str = ""


class TransportFailure(BaseModel):
    """The request never got a response."""

    model_config = ConfigDict(frozen=True)

    detail: str


SubmissionOutcome = Union[Accepted, Rejected, TransportFailure]


class InterfaceCounters(BaseModel):
    """Byte counters of one network interface."""

    name: str
    received: int = Field(default=0, ge=0)  # this cycle
    transmitted: int = Field(default=0, ge=0)  # this cycle
    total_received: int = Field(default=0, ge=0)
    total_transmitted: int = Field(default=0, ge=0)


class MemorySnapshot(BaseModel):
    """Physical memory and swap, in bytes."""

    total_memory: int = Field(default=0, ge=0)
    used_memory: int = Field(default=0, ge=0)
    total_swap: int = Field(default=0, ge=0)
    used_swap: int = Field(default=0, ge=0)
