"""Configuration and data records shared by the ziffy sender and receiver."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

ZIFFY_HEXA = 0xFF
"""Control field value that marks zi(0xff)y PTP packets."""

IPV6_HEADER_SIZE = 40
UDP_HEADER_SIZE = 8
ICMP_HEADER_SIZE = 8
PTP_UNUSED_SIZE = 10
"""Leading bytes of a captured frame that are not echoed back to the sender."""

PTP_EVENT_PORT = 319

MESSAGE_TYPES = ("sync", "delay_req", "signaling")
LOG_LEVELS = ("trace", "debug", "info", "warning", "error")


class TCStatus(Enum):
    """Whether a switch behaves as a PTP transparent clock."""

    ON = "On"
    OFF = "Off"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value


@dataclass
class Config:
    """Settings for a ziffy sender or receiver.

    Durations are in seconds.  ``queue_cap`` bounds the number of late ICMP
    replies kept between route traces; in the worst case it should be
    ``(hop_max - hop_min + 1) * port_count * ip_count``.
    """

    mode: str = "receiver"
    log_level: str = "info"
    device: str = "eth0"
    csv_file: str = ""
    destination_address: str = ""
    destination_port: int = PTP_EVENT_PORT
    source_port: int = 32768
    port_count: int = 1
    hop_max: int = 7
    hop_min: int = 1
    ip_count: int = 0
    dscp: int = 0
    ptp_recv_handlers: int = 10000
    cont_reached: bool = False
    icmp_timeout: float = 1.0
    message_type: str = "sync"
    lldp_wait_time: float = 5.0
    icmp_reply_time: float = 1.0
    queue_cap: int = 10000

    def __post_init__(self) -> None:
        if not 0 <= self.dscp <= 63:
            raise ValueError(f"unsupported DSCP value {self.dscp}")
        if self.message_type not in MESSAGE_TYPES:
            raise ValueError(f"unsupported message type {self.message_type!r}")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"unrecognized log level: {self.log_level}")


@dataclass
class SwitchTrafficInfo:
    """One ICMP reply: the replying switch and the correction field it saw."""

    ip: str = ""
    corr_field: float = 0.0
    route_idx: int = 0
    hop: int = 0


@dataclass
class SwitchPrintInfo:
    """Aggregated per-switch figures used for reporting."""

    ip: str = ""
    hostname: str = ""
    interface: str = ""
    routes: int = 0
    div_routes: int = 0
    total_cf: float = 0.0
    avg_cf: float = 0.0
    max_cf: float = 0.0
    min_cf: float = 0.0
    tc_enable: TCStatus = TCStatus.UNKNOWN
    hop: int = 0
    last: bool = False


@dataclass
class PathInfo:
    """The switches seen along one probed path."""

    switches: list[SwitchTrafficInfo] = field(default_factory=list)
    rack_sw_hostname: str = ""