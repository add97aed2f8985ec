# netcheck/schemas.py
import re
from dataclasses import dataclass
from typing import Literal, Optional, Tuple, TypedDict

from netcheck.config import DEFAULT_TIMEOUT_S

Protocol = Literal["tcp", "udp"]
Outcome = Literal["PASS", "FAIL"]

PROTOCOLS: Tuple[str, ...] = ("tcp", "udp")

# hostnames, IPv4 and IPv6 literals; never a leading "-" (would read as an option)
HOST_RE = re.compile(r"^[A-Za-z0-9._:][A-Za-z0-9._:-]*$")


class ProbeEvent(TypedDict, total=False):
    host: str
    port: int
    protocol: str
    outcome: Outcome
    method: str                 # "tool" | "bounded" | "raw" | "fake"
    returncode: Optional[int]
    elapsed_s: float
    timestamp: str
    raw: dict                   # command / error detail for debug


@dataclass(frozen=True)
class ProbeRequest:
    hosts: Tuple[str, ...]
    port: int
    protocol: str = "tcp"
    timeout_s: int = DEFAULT_TIMEOUT_S

    def __post_init__(self):
        hosts = tuple(self.hosts)
        if not hosts:
            raise ValueError("At least one host is required")
        for h in hosts:
            if not isinstance(h, str) or not HOST_RE.match(h):
                raise ValueError(f"Invalid host: {h!r}")
        object.__setattr__(self, "hosts", hosts)

        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"Port must be an integer, got {self.port!r}")
        if self.port < 1 or self.port > 65535:
            raise ValueError(f"Invalid port: {self.port}")

        proto = str(self.protocol).lower()
        if proto not in PROTOCOLS:
            raise ValueError(f"Unsupported protocol: {self.protocol!r} (expected tcp or udp)")
        object.__setattr__(self, "protocol", proto)

        if isinstance(self.timeout_s, bool) or not isinstance(self.timeout_s, int) or self.timeout_s < 1:
            raise ValueError(f"Timeout must be a positive integer, got {self.timeout_s!r}")

    def label(self, host: str) -> str:
        return f"{host}:{self.port}/{self.protocol}"
