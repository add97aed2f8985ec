# netcheck/config.py
from dataclasses import dataclass
from typing import Optional

DEFAULT_TIMEOUT_S = 3

@dataclass
class Settings:
    method: str = "auto"          # auto | tool | bounded | raw | fake
    grace_s: float = 1.0          # slack on top of timeout_s for subprocess startup
    workers: int = 1              # >1 probes hosts in a thread pool
    pace_ms: int = 0

    # binaries looked up on PATH during capability probing
    nc_bin: str = "nc"
    timeout_bin: str = "timeout"
    bash_bin: str = "bash"

    udp_payload: str = "test"
    log_file: Optional[str] = None
