# netcheck/prober/tool.py
from typing import List

from netcheck.prober.base import CommandProber


class ToolProber(CommandProber):
    """
    Uses a dedicated netcat binary: `nc -z` does a bare connect (TCP) or a
    zero-length send (UDP) and exits non-zero on failure. `-w` bounds it.
    """
    method = "tool"

    def __init__(self, nc_bin: str = "nc", grace_s: float = 1.0):
        super().__init__(grace_s=grace_s)
        self.nc = nc_bin

    def build_cmd(self, host: str, port: int, protocol: str, timeout_s: int) -> List[str]:
        cmd = [self.nc]
        if protocol == "udp":
            cmd.append("-u")
        cmd += ["-z", "-w", str(timeout_s), "--", host, str(port)]
        return cmd
