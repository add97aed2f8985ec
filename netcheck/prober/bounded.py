# netcheck/prober/bounded.py
from typing import List

from netcheck.prober.base import CommandProber

# $1 = host, $2 = port; values arrive as positional args, not script text
TCP_SCRIPT = ': > "/dev/tcp/$1/$2"'
UDP_SCRIPT = 'printf %s "$3" > "/dev/udp/$1/$2"'


class BoundedProber(CommandProber):
    """
    Generic fallback: coreutils `timeout` around a bash /dev/tcp or /dev/udp
    redirection. The UDP branch writes a short literal payload, so success
    only means the local write went out.
    """
    method = "bounded"

    def __init__(self, timeout_bin: str = "timeout", bash_bin: str = "bash",
                 udp_payload: str = "test", grace_s: float = 1.0):
        super().__init__(grace_s=grace_s)
        self.timeout = timeout_bin
        self.bash = bash_bin
        self.udp_payload = udp_payload

    def build_cmd(self, host: str, port: int, protocol: str, timeout_s: int) -> List[str]:
        cmd = [self.timeout, str(timeout_s), self.bash, "-c"]
        if protocol == "udp":
            return cmd + [UDP_SCRIPT, "netcheck", host, str(port), self.udp_payload]
        return cmd + [TCP_SCRIPT, "netcheck", host, str(port)]
