# netcheck/prober/base.py
import subprocess
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from netcheck.schemas import PROTOCOLS, ProbeEvent


class ProberUnavailable(RuntimeError):
    """No usable connection-attempt mechanism for the requested method."""


def make_event(host: str, port: int, protocol: str, ok: bool, method: str,
               returncode: Optional[int] = None, elapsed_s: float = 0.0,
               raw: Optional[dict] = None) -> ProbeEvent:
    return {
        "host": host,
        "port": port,
        "protocol": protocol,
        "outcome": "PASS" if ok else "FAIL",
        "method": method,
        "returncode": returncode,
        "elapsed_s": round(elapsed_s, 4),
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "raw": raw or {},
    }


class Prober(ABC):
    method = "base"

    @abstractmethod
    def probe_once(self, host: str, port: int, protocol: str, timeout_s: int) -> ProbeEvent:
        """Attempt exactly one connection to host:port/protocol and return a ProbeEvent dict."""
        raise NotImplementedError


class CommandProber(Prober):
    """
    Shared plumbing for probers that shell out to a helper binary.
    Subclasses return an argv list; host and port are always separate
    argv items, never spliced into a shell command line.
    The child is killed after timeout_s + grace_s no matter what the
    helper itself does with its own timeout.
    """

    def __init__(self, grace_s: float = 1.0):
        self.grace_s = grace_s

    @abstractmethod
    def build_cmd(self, host: str, port: int, protocol: str, timeout_s: int) -> List[str]:
        raise NotImplementedError

    def _run_cmd(self, cmd: List[str], timeout_s: float) -> subprocess.CompletedProcess:
        # Caller handles TimeoutExpired / OSError.
        return subprocess.run(cmd, check=False, stdin=subprocess.DEVNULL,
                              stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                              text=True, timeout=timeout_s)

    def probe_once(self, host: str, port: int, protocol: str, timeout_s: int) -> ProbeEvent:
        if protocol not in PROTOCOLS:
            raise ValueError(f"Unsupported protocol: {protocol!r}")

        cmd = self.build_cmd(host, port, protocol, timeout_s)
        start = time.perf_counter()
        try:
            proc = self._run_cmd(cmd, timeout_s + self.grace_s)
        except subprocess.TimeoutExpired:
            return make_event(host, port, protocol, False, self.method,
                              elapsed_s=time.perf_counter() - start,
                              raw={"cmd": cmd, "error": "killed after timeout"})
        except OSError as e:
            return make_event(host, port, protocol, False, self.method,
                              elapsed_s=time.perf_counter() - start,
                              raw={"cmd": cmd, "error": str(e)})

        return make_event(host, port, protocol, proc.returncode == 0, self.method,
                          returncode=proc.returncode,
                          elapsed_s=time.perf_counter() - start,
                          raw={"cmd": cmd, "output": (proc.stdout or "").strip()})
