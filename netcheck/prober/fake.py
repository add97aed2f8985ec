# netcheck/prober/fake.py
from collections import deque

from netcheck.prober.base import Prober, make_event
from netcheck.schemas import PROTOCOLS, ProbeEvent


class FakeProber(Prober):
    """
    script: dict[(host, protocol)] -> list of bools / ProbeEvent dicts to return
    on each call. Hosts in `reachable` always pass. Anything unscripted fails.
    Every call is appended to `calls` as (host, port, protocol, timeout_s).
    """
    method = "fake"

    def __init__(self, script=None, reachable=()):
        self.script = {}
        if script:
            for k, v in script.items():
                self.script[k] = deque(v)
        self.reachable = set(reachable)
        self.calls = []

    def probe_once(self, host: str, port: int, protocol: str, timeout_s: int) -> ProbeEvent:
        if protocol not in PROTOCOLS:
            raise ValueError(f"Unsupported protocol: {protocol!r}")
        self.calls.append((host, port, protocol, timeout_s))

        dq = self.script.get((host, protocol))
        if dq:
            item = dq.popleft()
            if isinstance(item, dict):
                return item
            return make_event(host, port, protocol, bool(item), self.method,
                              returncode=0 if item else 1)

        ok = host in self.reachable
        return make_event(host, port, protocol, ok, self.method, returncode=0 if ok else 1)
