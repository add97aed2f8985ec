# netcheck/prober/raw.py
import socket
import time

from netcheck.prober.base import Prober, make_event
from netcheck.schemas import ProbeEvent


class RawProber(Prober):
    """
    Last-resort prober using sockets from this process. Unlike a bare shell
    redirection it always honours timeout_s.
    """
    method = "raw"

    def __init__(self, udp_payload: str = "test"):
        self.udp_payload = udp_payload.encode()

    def _tcp(self, host: str, port: int, timeout_s: int) -> None:
        with socket.create_connection((host, port), timeout=timeout_s):
            pass

    def _udp(self, host: str, port: int, timeout_s: int) -> None:
        # connectionless: a successful send is all we can observe
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
        family, stype, proto, _, addr = infos[0]
        with socket.socket(family, stype, proto) as sock:
            sock.settimeout(timeout_s)
            sock.sendto(self.udp_payload, addr)

    def probe_once(self, host: str, port: int, protocol: str, timeout_s: int) -> ProbeEvent:
        if protocol == "tcp":
            attempt = self._tcp
        elif protocol == "udp":
            attempt = self._udp
        else:
            raise ValueError(f"Unsupported protocol: {protocol!r}")

        start = time.perf_counter()
        try:
            attempt(host, port, timeout_s)
        except (socket.timeout, OSError) as e:
            return make_event(host, port, protocol, False, self.method,
                              returncode=1, elapsed_s=time.perf_counter() - start,
                              raw={"error": f"{type(e).__name__}: {e}"})
        return make_event(host, port, protocol, True, self.method,
                          returncode=0, elapsed_s=time.perf_counter() - start)
