# tools/run_check.py
# Usage examples:
#   python3 -m tools.run_check "10.0.0.5 10.0.0.6" --port 443
#   python3 -m tools.run_check ntp1,ntp2 --port 123 --protocol udp --timeout 5
#   python3 -m tools.run_check "a b c" --port 22 --method fake --fail b
#   python3 -m tools.run_check "10.0.0.5" --port 443 --emit-script > check.sh
#
# Exit status: 0 all hosts passed, 1 at least one failed, 2 bad input or
# no usable probing mechanism.

import argparse
import logging
import sys

from netcheck.brain.controller import CheckController
from netcheck.config import DEFAULT_TIMEOUT_S, Settings
from netcheck.log import close_logger, create_logger, log_event
from netcheck.payload import build_payload
from netcheck.prober.base import ProberUnavailable
from netcheck.prober.fake import FakeProber
from netcheck.prober.select import METHODS, select_prober
from netcheck.schemas import PROTOCOLS, ProbeRequest
from netcheck.targets import parse_hosts


def build_argparser():
    ap = argparse.ArgumentParser(description="TCP/UDP reachability check against a list of hosts")
    ap.add_argument("hosts", nargs="+", help="Hosts/IPs; space, comma or semicolon separated")
    ap.add_argument("--port", type=int, required=True, help="Destination port (1-65535)")
    ap.add_argument("--protocol", default="tcp", type=str.lower, choices=PROTOCOLS, help="tcp or udp")
    ap.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT_S, help="Per-host timeout in whole seconds")
    ap.add_argument("--method", default="auto", choices=METHODS,
                    help="Probe mechanism (auto picks nc, then timeout+bash, then sockets)")
    ap.add_argument("--workers", type=int, default=1, help="Probe this many hosts at once")
    ap.add_argument("--pace-ms", type=int, default=0, help="Pause between sequential probes (milliseconds)")
    ap.add_argument("--log-file", default=None, help="Also append log lines to this file")
    ap.add_argument("--verbose", action="store_true", help="Log every probe")
    ap.add_argument("--emit-script", action="store_true",
                    help="Print the guest shell payload instead of probing from here")
    ap.add_argument("--fail", nargs="*", default=[], help="With --method fake: hosts that should fail")
    return ap


def main(argv=None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    try:
        hosts = parse_hosts(" ".join(args.hosts))
        req = ProbeRequest(hosts=tuple(hosts), port=args.port,
                           protocol=args.protocol, timeout_s=args.timeout)
    except ValueError as e:
        ap.error(str(e))
    if args.pace_ms < 0:
        ap.error("--pace-ms must be >= 0")
    if args.workers < 1:
        ap.error("--workers must be >= 1")

    s = Settings(
        method=args.method,
        pace_ms=args.pace_ms,
        workers=args.workers,
        log_file=args.log_file,
    )

    if args.emit_script:
        print(build_payload(req, udp_payload=s.udp_payload), end="")
        return 0

    logger = create_logger(log_file=s.log_file,
                           level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        if s.method == "fake":
            failing = set(args.fail)
            prober = FakeProber(reachable=[h for h in req.hosts if h not in failing])
        else:
            prober = select_prober(s, logger)
        ctrl = CheckController(prober, s, logger=logger)
        res = ctrl.run(req)
    except ProberUnavailable as e:
        log_event(logger, "prober_unavailable", level=logging.ERROR, error=str(e))
        return 2
    finally:
        close_logger(logger)

    return res["exit_code"]


if __name__ == "__main__":
    sys.exit(main())
