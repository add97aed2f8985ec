# netcheck/payload.py
"""
Guest-side rendition of the connectivity check.

build_payload() renders a POSIX sh script that can be pushed into a guest
through whatever in-guest execution API the management plane offers. It
follows the same fallback order as select_prober (nc, then timeout + bash,
then a bare bash redirection with no bound) and prints the same
PASS/FAIL lines. parse_report() reads those lines back out of captured
guest output.
"""
import re
import shlex
from typing import List, NamedTuple

from netcheck.brain.rules import FAILURE_MESSAGE
from netcheck.schemas import ProbeRequest

LINE_RE = re.compile(r"^(PASS|FAIL): (\S+):(\d+)/(tcp|udp)\s*$")

_TEMPLATE = """\
#!/bin/sh
HOSTS={hosts}
PORT={port}
PROTO={proto}
TIMEOUT={timeout}
UDP_PAYLOAD={payload}
rc=0

have() {{ command -v "$1" >/dev/null 2>&1; }}

probe() {{
    h="$1"
    if [ "$PROTO" = "tcp" ]; then
        if have nc; then
            nc -z -w "$TIMEOUT" -- "$h" "$PORT" >/dev/null 2>&1
        elif have timeout && have bash; then
            timeout "$TIMEOUT" bash -c ': > "/dev/tcp/$1/$2"' _ "$h" "$PORT" >/dev/null 2>&1
        else
            bash -c ': > "/dev/tcp/$1/$2"' _ "$h" "$PORT" >/dev/null 2>&1
        fi
    else
        if have nc; then
            nc -u -z -w "$TIMEOUT" -- "$h" "$PORT" >/dev/null 2>&1
        elif have timeout && have bash; then
            timeout "$TIMEOUT" bash -c 'printf %s "$3" > "/dev/udp/$1/$2"' _ "$h" "$PORT" "$UDP_PAYLOAD" >/dev/null 2>&1
        else
            bash -c 'printf %s "$3" > "/dev/udp/$1/$2"' _ "$h" "$PORT" "$UDP_PAYLOAD" >/dev/null 2>&1
        fi
    fi
}}

for h in $HOSTS; do
    if probe "$h"; then
        echo "PASS: $h:$PORT/$PROTO"
    else
        echo "FAIL: $h:$PORT/$PROTO"
        rc=1
    fi
done

[ "$rc" -eq 0 ] || echo {failure}
exit "$rc"
"""


class ReportLine(NamedTuple):
    host: str
    port: int
    protocol: str
    outcome: str


def build_payload(req: ProbeRequest, udp_payload: str = "test") -> str:
    # Values come from a validated ProbeRequest; quoting keeps them data
    # even so. HOSTS is split on spaces by the for loop, which is safe
    # because the host allowlist excludes whitespace.
    return _TEMPLATE.format(
        hosts=shlex.quote(" ".join(req.hosts)),
        port=shlex.quote(str(req.port)),
        proto=shlex.quote(req.protocol),
        timeout=shlex.quote(str(req.timeout_s)),
        payload=shlex.quote(udp_payload),
        failure=shlex.quote(FAILURE_MESSAGE),
    )


def parse_report(text: str) -> List[ReportLine]:
    """Extract verdict lines from guest output; everything else is ignored."""
    out: List[ReportLine] = []
    for line in (text or "").splitlines():
        m = LINE_RE.match(line.strip())
        if not m:
            continue
        outcome, host, port, proto = m.groups()
        out.append(ReportLine(host=host, port=int(port), protocol=proto, outcome=outcome))
    return out
