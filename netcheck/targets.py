# netcheck/targets.py
from __future__ import annotations

import re
from typing import List

from netcheck.schemas import HOST_RE

_DELIMS = re.compile(r"[\s,;]+")


def parse_hosts(spec: str) -> List[str]:
    """
    Normalise a host list into an ordered list of host strings.
    Accepts whitespace, comma or semicolon delimiters (mixed is fine):
      "10.0.0.1 10.0.0.2", "db01,db02", "a; b ,c"
    Order and duplicates are kept as given.
    """
    spec = (spec or "").strip()
    if not spec:
        raise ValueError("Empty host list")

    hosts = [h for h in _DELIMS.split(spec) if h]
    for h in hosts:
        if not HOST_RE.match(h):
            raise ValueError(f"Invalid host: {h!r}")
    return hosts
