# netcheck/brain/state.py
from dataclasses import dataclass, field
from typing import List

from netcheck.schemas import ProbeEvent

@dataclass
class RunState:
    total: int
    failed: bool = False          # flips once, never resets
    results: List[ProbeEvent] = field(default_factory=list)

    def record(self, ev: ProbeEvent) -> None:
        self.results.append(ev)
        if ev.get("outcome") != "PASS":
            self.failed = True
