# netcheck/brain/rules.py
from netcheck.schemas import Outcome, ProbeEvent

FAILURE_MESSAGE = "at least one destination unreachable"

def classify(ev: ProbeEvent) -> Outcome:
    # anything that is not an explicit PASS counts as a failure
    return "PASS" if ev.get("outcome") == "PASS" else "FAIL"

def verdict_line(outcome: str, label: str) -> str:
    return f"{outcome}: {label}"

def exit_code(failed: bool) -> int:
    return 1 if failed else 0
