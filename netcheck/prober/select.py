# netcheck/prober/select.py
import logging
import shutil
from typing import Callable, Optional

from netcheck.config import Settings
from netcheck.log import log_event
from netcheck.prober.base import Prober, ProberUnavailable
from netcheck.prober.bounded import BoundedProber
from netcheck.prober.fake import FakeProber
from netcheck.prober.raw import RawProber
from netcheck.prober.tool import ToolProber

METHODS = ("auto", "tool", "bounded", "raw", "fake")

Which = Callable[[str], Optional[str]]


def _tool(s: Settings, which: Which) -> Optional[Prober]:
    nc = which(s.nc_bin)
    if not nc:
        return None
    return ToolProber(nc_bin=nc, grace_s=s.grace_s)


def _bounded(s: Settings, which: Which) -> Optional[Prober]:
    timeout_bin = which(s.timeout_bin)
    bash = which(s.bash_bin)
    if not (timeout_bin and bash):
        return None
    return BoundedProber(timeout_bin=timeout_bin, bash_bin=bash,
                         udp_payload=s.udp_payload, grace_s=s.grace_s)


def select_prober(settings: Settings, logger: logging.Logger, which: Which = shutil.which) -> Prober:
    """
    Pick the probing mechanism once for the whole run.
    auto: nc -> timeout+bash -> in-process sockets.
    """
    method = settings.method
    if method not in METHODS:
        raise ValueError(f"Unknown probe method: {method!r}")

    if method == "fake":
        prober: Optional[Prober] = FakeProber()
    elif method == "raw":
        prober = RawProber(udp_payload=settings.udp_payload)
    elif method == "tool":
        prober = _tool(settings, which)
        if prober is None:
            raise ProberUnavailable(f"{settings.nc_bin} not found on PATH")
    elif method == "bounded":
        prober = _bounded(settings, which)
        if prober is None:
            raise ProberUnavailable(f"{settings.timeout_bin} and {settings.bash_bin} are both required on PATH")
    else:
        prober = _tool(settings, which) or _bounded(settings, which) or RawProber(udp_payload=settings.udp_payload)

    log_event(logger, "prober_selected", requested=method, method=prober.method)
    return prober
