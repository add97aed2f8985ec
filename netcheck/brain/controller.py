# netcheck/brain/controller.py

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from netcheck.brain.rules import FAILURE_MESSAGE, classify, exit_code, verdict_line
from netcheck.brain.state import RunState
from netcheck.config import Settings
from netcheck.log import log_event
from netcheck.prober.base import Prober, ProberUnavailable, make_event
from netcheck.schemas import ProbeEvent, ProbeRequest


class CheckController:
    def __init__(self, prober: Prober, settings: Settings,
                 logger: Optional[logging.Logger] = None,
                 emit: Callable[[str], None] = print):
        self.prober = prober
        self.settings = settings
        self.logger = logger or logging.getLogger("netcheck")
        self.emit = emit

    def _probe(self, req: ProbeRequest, host: str) -> ProbeEvent:
        try:
            return self.prober.probe_once(host, req.port, req.protocol, req.timeout_s)
        except ProberUnavailable:
            raise
        except Exception as e:
            # a broken probe is a failed host, not a failed run
            log_event(self.logger, "probe_error", level=logging.WARNING,
                      host=host, error=f"{type(e).__name__}: {e}")
            return make_event(host, req.port, req.protocol, False, self.prober.method,
                              raw={"error": str(e)})

    def _probe_all(self, req: ProbeRequest):
        """Yield events in input host order."""
        workers = max(1, int(self.settings.workers or 1))
        if workers == 1 or len(req.hosts) == 1:
            for i, host in enumerate(req.hosts):
                if i and self.settings.pace_ms > 0:
                    time.sleep(self.settings.pace_ms / 1000.0)
                yield self._probe(req, host)
            return

        with ThreadPoolExecutor(max_workers=min(workers, len(req.hosts))) as pool:
            # map() hands results back in submission order
            yield from pool.map(lambda h: self._probe(req, h), req.hosts)

    def run(self, req: ProbeRequest) -> dict:
        run = RunState(total=len(req.hosts))
        log_event(self.logger, "run_start", hosts=list(req.hosts), port=req.port,
                  protocol=req.protocol, timeout_s=req.timeout_s, method=self.prober.method)

        started = time.perf_counter()
        for i, ev in enumerate(self._probe_all(req)):
            host = req.hosts[i]
            outcome = classify(ev)
            ev["outcome"] = outcome
            run.record(ev)
            self.emit(verdict_line(outcome, req.label(host)))
            log_event(self.logger, "probe", level=logging.DEBUG, host=host,
                      outcome=outcome, elapsed_s=ev.get("elapsed_s"), returncode=ev.get("returncode"))

        if run.failed:
            self.emit(FAILURE_MESSAGE)

        code = exit_code(run.failed)
        log_event(self.logger, "run_end", exit_code=code,
                  failed=sum(1 for r in run.results if r["outcome"] == "FAIL"),
                  total=run.total, elapsed_s=round(time.perf_counter() - started, 3))

        return {
            "port": req.port,
            "protocol": req.protocol,
            "timeout_s": req.timeout_s,
            "method": self.prober.method,
            "results": run.results,
            "failed": run.failed,
            "exit_code": code,
        }
