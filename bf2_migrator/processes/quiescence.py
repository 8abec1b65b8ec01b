"""Stop processes that may hold the game executables open.

One quiesce cycle runs Enumerating -> Killing -> Polling -> AllExited or
TimedOut. Polling happens at a fixed interval for a fixed number of attempts,
without backoff.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Optional

from ..config.models import DEFAULT_PROCESS_NAMES
from ..exceptions import ProcessTerminationError, ProcessTerminationTimeoutError
from .enumerator import ProcessEnumerator, PsutilProcessEnumerator

logger = logging.getLogger(__name__)


class QuiesceState(Enum):
    ENUMERATING = "enumerating"
    KILLING = "killing"
    POLLING = "polling"
    ALL_EXITED = "all_exited"
    TIMED_OUT = "timed_out"


@dataclass
class QuiesceOutcome:
    state: QuiesceState = QuiesceState.ENUMERATING
    killed: Dict[int, str] = field(default_factory=dict)
    pending: Dict[int, str] = field(default_factory=dict)
    attempts: int = 0

    @property
    def success(self) -> bool:
        return self.state is QuiesceState.ALL_EXITED

    def raise_for_timeout(self) -> None:
        if self.state is QuiesceState.TIMED_OUT:
            names = ", ".join(f"{name} ({pid})" for pid, name in sorted(self.pending.items()))
            raise ProcessTerminationTimeoutError(
                f"timed out waiting for killed processes to exit: {names}",
                pending=self.pending,
            )


class QuiescenceController:
    """Kill matching processes and wait until they are gone."""

    def __init__(self, enumerator: Optional[ProcessEnumerator] = None,
                 poll_interval: float = 1.0, max_attempts: int = 5,
                 sleep: Callable[[float], None] = time.sleep):
        self.enumerator = enumerator or PsutilProcessEnumerator()
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._sleep = sleep

    def quiesce(self, executable_names: Optional[Iterable[str]] = None) -> QuiesceOutcome:
        names = {n.casefold() for n in (executable_names or DEFAULT_PROCESS_NAMES)}
        outcome = QuiesceOutcome()

        matching = [p for p in self.enumerator.list_processes() if p.name.casefold() in names]

        outcome.state = QuiesceState.KILLING
        for proc in matching:
            logger.info("Killing %s (pid %d)", proc.name, proc.pid)
            try:
                killed = self.enumerator.terminate(proc.pid)
            except ProcessTerminationError as e:
                raise ProcessTerminationError(
                    f"failed to kill process {proc.name!r}: {e}", pid=proc.pid, name=proc.name,
                ) from e
            if killed:
                outcome.killed[proc.pid] = proc.name
                outcome.pending[proc.pid] = proc.name

        outcome.state = QuiesceState.POLLING
        while outcome.pending and outcome.attempts < self.max_attempts:
            outcome.attempts += 1
            for pid in list(outcome.pending):
                # Remove process if it exited (was no longer found)
                if not self.enumerator.is_running(pid):
                    logger.debug("Process %s (pid %d) exited", outcome.pending[pid], pid)
                    del outcome.pending[pid]
            if outcome.pending:
                self._sleep(self.poll_interval)

        if outcome.pending:
            outcome.state = QuiesceState.TIMED_OUT
            logger.error("Processes still running after %d attempts: %s", outcome.attempts, outcome.pending)
        else:
            outcome.state = QuiesceState.ALL_EXITED

        return outcome
