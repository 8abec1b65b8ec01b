"""Running process access backed by psutil."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Protocol

import psutil

from ..exceptions import ProcessTerminationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessInfo:
    pid: int
    name: str


class ProcessEnumerator(Protocol):
    def list_processes(self) -> List[ProcessInfo]:
        ...

    def terminate(self, pid: int) -> bool:
        """Forcefully kill pid. Returns False if the process was already gone."""
        ...

    def is_running(self, pid: int) -> bool:
        ...


class PsutilProcessEnumerator:
    """ProcessEnumerator for the local machine."""

    def list_processes(self) -> List[ProcessInfo]:
        processes = []
        for proc in psutil.process_iter(["pid", "name"]):
            name = proc.info.get("name")
            if name:
                processes.append(ProcessInfo(pid=proc.info["pid"], name=name))
        return processes

    def terminate(self, pid: int) -> bool:
        try:
            psutil.Process(pid).kill()
        except psutil.NoSuchProcess:
            return False
        except psutil.Error as e:
            raise ProcessTerminationError(f"failed to kill process {pid}: {e}", pid=pid)
        return True

    def is_running(self, pid: int) -> bool:
        try:
            return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            return False
        except psutil.Error as e:
            raise ProcessTerminationError(f"failed to check process {pid}: {e}", pid=pid)
