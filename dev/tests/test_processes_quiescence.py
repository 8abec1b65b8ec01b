import os
from typing import Dict, Iterable, List

import psutil
import pytest

from bf2_migrator.exceptions import ProcessTerminationError, ProcessTerminationTimeoutError
from bf2_migrator.processes import ProcessInfo, PsutilProcessEnumerator, QuiescenceController, QuiesceState
from bf2_migrator.processes import enumerator as enumerator_module


class FakeEnumerator:
    """In-memory process table; survivors ignore kill requests."""

    def __init__(self, processes: Iterable[ProcessInfo], survivors: Iterable[int] = (),
                 failing: Iterable[int] = ()):
        self.processes: Dict[int, ProcessInfo] = {p.pid: p for p in processes}
        self.survivors = set(survivors)
        self.failing = set(failing)
        self.terminated: List[int] = []

    def list_processes(self) -> List[ProcessInfo]:
        return list(self.processes.values())

    def terminate(self, pid: int) -> bool:
        if pid in self.failing:
            raise ProcessTerminationError("access denied", pid=pid)
        self.terminated.append(pid)
        if pid not in self.survivors:
            self.processes.pop(pid, None)
        return True

    def is_running(self, pid: int) -> bool:
        return pid in self.processes


def _controller(enumerator, sleeps):
    return QuiescenceController(enumerator, poll_interval=1.0, max_attempts=5, sleep=sleeps.append)


def test_all_matching_processes_exit() -> None:
    enumerator = FakeEnumerator([
        ProcessInfo(100, "BF2.exe"),
        ProcessInfo(200, "bf2_w32ded.exe"),
        ProcessInfo(300, "explorer.exe"),
    ])
    sleeps = []

    outcome = _controller(enumerator, sleeps).quiesce(["BF2.exe", "bf2_w32ded.exe"])

    assert outcome.success
    assert outcome.state is QuiesceState.ALL_EXITED
    assert outcome.pending == {}
    assert outcome.killed == {100: "BF2.exe", 200: "bf2_w32ded.exe"}
    assert outcome.attempts == 1
    assert sleeps == []
    assert enumerator.terminated == [100, 200]


def test_names_match_case_insensitively() -> None:
    enumerator = FakeEnumerator([ProcessInfo(7, "bf2.EXE")])

    outcome = _controller(enumerator, []).quiesce(["BF2.exe"])

    assert outcome.killed == {7: "bf2.EXE"}


def test_surviving_process_times_out() -> None:
    enumerator = FakeEnumerator(
        [ProcessInfo(100, "BF2.exe"), ProcessInfo(200, "bf2_w32ded.exe")],
        survivors=[200],
    )
    sleeps = []

    outcome = _controller(enumerator, sleeps).quiesce(["BF2.exe", "bf2_w32ded.exe"])

    assert outcome.state is QuiesceState.TIMED_OUT
    assert not outcome.success
    assert outcome.pending == {200: "bf2_w32ded.exe"}
    assert outcome.attempts == 5
    assert sleeps == [1.0] * 5

    with pytest.raises(ProcessTerminationTimeoutError) as excinfo:
        outcome.raise_for_timeout()
    assert excinfo.value.details["pending"] == {200: "bf2_w32ded.exe"}


def test_nothing_running_needs_no_polling() -> None:
    sleeps = []

    outcome = _controller(FakeEnumerator([ProcessInfo(1, "explorer.exe")]), sleeps).quiesce()

    assert outcome.success
    assert outcome.attempts == 0
    assert outcome.killed == {}
    outcome.raise_for_timeout()


def test_kill_failure_propagates_with_process_name() -> None:
    enumerator = FakeEnumerator([ProcessInfo(42, "BF2.exe")], failing=[42])

    with pytest.raises(ProcessTerminationError) as excinfo:
        _controller(enumerator, []).quiesce(["BF2.exe"])

    assert excinfo.value.details == {"pid": 42, "name": "BF2.exe"}


def test_psutil_enumerator_sees_current_process() -> None:
    enumerator = PsutilProcessEnumerator()

    assert any(p.pid == os.getpid() for p in enumerator.list_processes())
    assert enumerator.is_running(os.getpid())


def test_psutil_enumerator_wraps_access_denied(monkeypatch) -> None:
    class LockedProcess:
        def __init__(self, pid):
            self.pid = pid

        def status(self):
            raise psutil.AccessDenied(self.pid)

    monkeypatch.setattr(enumerator_module.psutil, "Process", LockedProcess)

    with pytest.raises(ProcessTerminationError) as excinfo:
        PsutilProcessEnumerator().is_running(4242)

    assert excinfo.value.details["pid"] == 4242


def test_liveness_failure_while_polling_propagates() -> None:
    class UncheckableEnumerator(FakeEnumerator):
        def is_running(self, pid: int) -> bool:
            raise ProcessTerminationError("access denied", pid=pid)

    enumerator = UncheckableEnumerator([ProcessInfo(5, "BF2.exe")], survivors=[5])

    with pytest.raises(ProcessTerminationError):
        _controller(enumerator, []).quiesce(["BF2.exe"])
