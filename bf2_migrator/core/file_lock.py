"""Patch lockfile handling (PID + process start time)."""

from __future__ import annotations

import json
import os
import socket
import getpass
import logging
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional

import psutil

from ..exceptions import PatchLockError

logger = logging.getLogger(__name__)

LOCK_SUFFIX = ".lock"
MAX_TAKEOVER_ATTEMPTS = 3


@dataclass(frozen=True)
class LockInfo:
    pid: int
    process_start_time_utc: str
    created_at_utc: str
    hostname: str
    user: str
    target_path: str


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def get_process_start_time(pid: int) -> Optional[str]:
    try:
        start_ts = psutil.Process(pid).create_time()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return None
    return datetime.fromtimestamp(start_ts, tz=timezone.utc).isoformat()


def lock_path_for(target_path: Path) -> Path:
    return target_path.with_name(target_path.name + LOCK_SUFFIX)


def _read_lock(path: Path) -> Optional[LockInfo]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        return LockInfo(
            pid=int(payload.get("pid")),
            process_start_time_utc=str(payload.get("process_start_time_utc")),
            created_at_utc=str(payload.get("created_at_utc")),
            hostname=str(payload.get("hostname")),
            user=str(payload.get("user")),
            target_path=str(payload.get("target_path")),
        )
    except (OSError, ValueError, TypeError):
        return None


def _is_lock_valid(lock: Optional[LockInfo]) -> bool:
    if not lock or not lock.pid:
        return False
    start = get_process_start_time(lock.pid)
    if not start:
        return False
    return start == lock.process_start_time_utc


def acquire_patch_lock(target_path: Path) -> LockInfo:
    lock_path = lock_path_for(target_path)
    pid = os.getpid()
    info = LockInfo(
        pid=pid,
        process_start_time_utc=get_process_start_time(pid) or _utc_now(),
        created_at_utc=_utc_now(),
        hostname=socket.gethostname(),
        user=getpass.getuser(),
        target_path=str(target_path),
    )

    for _ in range(MAX_TAKEOVER_ATTEMPTS):
        try:
            # Exclusive create
            with lock_path.open("x", encoding="utf-8") as f:
                json.dump(asdict(info), f, indent=2)
            return info
        except FileExistsError:
            existing = _read_lock(lock_path)
            if _is_lock_valid(existing):
                raise PatchLockError(
                    f"{target_path.name} is being patched by another process (pid={existing.pid})",
                    file_name=target_path.name,
                    owner_pid=existing.pid,
                )
            logger.warning("Removing stale patch lock %s", lock_path)
            lock_path.unlink(missing_ok=True)

    raise PatchLockError(
        f"could not acquire patch lock {lock_path}",
        file_name=target_path.name,
    )


def release_patch_lock(target_path: Path) -> None:
    try:
        lock_path_for(target_path).unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("Failed to remove patch lock for %s: %s", target_path, exc)


@contextmanager
def patch_lock(target_path: Path) -> Iterator[LockInfo]:
    info = acquire_patch_lock(target_path)
    try:
        yield info
    finally:
        release_patch_lock(target_path)
