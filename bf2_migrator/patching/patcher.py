"""Provider patcher for Battlefield 2 executables.

Detects the provider a binary is currently patched for and rewrites the
fixed-width host strings in place:
- read the whole file
- validate and transform in memory
- write the whole buffer back with a single write
"""

from __future__ import annotations

import logging
import os
from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..core.file_lock import patch_lock
from ..exceptions import BaseError, TargetNotPresentError
from .fingerprint import detect_provider
from .modification import apply_modifications, describe
from .provider import Provider
from .targets import PatchTarget

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


@dataclass
class PatchResult:
    """Result of a patch operation."""

    success: bool
    target: str = ""
    path: Optional[str] = None
    old_provider: Provider = Provider.UNKNOWN
    new_provider: Provider = Provider.UNKNOWN
    changed: bool = False
    modifications_applied: int = 0
    original_size: int = 0
    patched_size: int = 0
    error: Optional[str] = None
    error_code: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def target_missing(self) -> bool:
        return self.error_code == "TARGET_NOT_PRESENT"


def _resolve(target: PatchTarget, directory: PathLike) -> Path:
    path = Path(directory) / target.file_name
    if not path.is_file():
        raise TargetNotPresentError(
            f"{target.file_name} not found in {directory}",
            file_name=target.file_name,
            path=str(path),
        )
    return path


def read_provider(target: PatchTarget, directory: PathLike) -> Provider:
    """Detect the provider of target inside directory without modifying it."""
    path = _resolve(target, directory)
    data = path.read_bytes()
    return detect_provider(data, target.fingerprints(), file_name=target.file_name)


def patch_target(target: PatchTarget, directory: PathLike, new_provider: Provider,
                 use_lock: bool = True) -> PatchResult:
    """Patch target inside directory to use new_provider.

    The file is only written if every modification validates; any failure
    raises before a single byte reaches disk.

    Raises:
        TargetNotPresentError: the target file does not exist
        UnknownOrMixedStateError: the current provider cannot be determined
        MissingFingerprintError: a provider is not configured for the target
        OccurrenceMismatchError: the binary contains unknown modifications
        LengthInvariantError: a rule would change the file length
        PatchLockError: another process is patching the same file
    """
    path = _resolve(target, directory)
    stats = os.stat(path)

    with patch_lock(path) if use_lock else nullcontext():
        with open(path, "r+b") as f:
            original = f.read()

            # Detect "old"/current provider based on what's in the binary
            old_provider = detect_provider(original, target.fingerprints(), file_name=target.file_name)
            logger.info("%s is currently patched for %s", target.file_name, old_provider)

            # No need to patch if binary is already patched as desired
            if old_provider == new_provider:
                logger.info("%s already uses %s, nothing to do", target.file_name, new_provider)
                return PatchResult(
                    success=True,
                    target=target.file_name,
                    path=str(path),
                    old_provider=old_provider,
                    new_provider=new_provider,
                    original_size=len(original),
                    patched_size=len(original),
                )

            modifications = target.build_modifications(old_provider, new_provider)
            for line in describe(modifications):
                logger.debug("%s: %s", target.file_name, line)

            modified = apply_modifications(original, modifications, file_name=target.file_name)

            f.seek(0)
            f.write(modified)
            f.flush()
            os.fsync(f.fileno())

    logger.info(
        "Patched %s from %s to %s (%d rules, mode %o kept)",
        target.file_name, old_provider, new_provider, len(modifications), stats.st_mode & 0o7777,
    )
    return PatchResult(
        success=True,
        target=target.file_name,
        path=str(path),
        old_provider=old_provider,
        new_provider=new_provider,
        changed=modified != original,
        modifications_applied=len(modifications),
        original_size=len(original),
        patched_size=len(modified),
    )


class Patcher:
    """Patch Battlefield 2 executables between backend providers."""

    def __init__(self, use_lock: bool = True):
        """Initialize patcher.

        Args:
            use_lock: Guard each file with an advisory lock file while patching
        """
        self.use_lock = use_lock

    def detect(self, target: PatchTarget, directory: PathLike) -> Provider:
        return read_provider(target, directory)

    def patch(self, target: PatchTarget, directory: PathLike, new_provider: Provider) -> PatchResult:
        """Patch a target, reporting failures in the returned PatchResult.

        Returns:
            PatchResult with status and details
        """
        try:
            return patch_target(target, directory, new_provider, use_lock=self.use_lock)
        except BaseError as e:
            if isinstance(e, TargetNotPresentError):
                logger.debug("Skipping %s: %s", target.file_name, e)
            else:
                logger.error("Failed to patch %s: %s", target.file_name, e)
            return PatchResult(
                success=False,
                target=target.file_name,
                path=e.details.get("path"),
                new_provider=new_provider,
                error=str(e),
                error_code=e.error_code,
                details=e.details,
            )
        except OSError as e:
            logger.error("Failed to patch %s: %s", target.file_name, e)
            return PatchResult(
                success=False,
                target=target.file_name,
                new_provider=new_provider,
                error=str(e),
                error_code="FILE_OP_ERROR",
            )
