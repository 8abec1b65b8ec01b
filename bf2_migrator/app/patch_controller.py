"""Patch workflow: quiesce game processes, then patch every target."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from ..exceptions import TargetNotPresentError, UnknownOrMixedStateError
from ..patching import ALL_TARGETS, PatchResult, PatchTarget, Patcher, Provider
from ..processes import QuiescenceController, QuiesceOutcome
from ..registry import KeyStore, disable_competing_patcher

logger = logging.getLogger(__name__)


def prepare_for_patch(quiescer: QuiescenceController, key_store: Optional[KeyStore] = None,
                      process_names: Optional[Iterable[str]] = None) -> QuiesceOutcome:
    """Make sure nothing holds the executables open or re-patches them afterwards.

    Raises:
        ProcessTerminationError: a kill request failed
        ProcessTerminationTimeoutError: killed processes did not exit in time
    """
    outcome = quiescer.quiesce(process_names)
    outcome.raise_for_timeout()
    if outcome.killed:
        logger.info("Stopped %d process(es) before patching", len(outcome.killed))

    if key_store is not None:
        disable_competing_patcher(key_store)

    return outcome


def patch_installation(directory: Union[str, Path], new_provider: Provider,
                       targets: Sequence[PatchTarget] = ALL_TARGETS,
                       patcher: Optional[Patcher] = None) -> List[PatchResult]:
    """Patch each target in directory; optional targets that are missing are skipped."""
    patcher = patcher or Patcher()
    results = []
    for target in targets:
        result = patcher.patch(target, directory, new_provider)
        if result.target_missing and target.optional:
            logger.info("%s not installed, skipping", target.file_name)
            continue
        results.append(result)
    return results


def detect_installation(directory: Union[str, Path],
                        targets: Sequence[PatchTarget] = ALL_TARGETS,
                        patcher: Optional[Patcher] = None) -> Dict[str, Optional[Provider]]:
    """Map each present target to its provider; None marks unknown or mixed state."""
    patcher = patcher or Patcher()
    detected = {}
    for target in targets:
        try:
            detected[target.file_name] = patcher.detect(target, directory)
        except TargetNotPresentError:
            if not target.optional:
                raise
        except UnknownOrMixedStateError as e:
            logger.warning("%s: %s", target.file_name, e)
            detected[target.file_name] = None
    return detected
