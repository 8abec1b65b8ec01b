"""Binary patching between online backend providers.

Features:
- Provider fingerprint detection
- Fixed-width, null-padded host string modifications
- All-or-nothing in-place patching of BF2.exe and bf2_w32ded.exe
"""

from .provider import Provider
from .fingerprint import (
    GameFingerprint,
    ServerFingerprint,
    contains_all,
    detect_provider,
)
from .modification import (
    Modification,
    apply_modifications,
    pad_right,
)
from .targets import (
    ALL_TARGETS,
    GameExecutable,
    PatchTarget,
    ServerExecutable,
)
from .patcher import (
    Patcher,
    PatchResult,
    patch_target,
    read_provider,
)

__all__ = [
    "Provider",
    # Detection
    "GameFingerprint",
    "ServerFingerprint",
    "contains_all",
    "detect_provider",
    # Modifications
    "Modification",
    "apply_modifications",
    "pad_right",
    # Targets
    "ALL_TARGETS",
    "GameExecutable",
    "PatchTarget",
    "ServerExecutable",
    # Patcher
    "Patcher",
    "PatchResult",
    "patch_target",
    "read_provider",
]
