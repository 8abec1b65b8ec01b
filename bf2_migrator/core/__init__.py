"""Core helpers shared by the patching workflows."""

from .file_lock import LockInfo, acquire_patch_lock, patch_lock, release_patch_lock

__all__ = [
    "LockInfo",
    "acquire_patch_lock",
    "patch_lock",
    "release_patch_lock",
]
