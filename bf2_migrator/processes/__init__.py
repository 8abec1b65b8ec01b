"""Process enumeration and quiescence before patching."""

from .enumerator import ProcessEnumerator, ProcessInfo, PsutilProcessEnumerator
from .quiescence import QuiescenceController, QuiesceOutcome, QuiesceState

__all__ = [
    "ProcessEnumerator",
    "ProcessInfo",
    "PsutilProcessEnumerator",
    "QuiescenceController",
    "QuiesceOutcome",
    "QuiesceState",
]
