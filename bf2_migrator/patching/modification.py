"""Fixed-width byte substitution rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..exceptions import LengthInvariantError, OccurrenceMismatchError

NULL = b"\x00"


def pad_right(data: bytes, fill: bytes, length: int) -> bytes:
    """Right-pad data with fill up to length; longer input is returned as is."""
    if len(data) >= length:
        return data
    return data + fill * (length - len(data))


@dataclass(frozen=True)
class Modification:
    """Replace a null-padded field of `length` bytes, expected `count` times."""

    old: bytes
    new: bytes
    length: int
    count: int = 1

    @property
    def padded_old(self) -> bytes:
        return pad_right(self.old, NULL, self.length)

    @property
    def padded_new(self) -> bytes:
        return pad_right(self.new, NULL, self.length)


def apply_modifications(data: bytes, modifications: Sequence[Modification],
                        file_name: Optional[str] = None) -> bytes:
    """Apply modifications to an in-memory copy of data.

    Every rule must match its expected number of occurrences in the buffer as
    modified by the preceding rules. Nothing is returned unless all rules
    validate, so callers never see a partially patched buffer.

    Raises:
        OccurrenceMismatchError: a rule's pattern count differs from its count
        LengthInvariantError: the result length differs from the input length
    """
    modified = bytes(data)
    for index, m in enumerate(modifications):
        old = m.padded_old
        new = m.padded_new

        observed = modified.count(old)
        if observed != m.count:
            raise OccurrenceMismatchError(
                f"binary contains unknown modifications, revert changes first "
                f"(rule {index}: expected {m.count} occurrence(s) of {m.old!r}, found {observed})",
                file_name=file_name,
                rule_index=index,
                expected=m.count,
                observed=observed,
            )

        # Replace all occurrences, keeping the binary the same length
        modified = modified.replace(old, new)

    # Any changes to the length would break the binary
    if len(modified) != len(data):
        raise LengthInvariantError(
            "length of modified binary does not match length of original",
            file_name=file_name,
            original_size=len(data),
            patched_size=len(modified),
        )

    return modified


def describe(modifications: Sequence[Modification]) -> List[str]:
    """Human readable summary lines, used for debug logging."""
    return [
        f"{m.old.decode('latin-1')!s} -> {m.new.decode('latin-1')!s} "
        f"(length={m.length}, count={m.count})"
        for m in modifications
    ]
