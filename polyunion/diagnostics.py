"""Diagnostic records produced while unioning groups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from .core.types import DiagnosticReason

MemberRef = Union[int, Tuple[int, ...], None]


@dataclass(frozen=True)
class Diagnostic:
    """One observable event: an excluded member, a failed step, a dropped sliver.

    Attributes:
        group_key: Key of the group the entry belongs to ('' when unknown)
        reason: Why the entry was recorded
        member_index: Index of the offending member within its group, a
            tuple of indices for a failed pairwise step, or None for
            group-level entries
        message: Human readable detail
    """
    group_key: str
    reason: DiagnosticReason
    member_index: MemberRef = None
    message: str = ""

    def with_group(self, group_key: str) -> Diagnostic:
        """Return a copy attached to ``group_key``."""
        return Diagnostic(group_key, self.reason, self.member_index, self.message)

    def to_dict(self) -> Dict[str, object]:
        member = self.member_index
        if isinstance(member, tuple):
            member = list(member)
        return {
            'groupKey': self.group_key,
            'reason': self.reason.value,
            'memberIndex': member,
            'message': self.message,
        }


def merge_diagnostics(per_group: List[List[Diagnostic]]) -> List[Diagnostic]:
    """Flatten per-group diagnostic lists, keeping group order."""
    merged: List[Diagnostic] = []
    for entries in per_group:
        merged.extend(entries)
    return merged


def count_by_reason(diagnostics: List[Diagnostic]) -> Dict[DiagnosticReason, int]:
    counts: Dict[DiagnosticReason, int] = {}
    for diag in diagnostics:
        counts[diag.reason] = counts.get(diag.reason, 0) + 1
    return counts


def first_with_reason(
    diagnostics: List[Diagnostic],
    reason: DiagnosticReason
) -> Optional[Diagnostic]:
    return next((d for d in diagnostics if d.reason == reason), None)


__all__ = [
    'MemberRef',
    'Diagnostic',
    'merge_diagnostics',
    'count_by_reason',
    'first_with_reason',
]
