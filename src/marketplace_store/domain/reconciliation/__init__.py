"""Release reconciliation: identity matching and snapshot application."""

from __future__ import annotations

from .engine import ReconciliationEngine, find_removed
from .identity import MatchTerm, ReleaseMatcher, optional_term

__all__ = [
    "MatchTerm",
    "ReconciliationEngine",
    "ReleaseMatcher",
    "find_removed",
    "optional_term",
]
