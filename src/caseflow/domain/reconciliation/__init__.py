"""Document requirement reconciliation.

Flow for one call:
1) snapshot the case's documents and revision
2) plan additions/removals against the master catalog (pure)
3) apply additions, then removals, each as one atomic batch
4) record one audit entry per non-empty phase and release removed files
"""

from __future__ import annotations

from .apply import ApplyResult, ReconciliationApplier
from .engine import CaseSnapshot, DocumentReconciler, ReconciliationOutcome
from .plan import ReconciliationPlan, plan_reconciliation

__all__ = [
    "ApplyResult",
    "CaseSnapshot",
    "DocumentReconciler",
    "ReconciliationApplier",
    "ReconciliationOutcome",
    "ReconciliationPlan",
    "plan_reconciliation",
]
