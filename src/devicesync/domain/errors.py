"""Error kinds surfaced by reconciliation.

Invalid feeds, unmapped carrier statuses and missing feature flags are not
errors; they resolve to typed outcomes. Only the exceptions below escape.
"""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for reconciliation failures."""


class FeedRunNotFoundError(ReconciliationError, LookupError):
    """Raised when reconciliation is requested for a run that does not exist."""

    def __init__(self, run_id: int) -> None:
        super().__init__(f"Feed run {run_id} does not exist")
        self.run_id = run_id


class TransactionFailure(ReconciliationError):
    """Raised when storage fails mid-reconciliation; all work was rolled back.

    Retrying the whole run is safe because reconciliation is idempotent per run.
    """


class AuditEntryImmutableError(ReconciliationError):
    """Raised when something attempts to rewrite a persisted audit entry."""
