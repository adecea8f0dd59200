"""
Execution of a load plan against a store.

Operations are issued one at a time, in plan order; the next operation is
only issued once the previous one returned. The first failure stops the run
and is reported together with the operation that caused it. Without
transactions, work that completed before the failure stays in the store.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Protocol

from addressimport.errors import StoreError
from addressimport.hierarchy.extract import ExtractedHierarchy
from addressimport.hierarchy.models import TABLE_LABELS
from addressimport.loading.plan import DeleteOperation, InsertOperation, LoadPlan, Operation
from addressimport.loading.store import AddressStore, TransactionalStore
from addressimport.utils.logging import get_logger

log = get_logger(__name__)


class LoadStatus(str, Enum):
    """State of an import."""

    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"
    CANCELLED = "cancelled"


class CancelSignal(Protocol):
    """Anything with is_set(), e.g. threading.Event."""

    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class LoadOutcome:
    """
    Terminal result of a load attempt.

    Attributes:
        status: SUCCESS, ERROR or CANCELLED.
        message: Failure or cancellation message, None on success.
        failed_operation: Operation that raised, if any.
        completed: Number of plan operations that finished.
        inserted: Records inserted per table before the run ended.
        rolled_back: True when the store undid every completed operation.
        rejected: True when the request never reached the store.
    """

    status: LoadStatus
    message: str | None = None
    failed_operation: Operation | None = None
    completed: int = 0
    inserted: dict[str, int] = field(default_factory=dict)
    rolled_back: bool = False
    rejected: bool = False

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.SUCCESS


class _Abort(Exception):
    """Unwinds an open transaction so the store rolls it back."""

    def __init__(self, outcome: LoadOutcome) -> None:
        super().__init__(outcome.message)
        self.outcome = outcome


def failure_message(operation: Operation, error: Exception) -> str:
    """Describe a failed operation for the caller."""
    label = TABLE_LABELS.get(operation.table, operation.table)
    if isinstance(operation, DeleteOperation):
        prefix = f"Error clearing {label}"
    elif operation.is_batch:
        prefix = f"Error inserting {label} batch {operation.batch_index}"
    else:
        prefix = f"Error inserting {label}"
    return f"{prefix}: {error}"


class HierarchyLoader:
    """
    Replaces the store's hierarchy with an extracted one.

    With atomic=True and a store exposing transaction(), the whole plan runs
    in one transaction and any failure or cancellation leaves the store as it
    was. Otherwise every operation commits on its own.
    """

    def __init__(self, store: AddressStore, *, atomic: bool = False) -> None:
        self.store = store
        self.atomic = atomic

    def execute(
        self,
        plan: LoadPlan,
        hierarchy: ExtractedHierarchy,
        cancel: CancelSignal | None = None,
    ) -> LoadOutcome:
        """
        Run every operation of plan, stopping at the first failure.

        Args:
            plan: Operations to run.
            hierarchy: Source of the records referenced by insert operations.
            cancel: Checked before each operation; once set, nothing further
                is issued.

        Returns:
            LoadOutcome describing how the run ended.
        """
        if not self.atomic:
            return self._run(plan, hierarchy, cancel)

        if not isinstance(self.store, TransactionalStore):
            log.warning(
                "Store has no transactions, running non-atomic",
                store=type(self.store).__name__,
            )
            return self._run(plan, hierarchy, cancel)

        try:
            with self.store.transaction():
                outcome = self._run(plan, hierarchy, cancel)
                if not outcome.ok:
                    raise _Abort(outcome)
        except _Abort as abort:
            return replace(abort.outcome, rolled_back=True, inserted={})
        except StoreError as e:
            # BEGIN or COMMIT failed; nothing was kept.
            log.error("Transaction failed", error=str(e))
            return LoadOutcome(
                status=LoadStatus.ERROR,
                message=f"Error in import transaction: {e}",
                rolled_back=True,
            )
        return outcome

    def _run(
        self,
        plan: LoadPlan,
        hierarchy: ExtractedHierarchy,
        cancel: CancelSignal | None,
    ) -> LoadOutcome:
        inserted: dict[str, int] = {}
        total = len(plan)

        for completed, operation in enumerate(plan.operations):
            if cancel is not None and cancel.is_set():
                log.warning("Load cancelled", completed=completed, total=total)
                return LoadOutcome(
                    status=LoadStatus.CANCELLED,
                    message=f"Import cancelled after {completed} of {total} operations",
                    completed=completed,
                    inserted=inserted,
                )

            try:
                self._apply(operation, hierarchy)
            except Exception as e:
                message = failure_message(operation, e)
                log.error(
                    "Load step failed",
                    step=operation.describe(),
                    table=operation.table,
                    batch=getattr(operation, "batch_index", None),
                    error=str(e),
                )
                return LoadOutcome(
                    status=LoadStatus.ERROR,
                    message=message,
                    failed_operation=operation,
                    completed=completed,
                    inserted=inserted,
                )

            if isinstance(operation, InsertOperation):
                inserted[operation.table] = inserted.get(operation.table, 0) + operation.size

        log.info("Load finished", operations=total, **inserted)
        return LoadOutcome(status=LoadStatus.SUCCESS, completed=total, inserted=inserted)

    def _apply(self, operation: Operation, hierarchy: ExtractedHierarchy) -> None:
        log.debug("Running load step", step=operation.describe())
        if isinstance(operation, DeleteOperation):
            self.store.delete_all(operation.table)
        else:
            records = hierarchy.records(operation.table, operation.start, operation.stop)
            self.store.insert_many(operation.table, records)
