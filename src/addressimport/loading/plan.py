"""
Ordering and batching of a destructive replace.

Tables are cleared children-first and filled parents-first so that foreign
keys hold at every step. Only barangays, by far the largest level, are split
into batches; the other levels are inserted with one call each.
"""

import math
from dataclasses import dataclass

from addressimport.config.settings import DEFAULT_BATCH_SIZE
from addressimport.hierarchy.models import BARANGAYS, HIERARCHY_TABLES, HierarchyStats

INSERT_ORDER: tuple[str, ...] = HIERARCHY_TABLES
DELETE_ORDER: tuple[str, ...] = tuple(reversed(HIERARCHY_TABLES))
BATCHED_TABLES: frozenset[str] = frozenset({BARANGAYS})


@dataclass(frozen=True)
class DeleteOperation:
    """Remove every row of a table."""

    table: str

    def describe(self) -> str:
        return f"clear {self.table}"


@dataclass(frozen=True)
class InsertOperation:
    """
    Insert rows [start, stop) of a table's entity frame.

    batch_index is 1-based and only set for batched tables.
    """

    table: str
    start: int
    stop: int
    batch_index: int | None = None
    batch_count: int | None = None

    @property
    def size(self) -> int:
        return self.stop - self.start

    @property
    def is_batch(self) -> bool:
        return self.batch_index is not None

    def describe(self) -> str:
        if self.is_batch:
            return f"insert {self.table} batch {self.batch_index} of {self.batch_count}"
        return f"insert {self.table}"


Operation = DeleteOperation | InsertOperation


@dataclass(frozen=True)
class LoadPlan:
    """Delete operations followed by insert operations, in execution order."""

    deletes: tuple[DeleteOperation, ...]
    inserts: tuple[InsertOperation, ...]
    batch_size: int

    @property
    def operations(self) -> tuple[Operation, ...]:
        return (*self.deletes, *self.inserts)

    def __len__(self) -> int:
        return len(self.deletes) + len(self.inserts)

    def inserts_for(self, table: str) -> tuple[InsertOperation, ...]:
        return tuple(op for op in self.inserts if op.table == table)


def batch_bounds(total: int, batch_size: int) -> list[tuple[int, int]]:
    """
    Split range(total) into consecutive [start, stop) chunks.

    >>> batch_bounds(2500, 1000)
    [(0, 1000), (1000, 2000), (2000, 2500)]
    """
    if batch_size < 1:
        msg = f"batch_size must be >= 1, got {batch_size}"
        raise ValueError(msg)
    return [(start, min(start + batch_size, total)) for start in range(0, total, batch_size)]


def plan_load(stats: HierarchyStats, batch_size: int = DEFAULT_BATCH_SIZE) -> LoadPlan:
    """
    Build the operation sequence for replacing the store's contents.

    Args:
        stats: Number of records per table.
        batch_size: Maximum records per call for batched tables.

    Returns:
        LoadPlan. Tables without records get no insert operation.
    """
    sizes = stats.as_dict()
    inserts: list[InsertOperation] = []

    for table in INSERT_ORDER:
        total = sizes[table]
        if total == 0:
            continue
        if table in BATCHED_TABLES:
            bounds = batch_bounds(total, batch_size)
            count = math.ceil(total / batch_size)
            inserts.extend(
                InsertOperation(table, start, stop, batch_index=i, batch_count=count)
                for i, (start, stop) in enumerate(bounds, start=1)
            )
        else:
            inserts.append(InsertOperation(table, 0, total))

    return LoadPlan(
        deletes=tuple(DeleteOperation(table) for table in DELETE_ORDER),
        inserts=tuple(inserts),
        batch_size=batch_size,
    )
