"""
Destructive, dependency-ordered replace of the stored hierarchy.
"""

from addressimport.loading.loader import (
    CancelSignal,
    HierarchyLoader,
    LoadOutcome,
    LoadStatus,
)
from addressimport.loading.plan import (
    DELETE_ORDER,
    INSERT_ORDER,
    DeleteOperation,
    InsertOperation,
    LoadPlan,
    plan_load,
)
from addressimport.loading.store import AddressStore, SQLiteAddressStore, TransactionalStore

__all__ = [
    "DELETE_ORDER",
    "INSERT_ORDER",
    "AddressStore",
    "CancelSignal",
    "DeleteOperation",
    "HierarchyLoader",
    "InsertOperation",
    "LoadOutcome",
    "LoadPlan",
    "LoadStatus",
    "SQLiteAddressStore",
    "TransactionalStore",
    "plan_load",
]
