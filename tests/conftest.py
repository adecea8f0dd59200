"""Pytest configuration and shared fixtures."""

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from addressimport.errors import StoreError
from addressimport.schemas import REQUIRED_COLUMNS


def address_row(
    region: str = "01",
    province: str = "0128",
    lgu: str = "012801",
    barangay: str = "012801001",
    **overrides: str,
) -> dict[str, str]:
    """Build one address row; names are derived from the codes."""
    row = {
        "regionCode": region,
        "regionName": f"Region {region}",
        "provinceCode": province,
        "provinceName": f"Province {province}",
        "lguCode": lgu,
        "lguName": f"LGU {lgu}",
        "barangayCode": barangay,
        "barangayName": f"Barangay {barangay}",
    }
    row.update(overrides)
    return row


def barangay_rows(n: int, lgu: str = "012801") -> pd.DataFrame:
    """n rows under one region/province/LGU with distinct barangay codes."""
    return pd.DataFrame(
        [address_row(lgu=lgu, barangay=f"{lgu}{i:04d}") for i in range(n)],
        columns=list(REQUIRED_COLUMNS),
    )


class RecordingStore:
    """
    In-memory AddressStore that records every call in order.

    Failures are scripted with fail(): the n-th call of a kind on a table
    raises StoreError after being recorded.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, list[dict[str, Any]] | None]] = []
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self._failures: dict[tuple[str, str, int], str] = {}
        self._seen: dict[tuple[str, str], int] = {}

    def fail(self, kind: str, table: str, call: int = 1, message: str = "boom") -> None:
        self._failures[(kind, table, call)] = message

    def _check(self, kind: str, table: str) -> None:
        n = self._seen.get((kind, table), 0) + 1
        self._seen[(kind, table)] = n
        message = self._failures.get((kind, table, n))
        if message is not None:
            raise StoreError(message, table=table)

    def delete_all(self, table: str) -> None:
        self.calls.append(("delete", table, None))
        self._check("delete", table)
        self.tables[table] = []

    def insert_many(self, table: str, records: Sequence[Mapping[str, Any]]) -> None:
        batch = [dict(r) for r in records]
        self.calls.append(("insert", table, batch))
        self._check("insert", table)
        self.tables.setdefault(table, []).extend(batch)

    def inserts(self, table: str) -> list[list[dict[str, Any]]]:
        return [records for kind, t, records in self.calls if kind == "insert" and t == table]


@pytest.fixture
def make_row() -> Callable[..., dict[str, str]]:
    """Factory for single address rows."""
    return address_row


@pytest.fixture
def sample_rows() -> pd.DataFrame:
    """Two regions, three provinces, four LGUs, six barangays."""
    return pd.DataFrame(
        [
            address_row("01", "0128", "012801", "012801001"),
            address_row("01", "0128", "012801", "012801002"),
            address_row("01", "0128", "012802", "012802001"),
            address_row("01", "0129", "012901", "012901001"),
            address_row("02", "0215", "021501", "021501001"),
            address_row("02", "0215", "021501", "021501002"),
        ],
        columns=list(REQUIRED_COLUMNS),
    )


@pytest.fixture
def recording_store() -> RecordingStore:
    """Fresh in-memory recording store."""
    return RecordingStore()


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write a DataFrame (or raw text) to a CSV file in tmp_path."""

    def _write(data: pd.DataFrame | str, name: str = "addresses.csv") -> Path:
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            data.to_csv(path, index=False)
        return path

    return _write
