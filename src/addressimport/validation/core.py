"""
Core validation logic for address rows.

Checks that every required column is present and that every row carries a
value for every required column. Problems are collected, never raised, so a
single run reports everything that is wrong with a file.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from addressimport.schemas.address import REQUIRED_COLUMNS
from addressimport.utils.logging import get_logger

log = get_logger(__name__)

# Data rows are numbered like spreadsheet lines: line 1 is the header and
# the first data row (position 0) is line 2.
ROW_NUMBER_OFFSET = 2


@dataclass(frozen=True)
class RowViolation:
    """A required field without a value on one row."""

    row_number: int
    field: str

    @property
    def message(self) -> str:
        return f"Row {self.row_number}: Missing value for {self.field}"


@dataclass(frozen=True)
class RowValidationResult:
    """
    Outcome of validating a row set.

    Attributes:
        missing_columns: Required columns absent from the header, in
            required order. Non-empty means no row was checked.
        violations: Empty required values, ordered by row then column.
    """

    missing_columns: tuple[str, ...] = ()
    violations: tuple[RowViolation, ...] = field(default_factory=tuple)

    @property
    def valid(self) -> bool:
        return not self.missing_columns and not self.violations

    @property
    def is_structural(self) -> bool:
        """True when the header itself is incomplete."""
        return bool(self.missing_columns)

    @property
    def errors(self) -> list[str]:
        """Human-readable messages for the report."""
        if self.missing_columns:
            return [f"Missing required columns: {', '.join(self.missing_columns)}"]
        return [v.message for v in self.violations]


def find_missing_columns(
    columns: Iterable[str],
    required: Sequence[str] = REQUIRED_COLUMNS,
) -> tuple[str, ...]:
    """
    Return required columns absent from columns.

    Names are compared literally; "RegionCode" does not satisfy "regionCode".
    """
    present = set(columns)
    return tuple(col for col in required if col not in present)


def blank_mask(series: pd.Series) -> pd.Series:
    """Mark values that count as missing: null, NaN or the empty string."""
    return series.isna() | series.eq("")


def validate_rows(
    rows: pd.DataFrame,
    columns: Iterable[str] | None = None,
    required: Sequence[str] = REQUIRED_COLUMNS,
) -> RowValidationResult:
    """
    Validate address rows.

    Args:
        rows: Decoded rows, one per data line, in file order.
        columns: Header of the source. Defaults to rows.columns.
        required: Required column names, in reporting order.

    Returns:
        RowValidationResult with either the missing columns or every
        empty required value.
    """
    missing = find_missing_columns(rows.columns if columns is None else columns, required)
    if missing:
        log.warning("Missing required columns", missing=list(missing))
        return RowValidationResult(missing_columns=missing)

    if rows.empty:
        return RowValidationResult()

    mask = np.column_stack(
        [blank_mask(rows[col]).to_numpy(dtype=bool) for col in required]
    )
    # nonzero on a C-ordered array walks row by row, columns left to right
    positions, col_indices = np.nonzero(mask)
    violations = tuple(
        RowViolation(row_number=int(pos) + ROW_NUMBER_OFFSET, field=required[idx])
        for pos, idx in zip(positions, col_indices, strict=True)
    )

    if violations:
        log.warning(
            "Rows with missing values",
            violations=len(violations),
            rows=len(set(positions.tolist())),
        )
    return RowValidationResult(violations=violations)
