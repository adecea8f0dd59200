"""
Validation report returned to callers.

The report is plain data: whether the file may be loaded, every problem
found, and how many entities each level would receive.
"""

from dataclasses import dataclass, field

import pandas as pd

from addressimport.hierarchy.extract import ExtractedHierarchy, extract_hierarchy
from addressimport.hierarchy.models import HierarchyStats
from addressimport.validation.core import RowValidationResult, validate_rows


@dataclass(frozen=True)
class ValidationReport:
    """
    Result of validating one input file.

    Attributes:
        valid: True when the rows may be loaded.
        errors: Every problem found, in discovery order. Never truncated.
        stats: Entity counts per level (all zero on structural failure).
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    stats: HierarchyStats = field(default_factory=HierarchyStats)

    @classmethod
    def source_failure(cls, message: str) -> "ValidationReport":
        """Report for input that never produced rows."""
        return cls(valid=False, errors=[message])


@dataclass(frozen=True)
class ValidatedRows:
    """Report together with the artefacts a later load needs."""

    report: ValidationReport
    rows: pd.DataFrame
    hierarchy: ExtractedHierarchy | None = None
    row_result: RowValidationResult | None = None


def build_report(rows: pd.DataFrame) -> ValidatedRows:
    """
    Validate rows and count the entities they describe.

    Structural failures stop before any row is inspected. Rows with missing
    values are still counted so that the report shows what the file
    contains, but no hierarchy is kept for them.
    """
    result = validate_rows(rows)
    if result.is_structural:
        return ValidatedRows(
            report=ValidationReport(valid=False, errors=result.errors),
            rows=rows,
            row_result=result,
        )

    hierarchy = extract_hierarchy(rows, validate=result.valid)
    report = ValidationReport(
        valid=result.valid,
        errors=result.errors,
        stats=hierarchy.stats,
    )
    return ValidatedRows(
        report=report,
        rows=rows,
        hierarchy=hierarchy if result.valid else None,
        row_result=result,
    )
