"""Row validation and the validation report."""

from addressimport.validation.core import (
    RowValidationResult,
    RowViolation,
    find_missing_columns,
    validate_rows,
)
from addressimport.validation.report import ValidatedRows, ValidationReport, build_report
from addressimport.validation.reporter import ConsoleReporter

__all__ = [
    "ConsoleReporter",
    "RowValidationResult",
    "RowViolation",
    "ValidatedRows",
    "ValidationReport",
    "build_report",
    "find_missing_columns",
    "validate_rows",
]
