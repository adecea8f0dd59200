"""
Import session: validation followed by an explicit destructive replace.

A session walks through idle -> validating -> (idle | error) for each file it
is given, and idle -> uploading -> (success | error | cancelled) when
replace_all() is called. Only one replace may run per session at a time, and
callers must not run two sessions against the same store concurrently.
"""

from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from addressimport.config.settings import ImportConfig
from addressimport.errors import RowSourceError
from addressimport.hierarchy.extract import ExtractedHierarchy
from addressimport.ingestion import CsvRowSource, FrameRowSource, RowSource
from addressimport.loading.loader import CancelSignal, HierarchyLoader, LoadOutcome, LoadStatus
from addressimport.loading.plan import plan_load
from addressimport.loading.store import AddressStore
from addressimport.utils.logging import get_logger, log_context
from addressimport.validation.report import ValidationReport, build_report

log = get_logger(__name__)

REJECT_INVALID = "Please upload a valid CSV file first"
REJECT_BUSY = "An import is already in progress"


@dataclass(frozen=True)
class ImportResult:
    """
    Result of run_import().

    Attributes:
        report: Validation report of the file.
        outcome: Load outcome, None if the file was not valid.
    """

    report: ValidationReport
    outcome: LoadOutcome | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not None and self.outcome.ok


class ImportSession:
    """
    Holds the last validated file and replaces the store's hierarchy with it.

    Example:
        session = ImportSession(store)
        report = session.load_file(Path("psgc.csv"))
        if report.valid:
            outcome = session.replace_all()
    """

    def __init__(self, store: AddressStore, config: ImportConfig | None = None) -> None:
        self.store = store
        self.config = config or ImportConfig()
        self.status = LoadStatus.IDLE
        self.source_name: str | None = None
        self._reset_state()

    def _reset_state(self) -> None:
        self.report = ValidationReport(valid=False)
        self._rows: pd.DataFrame | None = None
        self._hierarchy: ExtractedHierarchy | None = None

    @property
    def row_count(self) -> int:
        return 0 if self._rows is None else len(self._rows)

    def reset(self) -> None:
        """Forget the current file and return to idle."""
        if self.status is LoadStatus.UPLOADING:
            msg = "Cannot reset while an import is uploading"
            raise RuntimeError(msg)
        self._reset_state()
        self.source_name = None
        self.status = LoadStatus.IDLE

    def load_file(self, path: Path) -> ValidationReport:
        """Read and validate a CSV file."""
        return self.load_source(CsvRowSource(path))

    def load_rows(self, rows: pd.DataFrame, name: str = "<frame>") -> ValidationReport:
        """Validate rows that were decoded elsewhere."""
        return self.load_source(FrameRowSource(rows, name=name))

    def load_source(self, source: RowSource) -> ValidationReport:
        """
        Read rows from source and validate them.

        Replaces any previously loaded file. Source failures are reported
        verbatim in the report instead of being raised.
        """
        if self.status is LoadStatus.UPLOADING:
            msg = "Cannot load a new file while an import is uploading"
            raise RuntimeError(msg)

        self._reset_state()
        self.source_name = source.name
        self.status = LoadStatus.VALIDATING

        with log_context(source=source.name):
            try:
                rows = source.load()
            except RowSourceError as e:
                log.error("Could not read rows", error=str(e))
                self.report = ValidationReport.source_failure(str(e))
                self.status = LoadStatus.ERROR
                return self.report

            validated = build_report(rows)

        self.report = validated.report
        self._rows = rows
        self._hierarchy = validated.hierarchy
        self.status = LoadStatus.IDLE if self.report.valid else LoadStatus.ERROR

        log.info(
            "Validation finished",
            source=source.name,
            valid=self.report.valid,
            errors=len(self.report.errors),
            **self.report.stats.as_dict(),
        )
        return self.report

    def can_replace(self) -> bool:
        return (
            self.status is not LoadStatus.UPLOADING
            and self.report.valid
            and self._hierarchy is not None
            and self.row_count > 0
        )

    def replace_all(self, cancel: CancelSignal | None = None) -> LoadOutcome:
        """
        Replace every region, province, LGU and barangay in the store.

        Destructive: all four tables are emptied before the new hierarchy is
        written. Rejected without touching the store unless the last file was
        valid and had at least one row.

        Args:
            cancel: Optional signal checked between store operations.

        Returns:
            LoadOutcome. For a rejected request, rejected is True and the
            session state is unchanged.
        """
        if self.status is LoadStatus.UPLOADING:
            log.warning("Replace rejected", reason=REJECT_BUSY)
            return LoadOutcome(status=LoadStatus.ERROR, message=REJECT_BUSY, rejected=True)

        if not self.can_replace():
            log.warning("Replace rejected", reason=REJECT_INVALID)
            return LoadOutcome(status=LoadStatus.ERROR, message=REJECT_INVALID, rejected=True)

        assert self._hierarchy is not None
        plan = plan_load(self._hierarchy.stats, batch_size=self.config.load.batch_size)
        loader = HierarchyLoader(self.store, atomic=self.config.load.atomic)

        self.status = LoadStatus.UPLOADING
        with log_context(source=self.source_name):
            log.info(
                "Replacing address hierarchy",
                operations=len(plan),
                batch_size=plan.batch_size,
                atomic=self.config.load.atomic,
            )
            try:
                outcome = loader.execute(plan, self._hierarchy, cancel)
            except BaseException:
                self.status = LoadStatus.ERROR
                raise

        self.status = outcome.status
        return outcome


def run_import(
    path: Path,
    store: AddressStore,
    config: ImportConfig | None = None,
    cancel: CancelSignal | None = None,
) -> ImportResult:
    """
    Validate a CSV file and, if it is valid, replace the stored hierarchy.

    Args:
        path: CSV file with the eight address columns.
        store: Target store.
        config: Import configuration (defaults if omitted).
        cancel: Optional cancellation signal for the load.

    Returns:
        ImportResult with the report and, for valid files, the load outcome.
    """
    session = ImportSession(store, config)
    report = session.load_file(path)
    if not report.valid:
        return ImportResult(report=report)
    return ImportResult(report=report, outcome=session.replace_all(cancel))
