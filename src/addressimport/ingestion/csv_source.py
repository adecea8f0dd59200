"""
CSV row source for address files.

Reads every column as a string so that codes keep their leading zeros.
"""

from pathlib import Path

import pandas as pd

from addressimport.errors import RowSourceError
from addressimport.ingestion.base import RowSource
from addressimport.utils.logging import get_logger

log = get_logger(__name__)


class CsvRowSource(RowSource):
    """Loader for address hierarchy CSV files."""

    def __init__(self, path: Path, *, delimiter: str = ",") -> None:
        """
        Initialize CSV row source.

        Args:
            path: Path to the CSV file.
            delimiter: Field separator.
        """
        self.path = Path(path)
        self.delimiter = delimiter

    @property
    def name(self) -> str:
        return self.path.name

    def _load_raw(self) -> pd.DataFrame:
        """Load the CSV, trying UTF-8 first and Latin-1 second."""
        if self.path.suffix.lower() != ".csv":
            msg = "Please upload a CSV file"
            raise RowSourceError(msg)

        if not self.path.is_file():
            msg = f"Error reading CSV file: {self.path} not found"
            raise RowSourceError(msg)

        try:
            return self._read(encoding="utf-8")
        except UnicodeDecodeError:
            log.warning("UTF-8 decode failed, retrying with Latin-1", path=str(self.path))
            return self._read(encoding="latin-1")

    def _read(self, encoding: str) -> pd.DataFrame:
        """
        Read the file with a given encoding.

        An empty file has no header, so it is returned as a frame without
        columns; the validator then reports every required column missing.
        """
        try:
            return pd.read_csv(
                self.path,
                sep=self.delimiter,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                on_bad_lines="error",
                encoding=encoding,
            )
        except pd.errors.EmptyDataError:
            log.warning("CSV file is empty", path=str(self.path))
            return pd.DataFrame()
        except pd.errors.ParserError as e:
            msg = f"Error parsing CSV file: {e}"
            raise RowSourceError(msg) from e
        except OSError as e:
            msg = f"Error reading CSV file: {e}"
            raise RowSourceError(msg) from e
