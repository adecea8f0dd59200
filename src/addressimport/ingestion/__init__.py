"""
Row sources for address files.

All raw input is turned into a DataFrame of string columns here, so that
failures at the input boundary surface as RowSourceError before validation.
"""

from addressimport.ingestion.base import FrameRowSource, RowSource
from addressimport.ingestion.csv_source import CsvRowSource

__all__ = ["CsvRowSource", "FrameRowSource", "RowSource"]
