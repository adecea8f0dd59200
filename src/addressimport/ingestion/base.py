"""
Base classes for row sources.

A row source turns some external input into a DataFrame of string columns,
one row per address line. Everything downstream works on that frame.
"""

from abc import ABC, abstractmethod

import pandas as pd

from addressimport.errors import RowSourceError
from addressimport.utils.logging import get_logger

log = get_logger(__name__)


class RowSource(ABC):
    """
    Abstract base class for row sources.

    Subclasses implement _load_raw(); load() adds logging and guarantees a
    positional index so that row numbers can be derived from it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable identifier of the source (file name, table, ...)."""
        ...

    @abstractmethod
    def _load_raw(self) -> pd.DataFrame:
        """Load raw rows from the source. Implemented by subclasses."""
        ...

    def load(self) -> pd.DataFrame:
        """
        Load rows from the source.

        Returns:
            DataFrame with a 0-based RangeIndex.

        Raises:
            RowSourceError: If the source cannot be read or parsed.
        """
        log.info("Loading rows", source=self.name, loader=self.__class__.__name__)

        df = self._load_raw()
        if not isinstance(df, pd.DataFrame):
            msg = f"{self.__class__.__name__} returned {type(df).__name__}, expected DataFrame"
            raise RowSourceError(msg)

        df = df.reset_index(drop=True)
        log.info("Loaded rows", rows=len(df), columns=list(df.columns))
        return df


class FrameRowSource(RowSource):
    """Row source over an already decoded DataFrame (e.g. from another parser)."""

    def __init__(self, frame: pd.DataFrame, name: str = "<frame>") -> None:
        self._frame = frame
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def _load_raw(self) -> pd.DataFrame:
        return self._frame.copy()
