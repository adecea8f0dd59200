"""
Extraction of the normalized hierarchy from flat address rows.

Regions, provinces and LGUs are deduplicated on their code; the first row
that mentions a code decides its name and parent, and later rows with the
same code are ignored even when they disagree. Barangays are not
deduplicated: every row becomes one barangay.
"""

from dataclasses import dataclass
from typing import Any

import pandas as pd
import pandera.pandas as pa

from addressimport.hierarchy.models import (
    BARANGAYS,
    HIERARCHY_TABLES,
    LGUS,
    PROVINCES,
    REGIONS,
    HierarchyStats,
)
from addressimport.schemas.address import (
    AddressRowSchema,
    BarangaySchema,
    LguSchema,
    ProvinceSchema,
    RegionSchema,
)
from addressimport.utils.logging import get_logger

log = get_logger(__name__)

# Source column -> store column, per level. The first entry is the code.
REGION_COLUMNS = {"regionCode": "code", "regionName": "name"}
PROVINCE_COLUMNS = {
    "provinceCode": "code",
    "provinceName": "name",
    "regionCode": "region_code",
}
LGU_COLUMNS = {"lguCode": "code", "lguName": "name", "provinceCode": "province_code"}
BARANGAY_COLUMNS = {
    "barangayCode": "code",
    "barangayName": "name",
    "provinceCode": "province_code",
    "lguCode": "lgu_code",
}

SCHEMAS: dict[str, type[pa.DataFrameModel]] = {
    REGIONS: RegionSchema,
    PROVINCES: ProvinceSchema,
    LGUS: LguSchema,
    BARANGAYS: BarangaySchema,
}


@dataclass(frozen=True)
class ExtractedHierarchy:
    """
    The four entity sets derived from one input file.

    Attributes:
        regions: Columns code, name.
        provinces: Columns code, name, region_code.
        lgus: Columns code, name, province_code.
        barangays: Columns code, name, province_code, lgu_code.
    """

    regions: pd.DataFrame
    provinces: pd.DataFrame
    lgus: pd.DataFrame
    barangays: pd.DataFrame

    @property
    def stats(self) -> HierarchyStats:
        return HierarchyStats(
            regions=len(self.regions),
            provinces=len(self.provinces),
            lgus=len(self.lgus),
            barangays=len(self.barangays),
        )

    def frame(self, table: str) -> pd.DataFrame:
        """Return the entity frame stored in table."""
        if table not in HIERARCHY_TABLES:
            msg = f"Unknown table: {table!r}"
            raise KeyError(msg)
        return getattr(self, table)

    def records(
        self, table: str, start: int = 0, stop: int | None = None
    ) -> list[dict[str, Any]]:
        """Return rows [start, stop) of a table as plain dicts for the store."""
        return self.frame(table).iloc[start:stop].to_dict(orient="records")


def _first_by_code(rows: pd.DataFrame, columns: dict[str, str]) -> pd.DataFrame:
    """Keep the first row per code, in order of first appearance."""
    code_column = next(iter(columns))
    return (
        rows[list(columns)]
        .drop_duplicates(subset=code_column, keep="first")
        .rename(columns=columns)
        .reset_index(drop=True)
    )


def extract_hierarchy(rows: pd.DataFrame, *, validate: bool = True) -> ExtractedHierarchy:
    """
    Derive regions, provinces, LGUs and barangays from address rows.

    Args:
        rows: Rows containing all required columns.
        validate: Check input and output frames against their schemas.
            Pass False to compute counts for rows that failed validation.

    Returns:
        ExtractedHierarchy with one frame per level.

    Raises:
        pandera.errors.SchemaError: If validate is True and the rows or the
            derived frames break their schema.
    """
    if validate:
        rows = AddressRowSchema.validate(rows)

    hierarchy = ExtractedHierarchy(
        regions=_first_by_code(rows, REGION_COLUMNS),
        provinces=_first_by_code(rows, PROVINCE_COLUMNS),
        lgus=_first_by_code(rows, LGU_COLUMNS),
        barangays=rows[list(BARANGAY_COLUMNS)]
        .rename(columns=BARANGAY_COLUMNS)
        .reset_index(drop=True),
    )

    if validate:
        hierarchy = ExtractedHierarchy(
            **{table: SCHEMAS[table].validate(hierarchy.frame(table)) for table in HIERARCHY_TABLES}
        )

    duplicated = hierarchy.barangays["code"].duplicated(keep=False)
    if duplicated.any():
        log.warning(
            "Duplicate barangay codes kept as separate records",
            codes=int(hierarchy.barangays.loc[duplicated, "code"].nunique()),
            rows=int(duplicated.sum()),
        )

    log.info("Extracted hierarchy", **hierarchy.stats.as_dict())
    return hierarchy
