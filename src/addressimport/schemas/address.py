"""
Pandera schemas for the address hierarchy.

AddressRowSchema describes the flat input file; the four entity schemas
describe the normalized frames handed to the store.

User-facing problems with the input are found by the row validator, which
needs one message per missing value in a fixed format. AddressRowSchema is
the contract the extractor enforces on rows that already passed it.
"""

import pandera.pandas as pa
from pandera.typing import Series

# Order matters: it is the order in which missing columns and missing
# values are reported.
REQUIRED_COLUMNS: tuple[str, ...] = (
    "regionCode",
    "regionName",
    "provinceCode",
    "provinceName",
    "lguCode",
    "lguName",
    "barangayCode",
    "barangayName",
)


class AddressRowSchema(pa.DataFrameModel):
    """
    Schema for one line of the address file.

    Each row is the full ancestry path of a single barangay.
    """

    regionCode: Series[str] = pa.Field(str_length={"min_value": 1})
    regionName: Series[str] = pa.Field(str_length={"min_value": 1})
    provinceCode: Series[str] = pa.Field(str_length={"min_value": 1})
    provinceName: Series[str] = pa.Field(str_length={"min_value": 1})
    lguCode: Series[str] = pa.Field(str_length={"min_value": 1})
    lguName: Series[str] = pa.Field(str_length={"min_value": 1})
    barangayCode: Series[str] = pa.Field(str_length={"min_value": 1})
    barangayName: Series[str] = pa.Field(str_length={"min_value": 1})

    class Config:
        """Schema configuration."""

        name = "AddressRowSchema"
        strict = False  # Extra columns are ignored
        coerce = True


class RegionSchema(pa.DataFrameModel):
    """Deduplicated regions, one per code."""

    code: Series[str] = pa.Field(unique=True, str_length={"min_value": 1})
    name: Series[str] = pa.Field(str_length={"min_value": 1})

    class Config:
        """Schema configuration."""

        name = "RegionSchema"
        strict = True
        coerce = True


class ProvinceSchema(pa.DataFrameModel):
    """Deduplicated provinces, each pointing at a region code."""

    code: Series[str] = pa.Field(unique=True, str_length={"min_value": 1})
    name: Series[str] = pa.Field(str_length={"min_value": 1})
    region_code: Series[str] = pa.Field(str_length={"min_value": 1})

    class Config:
        """Schema configuration."""

        name = "ProvinceSchema"
        strict = True
        coerce = True


class LguSchema(pa.DataFrameModel):
    """Deduplicated local government units, each pointing at a province code."""

    code: Series[str] = pa.Field(unique=True, str_length={"min_value": 1})
    name: Series[str] = pa.Field(str_length={"min_value": 1})
    province_code: Series[str] = pa.Field(str_length={"min_value": 1})

    class Config:
        """Schema configuration."""

        name = "LguSchema"
        strict = True
        coerce = True


class BarangaySchema(pa.DataFrameModel):
    """
    Barangays, one per input row.

    Codes are deliberately not unique: duplicate barangay codes in the input
    are passed through unchanged.
    """

    code: Series[str] = pa.Field(str_length={"min_value": 1})
    name: Series[str] = pa.Field(str_length={"min_value": 1})
    province_code: Series[str] = pa.Field(str_length={"min_value": 1})
    lgu_code: Series[str] = pa.Field(str_length={"min_value": 1})

    class Config:
        """Schema configuration."""

        name = "BarangaySchema"
        strict = True
        coerce = True
