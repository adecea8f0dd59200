"""
Schema definitions using Pandera for data validation.

All data contracts of the import are defined here.
"""

from addressimport.schemas.address import (
    REQUIRED_COLUMNS,
    AddressRowSchema,
    BarangaySchema,
    LguSchema,
    ProvinceSchema,
    RegionSchema,
)

__all__ = [
    "REQUIRED_COLUMNS",
    "AddressRowSchema",
    "BarangaySchema",
    "LguSchema",
    "ProvinceSchema",
    "RegionSchema",
]
