"""Normalization of flat address rows into the four-level hierarchy."""

from addressimport.hierarchy.extract import ExtractedHierarchy, extract_hierarchy
from addressimport.hierarchy.models import (
    BARANGAYS,
    HIERARCHY_TABLES,
    LGUS,
    PROVINCES,
    REGIONS,
    HierarchyStats,
)

__all__ = [
    "BARANGAYS",
    "HIERARCHY_TABLES",
    "LGUS",
    "PROVINCES",
    "REGIONS",
    "ExtractedHierarchy",
    "HierarchyStats",
    "extract_hierarchy",
]
