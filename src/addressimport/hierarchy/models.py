"""
Tables of the address hierarchy and per-level counts.
"""

from dataclasses import dataclass

REGIONS = "regions"
PROVINCES = "provinces"
LGUS = "lgus"
BARANGAYS = "barangays"

# Parents before children.
HIERARCHY_TABLES: tuple[str, ...] = (REGIONS, PROVINCES, LGUS, BARANGAYS)

# How tables are named in messages shown to users.
TABLE_LABELS: dict[str, str] = {
    REGIONS: "regions",
    PROVINCES: "provinces",
    LGUS: "LGUs",
    BARANGAYS: "barangays",
}


@dataclass(frozen=True)
class HierarchyStats:
    """
    Number of entities per level.

    regions, provinces and lgus count distinct codes; barangays counts input
    rows, duplicates included.
    """

    regions: int = 0
    provinces: int = 0
    lgus: int = 0
    barangays: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            REGIONS: self.regions,
            PROVINCES: self.provinces,
            LGUS: self.lgus,
            BARANGAYS: self.barangays,
        }
