"""Tests for hierarchy extraction."""

from collections.abc import Callable

import pandas as pd
import pandera.errors
import pytest

from addressimport.hierarchy import (
    BARANGAYS,
    HIERARCHY_TABLES,
    LGUS,
    PROVINCES,
    REGIONS,
    HierarchyStats,
    extract_hierarchy,
)


class TestDeduplication:
    """Tests for first-occurrence deduplication of the upper levels."""

    def test_first_region_name_wins(self, make_row: Callable) -> None:
        """Test that a repeated region code keeps the first name."""
        rows = pd.DataFrame(
            [
                make_row(region="01", regionName="Ilocos Region", barangay="B1"),
                make_row(region="01", regionName="Region I", barangay="B2"),
            ]
        )
        hierarchy = extract_hierarchy(rows)

        assert hierarchy.regions.to_dict(orient="records") == [
            {"code": "01", "name": "Ilocos Region"}
        ]

    def test_first_parent_wins(self, make_row: Callable) -> None:
        """Test that a province listed under two regions keeps the first."""
        rows = pd.DataFrame(
            [
                make_row(region="01", province="0128", barangay="B1"),
                make_row(region="02", province="0128", barangay="B2"),
            ]
        )
        hierarchy = extract_hierarchy(rows)

        assert hierarchy.provinces.to_dict(orient="records") == [
            {"code": "0128", "name": "Province 0128", "region_code": "01"}
        ]
        assert list(hierarchy.regions["code"]) == ["01", "02"]

    def test_order_of_first_appearance(self, make_row: Callable) -> None:
        """Test that deduplicated levels keep input order, not sorted order."""
        rows = pd.DataFrame(
            [
                make_row(region="13", lgu="L9", barangay="B1"),
                make_row(region="01", lgu="L1", barangay="B2"),
                make_row(region="13", lgu="L9", barangay="B3"),
                make_row(region="04", lgu="L5", barangay="B4"),
            ]
        )
        hierarchy = extract_hierarchy(rows)

        assert list(hierarchy.regions["code"]) == ["13", "01", "04"]
        assert list(hierarchy.lgus["code"]) == ["L9", "L1", "L5"]

    def test_columns(self, sample_rows: pd.DataFrame) -> None:
        """Test the store column names of every level."""
        hierarchy = extract_hierarchy(sample_rows)

        assert list(hierarchy.regions.columns) == ["code", "name"]
        assert list(hierarchy.provinces.columns) == ["code", "name", "region_code"]
        assert list(hierarchy.lgus.columns) == ["code", "name", "province_code"]
        assert list(hierarchy.barangays.columns) == [
            "code",
            "name",
            "province_code",
            "lgu_code",
        ]


class TestBarangays:
    """Tests for barangay pass-through."""

    def test_duplicate_codes_are_kept(self, make_row: Callable) -> None:
        """Test that M rows give M barangays even with duplicate codes."""
        rows = pd.DataFrame(
            [
                make_row(lgu="L1", barangay="B1"),
                make_row(lgu="L2", barangay="B1"),
                make_row(lgu="L1", barangay="B1"),
                make_row(lgu="L3", barangay="B2"),
            ]
        )
        hierarchy = extract_hierarchy(rows)

        assert len(hierarchy.barangays) == 4
        assert hierarchy.stats.barangays == 4
        assert list(hierarchy.barangays["lgu_code"]) == ["L1", "L2", "L1", "L3"]

    def test_records_follow_rows(self, sample_rows: pd.DataFrame) -> None:
        """Test that barangays are in input order with their parents."""
        hierarchy = extract_hierarchy(sample_rows)
        first = hierarchy.records(BARANGAYS)[0]

        assert first == {
            "code": "012801001",
            "name": "Barangay 012801001",
            "province_code": "0128",
            "lgu_code": "012801",
        }
        assert list(hierarchy.barangays["code"]) == list(sample_rows["barangayCode"])


class TestStatsAndAccess:
    """Tests for counts and record access."""

    def test_stats(self, sample_rows: pd.DataFrame) -> None:
        """Test per-level counts."""
        assert extract_hierarchy(sample_rows).stats == HierarchyStats(
            regions=2, provinces=3, lgus=4, barangays=6
        )

    def test_stats_as_dict_in_table_order(self) -> None:
        """Test that stats are keyed by table name, parents first."""
        stats = HierarchyStats(1, 2, 3, 4)
        assert list(stats.as_dict()) == list(HIERARCHY_TABLES)
        assert stats.as_dict()[LGUS] == 3

    def test_records_slice(self, sample_rows: pd.DataFrame) -> None:
        """Test [start, stop) slicing of records."""
        hierarchy = extract_hierarchy(sample_rows)
        records = hierarchy.records(BARANGAYS, 2, 4)

        assert [r["code"] for r in records] == ["012802001", "012901001"]

    def test_frame_by_table(self, sample_rows: pd.DataFrame) -> None:
        """Test table-name lookup."""
        hierarchy = extract_hierarchy(sample_rows)
        assert hierarchy.frame(REGIONS) is hierarchy.regions
        assert hierarchy.frame(PROVINCES) is hierarchy.provinces

    def test_unknown_table(self, sample_rows: pd.DataFrame) -> None:
        """Test that unknown tables raise KeyError."""
        with pytest.raises(KeyError):
            extract_hierarchy(sample_rows).frame("streets")


class TestSchemaChecks:
    """Tests for the schema contract on extraction."""

    def test_empty_value_rejected_when_validating(self, make_row: Callable) -> None:
        """Test that rows which should have failed validation are refused."""
        rows = pd.DataFrame([make_row(regionName="")])
        with pytest.raises(pandera.errors.SchemaError):
            extract_hierarchy(rows)

    def test_counts_without_validation(self, make_row: Callable) -> None:
        """Test that counts can be computed for invalid rows."""
        rows = pd.DataFrame([make_row(regionName=""), make_row(barangay="B2")])
        hierarchy = extract_hierarchy(rows, validate=False)
        assert hierarchy.stats == HierarchyStats(1, 1, 1, 2)
