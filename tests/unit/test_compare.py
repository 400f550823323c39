"""Tests for webcsv/lib/compare.py - schema equivalence."""

from dataclasses import replace

import pytest

from webcsv.lib.compare import find_schema_mismatch, is_valid
from webcsv.lib.parser import parse_schema
from webcsv.lib.schema import ColumnSpec

REFERENCE = "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int,Height:decimal(13,3)"


@pytest.fixture
def reference():
    return parse_schema(REFERENCE)


class TestIsValid:
    """Tests for accept/reject decisions."""

    def test_reflexive(self, reference):
        assert is_valid(reference, reference)

    def test_version_case_insensitive(self):
        a = parse_schema("ver:V1,hdr:false; A:int")
        b = parse_schema("ver:v1,hdr:false; A:int")
        assert is_valid(a, b)
        assert is_valid(b, a)

    def test_column_name_case_insensitive(self, reference):
        candidate = parse_schema(
            "ver:1.0,hdr:false,del:,; lastname:string(50),AGE:int,height:decimal(13,3)"
        )
        assert is_valid(reference, candidate)

    def test_type_is_case_sensitive(self, reference):
        """Parsing lowercases types, so build the odd casing directly."""
        columns = list(reference.columns)
        columns[1] = ColumnSpec("Age", "INT")
        assert not is_valid(reference, replace(reference, columns=tuple(columns)))

    @pytest.mark.parametrize(
        "candidate",
        [
            "ver:1.1,hdr:false,del:,; LastName:string(50),Age:int,Height:decimal(13,3)",
            "ver:1.0,hdr:true,del:,; LastName:string(50),Age:int,Height:decimal(13,3)",
            "ver:1.0,hdr:false,del:|; LastName:string(50),Age:int,Height:decimal(13,3)",
            "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int",
            "ver:1.0,hdr:false,del:,; Surname:string(50),Age:int,Height:decimal(13,3)",
            "ver:1.0,hdr:false,del:,; LastName:string(51),Age:int,Height:decimal(13,3)",
            "ver:1.0,hdr:false,del:,; LastName:string(50),Age:bool,Height:decimal(13,3)",
            "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int,Height:decimal(12,3)",
            "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int,Height:decimal(13,2)",
            "ver:1.0,hdr:false,del:,; Age:int,LastName:string(50),Height:decimal(13,3)",
        ],
    )
    def test_any_single_difference_rejects(self, reference, candidate):
        assert not is_valid(reference, parse_schema(candidate))

    def test_name_only_column_differs_from_sized_string(self, reference):
        candidate = parse_schema("ver:1.0,hdr:false,del:,; LastName,Age:int,Height:decimal(13,3)")
        assert not is_valid(reference, candidate)

    def test_schema_method(self, reference):
        assert reference.is_valid(parse_schema(REFERENCE))


class TestFindSchemaMismatch:
    """Tests for mismatch descriptions."""

    def test_none_when_equal(self, reference):
        assert find_schema_mismatch(reference, reference) is None

    def test_reports_first_difference_in_order(self, reference):
        candidate = parse_schema("ver:2.0,hdr:true,del:,; A:int")
        assert "version" in find_schema_mismatch(reference, candidate)

    def test_column_count(self, reference):
        candidate = parse_schema("ver:1.0,hdr:false,del:,; LastName:string(50)")
        assert find_schema_mismatch(reference, candidate) == "1 columns declared, expected 3"

    def test_column_attribute(self, reference):
        candidate = parse_schema(
            "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int,Height:decimal(13,2)"
        )
        mismatch = find_schema_mismatch(reference, candidate)
        assert mismatch.startswith("column 2 ('Height') scale")

    def test_delimiter(self, reference):
        candidate = parse_schema("ver:1.0,hdr:false,del:|; A:int")
        assert find_schema_mismatch(reference, candidate) == "delimiter '|' does not match ','"
