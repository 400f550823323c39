"""Tests for webcsv/lib/printer.py - schema serialization."""

import pytest

from webcsv.lib.parser import parse_schema
from webcsv.lib.printer import format_column, print_schema
from webcsv.lib.schema import ColumnSpec, SchemaSpec


class TestFormatColumn:
    """Tests for single-column rendering."""

    def test_string_prints_length(self):
        assert format_column(ColumnSpec.string("LastName", 50)) == "LastName:string(50)"

    def test_decimal_prints_precision_and_scale(self):
        assert format_column(ColumnSpec.decimal("Height", 13, 3)) == "Height:decimal(13,3)"

    @pytest.mark.parametrize("col_type", ["int", "bool", "date", "datetime"])
    def test_other_types_have_no_parameters(self, col_type):
        assert format_column(ColumnSpec("X", col_type)) == f"X:{col_type}"

    def test_unknown_type_ignores_length(self):
        assert format_column(ColumnSpec("Blob", "binary", length=16)) == "Blob:binary"

    def test_empty_name_has_no_colon(self):
        assert format_column(ColumnSpec("", "int")) == "int"


class TestPrintSchema:
    """Tests for whole-schema rendering."""

    def test_reference_layout(self):
        schema = SchemaSpec(
            version="1.0",
            with_header=False,
            delimiter=",",
            columns=(
                ColumnSpec.string("LastName", 50),
                ColumnSpec("Age", "int"),
                ColumnSpec.decimal("Height", 13, 3),
            ),
        )
        assert (
            print_schema(schema)
            == "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int,Height:decimal(13,3)"
        )

    def test_header_true(self):
        schema = SchemaSpec(version="2", with_header=True, delimiter="|", columns=(ColumnSpec("A", "int"),))
        assert print_schema(schema) == "ver:2,hdr:true,del:|; A:int"

    def test_unnamed_column_keeps_separator(self):
        schema = SchemaSpec(version="1", columns=(ColumnSpec("A", "int"), ColumnSpec("", "int")))
        assert print_schema(schema).endswith("; A:int,int")

    def test_str_is_printed_form(self, sample_schema):
        assert str(sample_schema) == sample_schema.print_schema()


class TestRoundTrip:
    """Parsing the printed form gives back an equivalent schema."""

    @pytest.mark.parametrize(
        "text",
        [
            "ver:1.0,hdr:false,del:,; LastName:string(50),Age:int,Height:decimal(13,3)",
            "ver:2.0,hdr:true,del:|; A:decimal(1,2),B:string(5),C:bool,D:date,E:datetime",
            "ver:X,hdr:false; Name,Blob:binary",
        ],
    )
    def test_round_trip(self, text):
        schema = parse_schema(text)
        reparsed = parse_schema(print_schema(schema))
        assert schema.is_valid(reparsed)
        assert reparsed.is_valid(schema)

    def test_name_only_column_prints_default_length(self):
        schema = parse_schema("ver:1; LastName")
        assert print_schema(schema) == "ver:1,hdr:false,del:,; LastName:string(4000)"
