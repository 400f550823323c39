"""Tests for webcsv/lib/frames.py - typed DataFrame conversion."""

import pandas as pd
import pytest

from webcsv.lib.frames import frame_column_names, records_to_dataframe
from webcsv.lib.parser import parse_schema


class TestRecordsToDataFrame:
    """Tests for converting validated records."""

    def test_people_record_types(self, people_schema, person_row):
        df = records_to_dataframe(people_schema, [person_row])

        assert list(df.columns) == people_schema.column_names
        assert df["LastName"].iloc[0] == "Lovelace"
        assert df["Age"].dtype == "Int64"
        assert df["Age"].iloc[0] == 36
        assert df["Height"].iloc[0] == pytest.approx(1.651)
        assert df["Weight"].iloc[0] == pytest.approx(54.3)
        assert df["Alive"].dtype == bool
        assert bool(df["Alive"].iloc[0]) is True
        assert df["DateBorn"].iloc[0] == pd.Timestamp("1815-12-10")
        assert df["LastUpdated"].iloc[0] == pd.Timestamp("2024-05-01T10:00:00", tz="UTC")

    def test_decimal_is_truncated_to_scale(self, sample_schema):
        df = records_to_dataframe(sample_schema, [["Ada", "36", "1.65199"]])
        assert df["Height"].iloc[0] == pytest.approx(1.651)

    def test_bool_literals(self):
        schema = parse_schema("ver:1; Flag:bool")
        df = records_to_dataframe(schema, [["T"], ["0"], ["False"]])
        assert df["Flag"].tolist() == [True, False, False]

    def test_datetime_offsets_are_converted_to_utc(self):
        schema = parse_schema("ver:1; At:datetime")
        df = records_to_dataframe(schema, [["2024-05-01T12:00:00+02:00"]])
        assert df["At"].iloc[0] == pd.Timestamp("2024-05-01T10:00:00", tz="UTC")

    def test_unknown_type_stays_text(self):
        schema = parse_schema("ver:1; Blob:binary")
        df = records_to_dataframe(schema, [["0xff"]])
        assert df["Blob"].iloc[0] == "0xff"

    def test_no_records(self, sample_schema):
        df = records_to_dataframe(sample_schema, [])
        assert df.empty
        assert list(df.columns) == ["LastName", "Age", "Height"]

    def test_after_validation(self, sample_schema):
        records = sample_schema.validate_records(b"Ada,36,1.6\nGrace,85,1.55\n")
        df = records_to_dataframe(sample_schema, records)
        assert len(df) == 2
        assert df["Age"].sum() == 121


class TestFrameColumnNames:
    """Tests for DataFrame column labels."""

    def test_unnamed_columns_get_positional_labels(self):
        schema = parse_schema("ver:1; A:int,:int")
        assert frame_column_names(schema) == ["A", "column_1"]
