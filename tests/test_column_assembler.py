from datetime import datetime, timezone

import pytest
from bson.datetime_ms import DatetimeMS
from bson.int64 import Int64

from query_gateway.core.errors import EmptyResultError, TypeInferenceError
from query_gateway.core.models import ValueKind
from query_gateway.execution.column_assembler import ColumnarAssembler
from tests.conftest import utc


def test_integer_column(cpu_rows):
    columns = ColumnarAssembler().assemble(cpu_rows, "cpu")
    assert columns.kind is ValueKind.INTEGER
    assert columns.timestamps == [utc(2024, 1, 1, 10), utc(2024, 1, 1, 11)]
    assert columns.values == [5, 7]


def test_empty_rows_raise_empty_result():
    with pytest.raises(EmptyResultError):
        ColumnarAssembler().assemble([], "cpu")


@pytest.mark.parametrize(
    "first_row",
    [
        {"timestamp": utc(2024, 1, 1)},
        {"timestamp": utc(2024, 1, 1), "cpu": None},
        {"timestamp": utc(2024, 1, 1), "cpu": [1, 2]},
        {"timestamp": utc(2024, 1, 1), "cpu": {"nested": 1}},
    ],
)
def test_unusable_first_value_cannot_infer_a_type(first_row):
    with pytest.raises(TypeInferenceError) as exc_info:
        ColumnarAssembler().assemble([first_row], "cpu")
    assert isinstance(exc_info.value, EmptyResultError)
    assert exc_info.value.status == "empty_result"


def test_row_without_timestamp_is_skipped():
    rows = [
        {"cpu": 1.5},
        {"timestamp": utc(2024, 1, 1, 1), "cpu": 2.5},
    ]
    columns = ColumnarAssembler().assemble(rows, "cpu")
    assert columns.kind is ValueKind.FLOAT
    assert columns.values == [2.5]
    assert len(columns.timestamps) == 1


def test_row_with_unrecognized_timestamp_is_skipped():
    rows = [
        {"timestamp": utc(2024, 1, 1, 1), "cpu": 1},
        {"timestamp": "2024-01-01T02:00:00Z", "cpu": 2},
        {"timestamp": 1704074400000, "cpu": 3},
    ]
    assert ColumnarAssembler().assemble(rows, "cpu").values == [1]


def test_row_without_value_is_skipped():
    rows = [
        {"timestamp": utc(2024, 1, 1, 1), "cpu": 1},
        {"timestamp": utc(2024, 1, 1, 2), "other": 2},
        {"timestamp": utc(2024, 1, 1, 3), "cpu": 3},
    ]
    columns = ColumnarAssembler().assemble(rows, "cpu")
    assert columns.values == [1, 3]
    assert columns.timestamps == [utc(2024, 1, 1, 1), utc(2024, 1, 1, 3)]


def test_integer_column_drops_other_kinds_instead_of_converting():
    rows = [
        {"timestamp": utc(2024, 1, 1, 1), "cpu": 1},
        {"timestamp": utc(2024, 1, 1, 2), "cpu": 2.5},
        {"timestamp": utc(2024, 1, 1, 3), "cpu": True},
        {"timestamp": utc(2024, 1, 1, 4), "cpu": "4"},
        {"timestamp": utc(2024, 1, 1, 5), "cpu": Int64(5)},
    ]
    columns = ColumnarAssembler().assemble(rows, "cpu")
    assert columns.values == [1, 5]
    assert all(type(v) in (int, Int64) for v in columns.values)
    assert len(columns.timestamps) == len(columns.values)


def test_boolean_column_is_not_mistaken_for_integer():
    rows = [
        {"timestamp": utc(2024, 1, 1, 1), "up": True},
        {"timestamp": utc(2024, 1, 1, 2), "up": 0},
        {"timestamp": utc(2024, 1, 1, 3), "up": False},
    ]
    columns = ColumnarAssembler().assemble(rows, "up")
    assert columns.kind is ValueKind.BOOLEAN
    assert columns.values == [True, False]


def test_string_and_timestamp_columns():
    rows = [{"timestamp": utc(2024, 1, 1, 1), "state": "ok"}]
    assert ColumnarAssembler().assemble(rows, "state").kind is ValueKind.STRING

    rows = [
        {"timestamp": utc(2024, 1, 1, 1), "boot": datetime(2023, 12, 31)},
        {"timestamp": utc(2024, 1, 1, 2), "boot": DatetimeMS(0)},
    ]
    columns = ColumnarAssembler().assemble(rows, "boot")
    assert columns.kind is ValueKind.TIMESTAMP
    assert columns.values == [utc(2023, 12, 31), utc(1970, 1, 1)]


def test_naive_and_datetime_ms_timestamps_are_read_as_utc():
    rows = [
        {"timestamp": datetime(2024, 1, 1, 1), "cpu": 1},
        {"timestamp": DatetimeMS(1704074400000), "cpu": 2},
    ]
    columns = ColumnarAssembler().assemble(rows, "cpu")
    assert columns.timestamps == [utc(2024, 1, 1, 1), utc(2024, 1, 1, 2)]
    assert all(t.tzinfo is timezone.utc for t in columns.timestamps)


def test_extra_fields_are_ignored(cpu_rows):
    rows = [dict(row, host="alpha") for row in cpu_rows]
    assert ColumnarAssembler().assemble(rows, "cpu").values == [5, 7]


def test_frame_rendering(cpu_rows):
    frame = ColumnarAssembler().assemble(cpu_rows, "cpu").to_frame()
    assert frame["name"] == "response"
    time_field, value_field = frame["fields"]
    assert time_field["name"] == "time"
    assert value_field == {"name": "values", "type": "integer", "values": [5, 7]}


def test_out_of_range_datetime_ms_timestamp_is_skipped():
    rows = [
        {"timestamp": DatetimeMS(-10**15), "cpu": 1},
        {"timestamp": utc(2024, 1, 1, 1), "cpu": 2},
    ]
    columns = ColumnarAssembler().assemble(rows, "cpu")
    assert columns.values == [2]
    assert columns.timestamps == [utc(2024, 1, 1, 1)]
