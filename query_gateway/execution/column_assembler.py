"""
Columnar assembly of query results.

Turns row-oriented, loosely typed documents into two parallel columns whose
value type is decided once, from the first row.
"""

import logging
from typing import Any, Dict, Sequence

from query_gateway.core.errors import EmptyResultError, TypeInferenceError
from query_gateway.core.models import ColumnPair
from query_gateway.query.range_builder import TIMESTAMP_FIELD
from query_gateway.schema.type_mappings import TypeMapper

logger = logging.getLogger(__name__)

_MISSING = object()


class ColumnarAssembler:
    """
    Builds homogeneous ColumnPairs from schema-less rows.

    The projected value of the first row fixes the column kind. Later rows
    whose timestamp is unrecognized, or whose value is absent or of another
    kind, are dropped without raising.
    """

    def assemble(self, rows: Sequence[Dict[str, Any]], field: str) -> ColumnPair:
        """
        Assemble the time and value columns for a projected field.

        Args:
            rows: Rows in ascending timestamp order
            field: Name of the projected field

        Returns:
            ColumnPair with equally long timestamp and value columns

        Raises:
            EmptyResultError: If there are no rows
            TypeInferenceError: If the first row has no usable value for the field
        """
        if not rows:
            raise EmptyResultError("got no fields back...")

        sample = rows[0].get(field, _MISSING)
        if sample is _MISSING:
            raise TypeInferenceError(f"first row has no value for {field!r}")

        kind = TypeMapper.infer_kind(sample)
        if kind is None:
            raise TypeInferenceError(
                f"unsupported value type {type(sample).__name__} for {field!r}"
            )
        logger.debug("detected value kind %s from sample %r", kind.value, sample)

        columns = ColumnPair(kind=kind)
        for i, row in enumerate(rows):
            timestamp = TypeMapper.to_timestamp(row.get(TIMESTAMP_FIELD))
            if timestamp is None:
                logger.debug("skipping row %d: no usable timestamp", i)
                continue

            if field not in row:
                logger.debug("skipping row %d: no value for %s", i, field)
                continue

            ok, value = TypeMapper.extract(row[field], kind)
            if not ok:
                logger.debug(
                    "skipping row %d: %r is not of kind %s", i, row[field], kind.value
                )
                continue

            columns.timestamps.append(timestamp)
            columns.values.append(value)

        logger.debug(
            "assembled %d of %d rows into a %s column",
            len(columns), len(rows), kind.value,
        )
        return columns
