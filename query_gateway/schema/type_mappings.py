"""
Type mapping utilities for converting store values to column kinds.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple, Type

from bson.datetime_ms import DatetimeMS
from bson.errors import BSONError

from query_gateway.core.models import ValueKind


class TypeMapper:
    """Maps decoded BSON scalars to the closed set of column kinds."""

    # Checked in order: bool is a subclass of int, so it must come first.
    # bson.Int64 subclasses int and maps to INTEGER.
    KIND_ORDER: Tuple[Tuple[Type, ValueKind], ...] = (
        (bool, ValueKind.BOOLEAN),
        (int, ValueKind.INTEGER),
        (float, ValueKind.FLOAT),
        (str, ValueKind.STRING),
        (datetime, ValueKind.TIMESTAMP),
    )

    KIND_TO_PYTHON: Dict[ValueKind, Type] = {
        ValueKind.BOOLEAN: bool,
        ValueKind.INTEGER: int,
        ValueKind.FLOAT: float,
        ValueKind.STRING: str,
        ValueKind.TIMESTAMP: datetime,
    }

    @classmethod
    def infer_kind(cls, value: Any) -> Optional[ValueKind]:
        """
        Get the column kind of a value.

        Args:
            value: Decoded store value

        Returns:
            The matching ValueKind, or None when the value is not a supported scalar
        """
        if isinstance(value, DatetimeMS):
            return ValueKind.TIMESTAMP
        for python_type, kind in cls.KIND_ORDER:
            if isinstance(value, python_type):
                return kind
        return None

    @classmethod
    def extract(cls, value: Any, kind: ValueKind) -> Tuple[bool, Any]:
        """
        Extract a value of the given kind without converting across kinds.

        Returns:
            (True, value) when the value is of the kind, (False, None) otherwise
        """
        if kind is ValueKind.TIMESTAMP:
            timestamp = cls.to_timestamp(value)
            return timestamp is not None, timestamp
        if cls.infer_kind(value) is not kind:
            return False, None
        return True, value

    @staticmethod
    def to_timestamp(value: Any) -> Optional[datetime]:
        """Return a timezone-aware datetime for recognized timestamp values."""
        if isinstance(value, DatetimeMS):
            try:
                value = value.as_datetime()
            except (OverflowError, ValueError, BSONError):
                return None
        if not isinstance(value, datetime):
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
