"""Query execution and columnar assembly."""

from query_gateway.execution.executor import QueryExecutor
from query_gateway.execution.column_assembler import ColumnarAssembler

__all__ = ["QueryExecutor", "ColumnarAssembler"]
