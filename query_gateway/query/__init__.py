"""Query descriptor normalization and range query building."""

from query_gateway.query.normalizer import QueryNormalizer
from query_gateway.query.range_builder import RangeQueryBuilder, rewrite_quotes

__all__ = ["QueryNormalizer", "RangeQueryBuilder", "rewrite_quotes"]
