"""
Range query building.

Merges a user-written filter with the mandatory time window, builds the
projection and caps the number of returned rows.
"""

import logging
from typing import Any, Dict, List, Optional

from bson import json_util
from bson.errors import BSONError
from pymongo import ASCENDING

from query_gateway.core.errors import MalformedInputError
from query_gateway.core.models import CanonicalQuery, FindSpec, TimeWindow

logger = logging.getLogger(__name__)

TIMESTAMP_FIELD = "timestamp"
ID_FIELD = "_id"


def rewrite_quotes(text: str) -> str:
    """
    Replace single quotes with double quotes so filters can be written unescaped.

    A filter holding a literal apostrophe inside a string value is corrupted.
    """
    return text.replace("'", '"')


class RangeQueryBuilder:
    """
    Builds store-ready find specs from canonical queries.

    The final filter is an $and of the lower time bound, the upper time bound
    and every top-level clause of the user filter, in that order.
    """

    def parse_filter(self, find_query_text: str) -> List[Dict[str, Any]]:
        """
        Parse a user filter written in MongoDB Extended JSON.

        Args:
            find_query_text: Filter text, single quotes allowed

        Returns:
            One single-key clause per top-level filter key, in original order

        Raises:
            MalformedInputError: If the filter is not a valid document
        """
        if not find_query_text or not find_query_text.strip():
            return []

        try:
            parsed = json_util.loads(rewrite_quotes(find_query_text))
        except (ValueError, TypeError, KeyError, BSONError) as e:
            logger.error("error parsing the find query %r: %s", find_query_text, e)
            raise MalformedInputError(f"invalid find query: {e}") from e

        if not isinstance(parsed, dict):
            logger.error("find query is not a document: %r", find_query_text)
            raise MalformedInputError(
                f"invalid find query: expected a document, got {type(parsed).__name__}"
            )

        return [{key: value} for key, value in parsed.items()]

    def build_filter(
        self, find_query_text: str, window: TimeWindow
    ) -> Dict[str, Any]:
        clauses: List[Dict[str, Any]] = [
            {TIMESTAMP_FIELD: {"$gte": window.start}},
            {TIMESTAMP_FIELD: {"$lte": window.end}},
        ]
        clauses.extend(self.parse_filter(find_query_text))
        return {"$and": clauses}

    @staticmethod
    def build_projection(field: str) -> Dict[str, int]:
        return {field: 1, TIMESTAMP_FIELD: 1, ID_FIELD: 0}

    def build(
        self,
        query: CanonicalQuery,
        window: TimeWindow,
        max_points: Optional[int] = None,
    ) -> FindSpec:
        """
        Build the find spec for a canonical query.

        Args:
            query: Normalized query
            window: Inclusive time window
            max_points: Row cap; falls back to the query's own cap when None

        Returns:
            FindSpec sorted by ascending timestamp
        """
        limit = query.max_points if max_points is None else max_points

        spec = FindSpec(
            filter=self.build_filter(query.find_query_text, window),
            projection=self.build_projection(query.projection_field),
            sort=[(TIMESTAMP_FIELD, ASCENDING)],
            limit=max(limit, 0),
        )

        logger.debug("final filter: %s", spec.filter)
        logger.debug("final projection: %s", spec.projection)
        return spec
