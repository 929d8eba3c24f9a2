"""
Query execution coordinator.

Handles execution of built queries through a store-specific executor.
"""

import logging
from typing import Any, Dict, List

from bson.errors import BSONError
from pymongo.errors import PyMongoError

from query_gateway.core.errors import StoreUnavailableError
from query_gateway.core.interfaces import IStoreExecutor
from query_gateway.core.models import FindSpec

logger = logging.getLogger(__name__)


class QueryExecutor:
    """
    Coordinates query execution.

    Wraps a store-specific executor and turns driver failures into
    StoreUnavailableError. Failed calls are logged and never retried.
    """

    def __init__(self, executor: IStoreExecutor):
        """
        Initialize query executor.

        Args:
            executor: Store-specific executor implementation
        """
        self.executor = executor

    def find(self, collection: str, spec: FindSpec) -> List[Dict[str, Any]]:
        """
        Run a find spec against a collection.

        Args:
            collection: Name of the collection
            spec: Built find spec

        Returns:
            Rows in store order

        Raises:
            StoreUnavailableError: If the store fails to run the query
        """
        try:
            rows = self.executor.find(collection, spec)
        except (PyMongoError, BSONError) as e:
            logger.warning("error running the find() query on %s: %s", collection, e)
            raise StoreUnavailableError(f"find on {collection!r} failed: {e}") from e

        logger.debug("query on %s returned %d rows", collection, len(rows))
        return rows

    def ping(self) -> None:
        """
        Check that the store answers.

        Raises:
            StoreUnavailableError: If the ping fails
        """
        try:
            self.executor.ping()
        except (PyMongoError, BSONError) as e:
            logger.error("error trying to ping the database: %s", e)
            raise StoreUnavailableError(str(e)) from e
