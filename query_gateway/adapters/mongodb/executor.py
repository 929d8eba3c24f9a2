"""
MongoDB store executor.

Runs built find specs against collections of a live database handle.
"""

from typing import Any, Dict, List, Optional

import pymongo
from pymongo.database import Database
from pymongo.collection import Collection

from query_gateway.core.models import FindSpec


class MongoStoreExecutor:
    """
    Executes find() queries on MongoDB.

    Implements the IStoreExecutor interface for MongoDB.
    """

    def __init__(self, db: Database, timeout_ms: Optional[int] = None):
        """
        Initialize MongoDB store executor.

        Args:
            db: Live database handle, shared across requests
            timeout_ms: Deadline applied to each store operation, if any
        """
        self.db = db
        self.timeout_ms = timeout_ms

    def _timeout(self):
        seconds = self.timeout_ms / 1000 if self.timeout_ms else None
        return pymongo.timeout(seconds)

    def find(self, collection: str, spec: FindSpec) -> List[Dict[str, Any]]:
        """
        Execute a find spec.

        Args:
            collection: Name of the collection
            spec: Filter, projection, sort and limit

        Returns:
            List of matching documents in sort order
        """
        coll: Collection = self.db[collection]
        with self._timeout():
            cursor = (
                coll.find(spec.filter, spec.projection)
                .sort(spec.sort)
                .limit(spec.limit)
            )
            return list(cursor)

    def ping(self) -> None:
        """Run the ping command against the database."""
        with self._timeout():
            self.db.command("ping")
