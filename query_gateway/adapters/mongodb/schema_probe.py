"""
MongoDB schema probing.

Implements ISchemaProbe for MongoDB. Collections carry no schema, so tag
keys are read from the newest document and values from distinct().
"""

from typing import Any, Dict, List, Optional

import pymongo
from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.collection import Collection

TAGS_PROJECTION = {"tags": 1, "_id": 0}
TAGS_SORT = [("timestamp", DESCENDING)]


class MongoSchemaProbe:
    """
    Probes MongoDB collection metadata.

    Implements the ISchemaProbe interface for MongoDB.
    """

    def __init__(self, db: Database, timeout_ms: Optional[int] = None):
        """
        Initialize MongoDB schema probe.

        Args:
            db: Live database handle, shared across requests
            timeout_ms: Deadline applied to each store operation, if any
        """
        self.db = db
        self.timeout_ms = timeout_ms

    def _timeout(self):
        seconds = self.timeout_ms / 1000 if self.timeout_ms else None
        return pymongo.timeout(seconds)

    def list_collections(self) -> List[Dict[str, Any]]:
        """Return the listCollections metadata documents."""
        with self._timeout():
            return list(self.db.list_collections())

    def latest_tags(self, collection: str) -> Optional[Any]:
        """
        Get the tags of the most recent document.

        Args:
            collection: Name of the collection

        Returns:
            The newest document's "tags" value, or None when the collection is empty
        """
        coll: Collection = self.db[collection]
        with self._timeout():
            docs = list(coll.find({}, TAGS_PROJECTION).sort(TAGS_SORT).limit(1))

        if not docs:
            return None
        return docs[0].get("tags")

    def distinct_values(self, collection: str, field_path: str) -> List[Any]:
        """
        Get distinct values for a field over the whole collection.

        Args:
            collection: Name of the collection
            field_path: Dotted path to the field

        Returns:
            List of distinct values
        """
        coll: Collection = self.db[collection]
        with self._timeout():
            return coll.distinct(field_path)
