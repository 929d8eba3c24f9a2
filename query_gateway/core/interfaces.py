"""
Abstract interfaces for store adapters.

These protocols define the contract a backing store must implement to serve
queries and metadata discovery through the gateway.
"""

from typing import Any, Dict, List, Optional, Protocol

from query_gateway.core.models import FindSpec


class IStoreExecutor(Protocol):
    """
    Run built queries against a named collection.

    Implementations wrap a live store handle; connection management and
    authentication happen outside the gateway.
    """

    def find(self, collection: str, spec: FindSpec) -> List[Dict[str, Any]]:
        """
        Execute a find() and return the matching rows in store order.

        Args:
            collection: Name of the collection to query
            spec: Filter, projection, sort and limit to apply

        Returns:
            List of loosely typed rows
        """
        ...

    def ping(self) -> None:
        """Round-trip to the store, raising if it cannot be reached."""
        ...


class ISchemaProbe(Protocol):
    """
    Probe collection metadata without a schema registry.

    Discovery is a two-phase protocol: enumerate candidate collections, then
    probe each candidate's tags and their values.
    """

    def list_collections(self) -> List[Dict[str, Any]]:
        """
        Return the metadata document of every collection.

        Returns:
            List of documents holding at least "name" and "type"
        """
        ...

    def latest_tags(self, collection: str) -> Optional[Any]:
        """
        Get the tag bag of the most recent document in a collection.

        Args:
            collection: Name of the collection

        Returns:
            The "tags" value of the newest document, or None if the
            collection is empty
        """
        ...

    def distinct_values(self, collection: str, field_path: str) -> List[Any]:
        """
        Get every distinct value of a field across the whole collection.

        Args:
            collection: Name of the collection
            field_path: Dotted path to the field (e.g., "tags.host")

        Returns:
            List of distinct values
        """
        ...
