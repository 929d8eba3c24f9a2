"""MongoDB adapter for the query gateway."""

from query_gateway.adapters.mongodb.executor import MongoStoreExecutor
from query_gateway.adapters.mongodb.schema_probe import MongoSchemaProbe

__all__ = ["MongoStoreExecutor", "MongoSchemaProbe"]
