"""Schema discovery and value type mapping."""

from query_gateway.schema.discovery import SchemaDiscovery
from query_gateway.schema.type_mappings import TypeMapper

__all__ = ["SchemaDiscovery", "TypeMapper"]
