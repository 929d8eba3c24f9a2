"""
Query Gateway - time-series query gateway over schema-less MongoDB collections.

Main entry point for creating gateways bound to a backing store.
"""

from query_gateway.orchestrator import QueryGateway

__all__ = ["QueryGateway"]
