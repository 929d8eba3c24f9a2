"""
Query gateway - main entry point.

Coordinates all components to serve chart queries and metadata discovery.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from pymongo import MongoClient

from query_gateway.config import GatewaySettings
from query_gateway.core.errors import GatewayError, MalformedInputError, StoreUnavailableError
from query_gateway.core.interfaces import IStoreExecutor, ISchemaProbe
from query_gateway.core.models import (
    ColumnPair,
    HealthResult,
    MetricDescriptor,
    MetricsRequest,
    QueryDataRequest,
    QueryEnvelope,
    TimeRange,
    TimeWindow,
)
from query_gateway.execution.column_assembler import ColumnarAssembler
from query_gateway.execution.executor import QueryExecutor
from query_gateway.query.normalizer import QueryNormalizer, RawDescriptor
from query_gateway.query.range_builder import RangeQueryBuilder
from query_gateway.schema.discovery import SchemaDiscovery

logger = logging.getLogger(__name__)


class QueryGateway:
    """
    Main orchestrator for time-series queries over a schema-less store.

    Each query runs normalize -> build -> execute -> assemble, strictly in
    sequence. Discovery runs independently. The only state shared between
    requests is the store handle held by the adapters.
    """

    def __init__(
        self,
        store_executor: IStoreExecutor,
        schema_probe: ISchemaProbe,
        client: Optional[MongoClient] = None,
    ):
        """
        Initialize the gateway with store adapters.

        Args:
            store_executor: Store-specific query executor
            schema_probe: Store-specific schema probe
            client: Owning client, closed by close() when given
        """
        self._client = client

        self.normalizer = QueryNormalizer()
        self.range_builder = RangeQueryBuilder()
        self.query_executor = QueryExecutor(store_executor)
        self.assembler = ColumnarAssembler()
        self.schema_discovery = SchemaDiscovery(schema_probe)

    @classmethod
    def from_mongodb(
        cls,
        mongo_uri: str,
        database_name: str,
        timeout_ms: Optional[int] = None,
    ) -> "QueryGateway":
        """
        Create a gateway for MongoDB.

        Args:
            mongo_uri: MongoDB connection URI
            database_name: Name of the database holding the time-series collections
            timeout_ms: Deadline applied to each store operation, if any

        Returns:
            Configured QueryGateway for MongoDB
        """
        from query_gateway.adapters.mongodb import MongoSchemaProbe, MongoStoreExecutor

        logger.debug("creating a MongoDB gateway for database %s", database_name)
        # Out-of-range dates decode as DatetimeMS instead of raising.
        client: MongoClient = MongoClient(
            mongo_uri, tz_aware=True, datetime_conversion="DATETIME_AUTO"
        )
        db = client[database_name]

        return cls(
            store_executor=MongoStoreExecutor(db, timeout_ms=timeout_ms),
            schema_probe=MongoSchemaProbe(db, timeout_ms=timeout_ms),
            client=client,
        )

    @classmethod
    def from_settings(cls, settings: GatewaySettings) -> "QueryGateway":
        return cls.from_mongodb(
            mongo_uri=settings.mongo_uri,
            database_name=settings.database_name,
            timeout_ms=settings.query_timeout_ms,
        )

    def close(self):
        """Release the store client, if the gateway owns one."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def query(
        self,
        raw: RawDescriptor,
        window: Optional[TimeWindow] = None,
        max_points: Optional[int] = None,
    ) -> ColumnPair:
        """
        Run one chart query.

        Args:
            raw: Query descriptor in either wire shape
            window: Inclusive time window; taken from the descriptor when None
            max_points: Row cap; taken from the descriptor when None

        Returns:
            ColumnPair for the projected field

        Raises:
            GatewayError: Any malformed-input, store or empty-result condition
        """
        descriptor = self.normalizer.parse_descriptor(raw)
        canonical = self.normalizer.to_canonical(descriptor)

        if window is None:
            window = self._window_from(descriptor.time_range)

        spec = self.range_builder.build(canonical, window, max_points)
        rows = self.query_executor.find(canonical.collection, spec)
        return self.assembler.assemble(rows, canonical.projection_field)

    @staticmethod
    def _window_from(time_range: TimeRange) -> TimeWindow:
        try:
            return TimeWindow.from_time_range(time_range)
        except ValidationError as e:
            logger.error("error decoding the time range: %s", e)
            raise MalformedInputError(f"invalid time range: {e}") from e

    def run_query(self, envelope: QueryEnvelope) -> Dict[str, Any]:
        """
        Answer one query of a multi-query request.

        Returns:
            {"frames": [...]} on success, or the error payload
        """
        logger.debug("answering query request %s", envelope.ref_id)
        try:
            window = None
            if envelope.time_range is not None:
                window = self._window_from(envelope.time_range)
            columns = self.query(envelope.json_body, window, envelope.max_data_points)
        except GatewayError as e:
            logger.info("query %s failed (%s): %s", envelope.ref_id, e.status, e.message)
            return e.to_payload()

        return {"frames": [columns.to_frame()]}

    def query_data(self, request: QueryDataRequest) -> Dict[str, Any]:
        """
        Answer every query of a request independently, keyed by refId.

        Queries sent without a refId are keyed by their position.
        """
        results = {}
        for position, envelope in enumerate(request.queries):
            ref_id = envelope.ref_id or str(position)
            results[ref_id] = self.run_query(envelope)
        return {"results": results}

    def discover_metrics(self, request: Optional[MetricsRequest] = None) -> List[MetricDescriptor]:
        """
        Describe every queryable collection and its tag options.

        Raises:
            StoreUnavailableError: If probing any collection fails
        """
        return self.schema_discovery.discover(request)

    def check_health(self) -> HealthResult:
        """Ping the store and report the outcome."""
        try:
            self.query_executor.ping()
        except StoreUnavailableError as e:
            return HealthResult(
                status="ERROR",
                message=f"Error when pinging the database: {e.message}",
            )
        return HealthResult(status="OK", message="Data source is working!")
