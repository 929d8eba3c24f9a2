"""Core interfaces, models and errors for the query gateway."""

from query_gateway.core.interfaces import (
    IStoreExecutor,
    ISchemaProbe,
)
from query_gateway.core.models import (
    QueryPayload,
    TimeRange,
    BuilderQueryModel,
    CodeQueryModel,
    CanonicalQuery,
    TimeWindow,
    FindSpec,
    ValueKind,
    ColumnPair,
    LabelValue,
    TagOption,
    MetricDescriptor,
    MetricsRequest,
    HealthResult,
    PayloadType,
    QueryEnvelope,
    QueryDataRequest,
)
from query_gateway.core.errors import (
    GatewayError,
    MalformedInputError,
    StoreUnavailableError,
    EmptyResultError,
    TypeInferenceError,
)

__all__ = [
    "IStoreExecutor",
    "ISchemaProbe",
    "QueryPayload",
    "TimeRange",
    "BuilderQueryModel",
    "CodeQueryModel",
    "CanonicalQuery",
    "TimeWindow",
    "FindSpec",
    "ValueKind",
    "ColumnPair",
    "LabelValue",
    "TagOption",
    "MetricDescriptor",
    "MetricsRequest",
    "HealthResult",
    "PayloadType",
    "QueryEnvelope",
    "QueryDataRequest",
    "GatewayError",
    "MalformedInputError",
    "StoreUnavailableError",
    "EmptyResultError",
    "TypeInferenceError",
]
