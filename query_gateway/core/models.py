"""
Shared data models for the query gateway.

Wire-facing models keep the camelCase names the front end sends and expose
snake_case attributes through aliases.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class QueryPayload(BaseModel):
    """The find query and projection embedded in a query descriptor."""

    model_config = ConfigDict(populate_by_name=True)

    find_query: str = Field("", alias="findQuery")
    projection: str = ""


class TimeRange(BaseModel):
    """RFC3339 window bounds as embedded in a query descriptor."""

    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field("", alias="from")
    to: str = ""


class _DescriptorBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target: str = ""
    interval_ms: int = Field(0, alias="intervalMs")
    max_data_points: int = Field(0, alias="maxDataPoints")
    time_range: TimeRange = Field(default_factory=TimeRange, alias="timeRange")


class BuilderQueryModel(_DescriptorBase):
    """Descriptor produced by the query builder: the payload is already structured."""

    payload: QueryPayload = Field(default_factory=QueryPayload)


class CodeQueryModel(_DescriptorBase):
    """Descriptor produced by the code editor: the payload is a JSON document in a string."""

    payload: str = ""


class CanonicalQuery(BaseModel):
    """Normalized query, independent of the descriptor's wire shape."""

    collection: str
    find_query_text: str = ""
    projection_field: str
    max_points: int = 0


class TimeWindow(BaseModel):
    """Inclusive [start, end] window every query is bounded by."""

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_time_range(cls, time_range: TimeRange) -> "TimeWindow":
        return cls(start=time_range.from_, end=time_range.to)


class FindSpec(BaseModel):
    """A store-ready find(): filter, projection, ordering and row cap."""

    filter: Dict[str, Any]
    projection: Dict[str, int]
    sort: List[Tuple[str, int]]
    limit: int = 0


class ValueKind(str, Enum):
    """Closed set of scalar kinds a value column can hold."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"


class ColumnPair(BaseModel):
    """Two parallel, homogeneously typed columns ready for charting."""

    kind: ValueKind
    timestamps: List[datetime] = Field(default_factory=list)
    values: List[Any] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.timestamps)

    def to_frame(self, name: str = "response") -> Dict[str, Any]:
        """Render the columns as a labeled data frame."""
        return {
            "name": name,
            "fields": [
                {"name": "time", "type": "time", "values": list(self.timestamps)},
                {"name": "values", "type": self.kind.value, "values": list(self.values)},
            ],
        }


class PayloadType(str, Enum):
    """Widget types the front end knows how to render for a tag."""

    SELECT = "select"
    MULTI_SELECT = "multi-select"
    INPUT = "input"
    TEXTAREA = "textarea"


class LabelValue(BaseModel):
    label: str
    value: str


class TagOption(BaseModel):
    """A tag key and the values it takes across a collection."""

    key: str
    value_options: List[LabelValue] = Field(default_factory=list)

    def to_payload(self, payload_type: PayloadType = PayloadType.SELECT) -> Dict[str, Any]:
        return {
            "label": self.key,
            "name": self.key,
            "type": payload_type.value,
            "placeholder": f"Select {self.key}",
            "options": [option.model_dump() for option in self.value_options],
        }


class MetricDescriptor(BaseModel):
    """A queryable collection and its tag options."""

    name: str
    tag_options: List[TagOption] = Field(default_factory=list)

    def to_reply(self) -> Dict[str, Any]:
        """Render the descriptor in the shape the query editor consumes."""
        reply: Dict[str, Any] = {"label": self.name, "value": self.name}
        if self.tag_options:
            reply["payload"] = [tag.to_payload() for tag in self.tag_options]
        return reply


class MetricsRequest(BaseModel):
    """Body of a metrics discovery request. The payload is currently unused."""

    metric: str = ""
    payload: Dict[str, str] = Field(default_factory=dict)


class HealthResult(BaseModel):
    status: str
    message: str

    @property
    def ok(self) -> bool:
        return self.status == "OK"


class QueryEnvelope(BaseModel):
    """One query of a multi-query request, with the window and cap supplied by the caller."""

    model_config = ConfigDict(populate_by_name=True)

    ref_id: Optional[str] = Field(None, alias="refId")
    json_body: Dict[str, Any] = Field(default_factory=dict, alias="json")
    time_range: Optional[TimeRange] = Field(None, alias="timeRange")
    max_data_points: Optional[int] = Field(None, alias="maxDataPoints")


class QueryDataRequest(BaseModel):
    queries: List[QueryEnvelope] = Field(default_factory=list)
