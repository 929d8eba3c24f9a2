import json

import pytest

from query_gateway.core.errors import MalformedInputError
from query_gateway.core.models import CanonicalQuery
from query_gateway.query.normalizer import QueryNormalizer

PAYLOAD = {"findQuery": "{'tags.host': 'alpha'}", "projection": "usage_idle"}
TIME_RANGE = {"from": "2024-01-01T00:00:00Z", "to": "2024-01-02T00:00:00Z"}


def builder_descriptor(**overrides):
    body = {
        "editorMode": "builder",
        "target": "cpu",
        "payload": dict(PAYLOAD),
        "intervalMs": 1000,
        "maxDataPoints": 500,
        "timeRange": TIME_RANGE,
    }
    body.update(overrides)
    return body


def code_descriptor(**overrides):
    body = builder_descriptor(editorMode="code", payload=json.dumps(PAYLOAD))
    body.update(overrides)
    return body


def test_builder_descriptor_is_normalized():
    query = QueryNormalizer().normalize(builder_descriptor())
    assert query == CanonicalQuery(
        collection="cpu",
        find_query_text="{'tags.host': 'alpha'}",
        projection_field="usage_idle",
        max_points=500,
    )


def test_code_and_builder_descriptors_normalize_identically():
    normalizer = QueryNormalizer()
    from_code = normalizer.normalize(json.dumps(code_descriptor()))
    from_builder = normalizer.normalize(json.dumps(builder_descriptor()).encode())
    assert from_code == from_builder
    assert from_code.model_dump_json() == from_builder.model_dump_json()


def test_unknown_editor_mode_falls_back_to_builder():
    query = QueryNormalizer().normalize(builder_descriptor(editorMode="visual"))
    assert query.projection_field == "usage_idle"


def test_missing_editor_mode_falls_back_to_builder():
    body = builder_descriptor()
    del body["editorMode"]
    assert QueryNormalizer().normalize(body).collection == "cpu"


def test_extra_fields_are_ignored():
    body = builder_descriptor(refId="A", datasource={"uid": "xyz"})
    assert QueryNormalizer().normalize(body).collection == "cpu"


def test_absent_find_query_means_no_filter():
    body = builder_descriptor(payload={"projection": "usage_idle"})
    assert QueryNormalizer().normalize(body).find_query_text == ""


def test_descriptor_keeps_time_range_and_interval():
    descriptor = QueryNormalizer().parse_descriptor(code_descriptor())
    assert descriptor.time_range.from_ == "2024-01-01T00:00:00Z"
    assert descriptor.interval_ms == 1000


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "[1, 2, 3]",
        json.dumps(code_descriptor(payload="{'findQuery': ")),
        json.dumps(code_descriptor(payload="")),
        json.dumps(builder_descriptor(payload="a string in builder mode")),
    ],
)
def test_malformed_descriptors_are_rejected(raw):
    with pytest.raises(MalformedInputError, match="json unmarshal") as exc_info:
        QueryNormalizer().normalize(raw)
    assert exc_info.value.to_payload()["status"] == "bad_request"
