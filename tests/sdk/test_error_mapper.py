from __future__ import annotations

from ams_client_sdk.error_mapper import map_error
from ams_client_sdk.exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    ValidationError,
)
from ams_client_sdk.tracing import TraceContext


def test_error_mapper_status_classes() -> None:
    assert isinstance(map_error(401, {}, None), AuthError)
    assert isinstance(map_error(403, {}, None), PermissionDeniedError)
    assert isinstance(map_error(404, {}, None), NotFoundError)
    assert isinstance(map_error(409, {}, None), ConflictError)
    assert isinstance(map_error(503, {}, None), ServerError)
    assert type(map_error(418, {}, None)) is ApiError


def test_error_mapper_flattens_model_state() -> None:
    payload = {
        "title": "One or more validation errors occurred.",
        "status": 400,
        "traceId": "00-abc-01",
        "errors": {"Name": ["The Name field is required."], "AssetTag": ["Too long"]},
    }
    err = map_error(400, payload, "fallback-trace")
    assert isinstance(err, ValidationError)
    assert err.code == "VALIDATION_ERROR"
    assert err.message == "One or more validation errors occurred."
    assert err.details == {"name": "The Name field is required.", "assetTag": "Too long"}
    assert err.trace_id == "00-abc-01"
    assert err.status_code == 400


def test_error_mapper_prefers_explicit_message_and_code() -> None:
    err = map_error(409, {"message": "Asset tag already exists", "code": "DUPLICATE"}, "trace-1")
    assert err.code == "DUPLICATE"
    assert err.message == "Asset tag already exists"
    assert err.trace_id == "trace-1"
    assert err.details is None


def test_error_mapper_reduces_traceparent_trace_id() -> None:
    payload = {"title": "Not Found", "traceId": "00-4bf92f3577b34da6a3ce929d0e0e4736-00f067aa0ba902b7-00"}
    err = map_error(404, payload, "fallback-trace")
    assert err.trace_id == "4bf92f3577b34da6a3ce929d0e0e4736"


def test_transient_errors() -> None:
    assert map_error(503, {}, None).transient
    assert map_error(429, {}, None).transient
    assert not map_error(409, {}, None).transient


def test_validation_error_field_messages() -> None:
    err = map_error(400, {"errors": {"SerialNumber": ["Required"]}}, None)
    assert isinstance(err, ValidationError)
    assert err.field_messages == {"serialNumber": "Required"}
    assert map_error(400, {}, None).field_messages == {}


def test_trace_context_reads_traceparent_header() -> None:
    context = TraceContext()
    context.update_from_headers({"traceparent": "00-4BF92F3577B34DA6A3CE929D0E0E4736-00f067aa0ba902b7-01"})
    assert context.trace_id == "4bf92f3577b34da6a3ce929d0e0e4736"

    context.update_from_headers({"x-trace-id": "abc"})
    assert context.trace_id == "abc"
