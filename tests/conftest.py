"""Test fixtures for natricine-aws-tracing."""

from typing import Any

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import SpanContext, TraceFlags

# Consistent ids so assertions can use literal hex values
TRACE_ID = int.from_bytes(
    bytes([97, 98, 99, 100, 101, 102, 103, 104, 105, 103, 107, 108, 109, 110, 111, 113]),
    "big",
)
SPAN_ID = int.from_bytes(bytes([97, 98, 99, 100, 101, 102, 103, 104]), "big")
TRACE_ID_HEX = "616263646566676869676b6c6d6e6f71"
SPAN_ID_HEX = "6162636465666768"


def make_span_context(sampled: bool = True) -> SpanContext:
    return SpanContext(
        trace_id=TRACE_ID,
        span_id=SPAN_ID,
        is_remote=False,
        trace_flags=TraceFlags(TraceFlags.SAMPLED if sampled else TraceFlags.DEFAULT),
    )


def b3_attributes(
    trace_id: str = TRACE_ID_HEX,
    span_id: str = SPAN_ID_HEX,
    sampled: str | None = "1",
) -> dict[str, Any]:
    """Build SQS-shaped message attributes carrying B3 keys."""
    attrs: dict[str, Any] = {
        "B3-Trace-ID": {"DataType": "String", "StringValue": trace_id},
        "B3-Span-ID": {"DataType": "String", "StringValue": span_id},
    }
    if sampled is not None:
        attrs["B3-Span-Sampled"] = {"DataType": "String", "StringValue": sampled}
    return attrs


class FakeSQSClient:
    """Records send_message calls instead of talking to AWS."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.batch_calls: list[dict[str, Any]] = []
        self.error = error
        self.region_name = "eu-west-1"

    async def send_message(self, **kwargs: Any) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        self.calls.append(kwargs)
        return {"MessageId": "some-message-id"}

    async def send_message_batch(self, **kwargs: Any) -> dict[str, Any]:
        self.batch_calls.append(kwargs)
        return {"Successful": [], "Failed": []}


class FakeSNSClient:
    """Records publish calls instead of talking to AWS."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self.error = error

    async def publish(self, **kwargs: Any) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        self.calls.append(kwargs)
        return {"MessageId": "some-message-id"}


@pytest.fixture
def span_exporter():
    """Create an in-memory span exporter for testing."""
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter):
    """Create a tracer provider with in-memory exporter."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider
