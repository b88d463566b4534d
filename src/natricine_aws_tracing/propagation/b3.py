"""B3 style span context propagation over message attributes."""

import re

from opentelemetry.trace import (
    INVALID_SPAN_ID,
    INVALID_TRACE_ID,
    SpanContext,
    TraceFlags,
    format_span_id,
    format_trace_id,
)

from natricine_aws_tracing.attributes import as_container

# Message attribute keys
TRACE_ID_KEY = "B3-Trace-ID"
SPAN_ID_KEY = "B3-Span-ID"
SPAN_SAMPLED_KEY = "B3-Span-Sampled"

_TRACE_ID_RE = re.compile(r"[0-9a-fA-F]{32}")
_SPAN_ID_RE = re.compile(r"[0-9a-fA-F]{16}")
_SAMPLED_VALUES = {"1": True, "true": True, "0": False, "false": False}


def format_sampled(sampled: bool) -> str:
    return "1" if sampled else "0"


def parse_trace_id(value: str) -> int | None:
    """Parse a 32 character hex trace id. Returns None if malformed."""
    if not _TRACE_ID_RE.fullmatch(value):
        return None
    trace_id = int(value, 16)
    return trace_id if trace_id != INVALID_TRACE_ID else None


def parse_span_id(value: str) -> int | None:
    """Parse a 16 character hex span id. Returns None if malformed."""
    if not _SPAN_ID_RE.fullmatch(value):
        return None
    span_id = int(value, 16)
    return span_id if span_id != INVALID_SPAN_ID else None


def parse_sampled(value: str) -> bool | None:
    """Parse a B3 sampled flag. Returns None if unrecognized."""
    return _SAMPLED_VALUES.get(value)


class B3Propagator:
    """Propagator using B3 formatted trace and span ids.

    Stateless; a single instance can be shared between concurrent consumers.
    """

    def inject(self, span_context: SpanContext, container: object) -> bool:
        target = as_container(container)
        if target is None:
            return False

        target.set(TRACE_ID_KEY, format_trace_id(span_context.trace_id))
        target.set(SPAN_ID_KEY, format_span_id(span_context.span_id))
        target.set(
            SPAN_SAMPLED_KEY, format_sampled(span_context.trace_flags.sampled)
        )
        return True

    def extract(self, container: object) -> SpanContext | None:
        source = as_container(container)
        if source is None:
            return None

        attrs = source.to_dict()

        trace_id = parse_trace_id(attrs.get(TRACE_ID_KEY, ""))
        if trace_id is None:
            return None

        span_id = parse_span_id(attrs.get(SPAN_ID_KEY, ""))
        if span_id is None:
            return None

        sampled = parse_sampled(attrs.get(SPAN_SAMPLED_KEY, "")) or False
        flags = TraceFlags.SAMPLED if sampled else TraceFlags.DEFAULT

        return SpanContext(
            trace_id=trace_id,
            span_id=span_id,
            is_remote=True,
            trace_flags=TraceFlags(flags),
        )
