"""Deferred span context carried on an OpenTelemetry Context.

Decode once when a message arrives, start the span later (for example after
validating the message) without parsing the message again.
"""

from collections.abc import Mapping
from typing import Any

from opentelemetry import context as otel_context
from opentelemetry.context import Context
from opentelemetry.trace import SpanContext

from natricine_aws_tracing.attributes import SQSMessageAttributes
from natricine_aws_tracing.config import TracingConfig
from natricine_aws_tracing.message import get_message_attributes

_SPAN_CONTEXT_KEY = otel_context.create_key("natricine-aws-message-span-context")

_DEFAULT_CONFIG = TracingConfig()


def span_context_from_message(
    message: Mapping[str, Any],
    config: TracingConfig | None = None,
) -> SpanContext | None:
    """Decode the span context propagated on a received message."""
    config = config or _DEFAULT_CONFIG
    attributes = get_message_attributes(message, config.raw_message_delivery)
    if attributes is None:
        return None
    return config.propagator.extract(SQSMessageAttributes(attributes))


def attach_span_context(
    context: Context | None,
    message: Mapping[str, Any],
    config: TracingConfig | None = None,
) -> Context:
    """Return a context carrying the message's span context.

    If the message carries no span context the given context is returned
    unchanged (the current context when None).
    """
    if context is None:
        context = otel_context.get_current()

    span_context = span_context_from_message(message, config)
    if span_context is None:
        return context

    return otel_context.set_value(_SPAN_CONTEXT_KEY, span_context, context)


def retrieve_span_context(context: Context | None = None) -> SpanContext | None:
    """Return the span context stored by attach_span_context, if any."""
    value = otel_context.get_value(_SPAN_CONTEXT_KEY, context)
    return value if isinstance(value, SpanContext) else None
