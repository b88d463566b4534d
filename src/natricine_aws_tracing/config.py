"""Configuration dataclasses for SNS/SQS tracing."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from opentelemetry.trace import SpanKind
from opentelemetry.util.types import AttributeValue

from natricine_aws_tracing.message import format_span_name
from natricine_aws_tracing.propagation import B3Propagator, Propagator


@dataclass(frozen=True)
class StartOptions:
    """Options applied to spans started from received messages."""

    kind: SpanKind = SpanKind.CONSUMER
    """Span kind for message spans."""

    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)
    """Extra span attributes."""


@dataclass(frozen=True)
class TracingConfig:
    """Configuration for SQS tracing.

    Immutable and safe to share between concurrent consumers.
    """

    propagator: Propagator = field(default_factory=B3Propagator)
    """How span context is carried on message attributes."""

    format_span_name: Callable[[Any], str] = format_span_name
    """Builds the span name for a received message."""

    start_options: StartOptions = field(default_factory=StartOptions)
    """Options for spans started from messages."""

    get_start_options: Callable[[Any], StartOptions] | None = None
    """Per message start options. If set, start_options is ignored."""

    raw_message_delivery: bool = False
    """Set when the SNS subscription delivers raw messages.

    Raw message attributes are handed to the propagator directly instead of
    being rebuilt from the SNS envelope in the message body.
    """

    def options_for(self, message: Any) -> StartOptions:
        if self.get_start_options is not None:
            return self.get_start_options(message)
        return self.start_options
