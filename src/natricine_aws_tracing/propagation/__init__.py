"""Span context propagation via message attributes."""

from typing import Protocol

from opentelemetry.trace import SpanContext

from natricine_aws_tracing.propagation.b3 import B3Propagator


class Propagator(Protocol):
    """Propagates a span context to and from message attributes.

    Containers are attribute adapters (see ``natricine_aws_tracing.attributes``).
    Implementations must not raise on malformed input.
    """

    def inject(self, span_context: SpanContext, container: object) -> bool:
        """Write span_context into container.

        Returns False, leaving container untouched, when the container shape
        is not supported.
        """
        ...

    def extract(self, container: object) -> SpanContext | None:
        """Read a span context from container, or None if none is found."""
        ...


__all__ = ["B3Propagator", "Propagator"]
