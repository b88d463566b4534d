"""SQS client wrapper propagating span context on sent and received messages."""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Protocol

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.trace import NonRecordingSpan, Span, TracerProvider

from natricine_aws_tracing.attributes import TRACE_QUEUE_URL, SQSMessageAttributes
from natricine_aws_tracing.config import TracingConfig
from natricine_aws_tracing.context import (
    attach_span_context,
    span_context_from_message,
)

if TYPE_CHECKING:
    from types_aiobotocore_sqs.type_defs import (
        SendMessageBatchResultTypeDef,
        SendMessageResultTypeDef,
    )


class MessageSender(Protocol):
    """Protocol for clients that send messages to an SQS queue."""

    async def send_message(self, **kwargs: Any) -> Any:
        """Send a message (boto SendMessage keyword arguments)."""
        ...


class TracingSQS:
    """SQS client wrapper that propagates span context.

    Sent messages get the current span context and the queue url added to
    their message attributes. Received messages can start spans that
    continue the trace of the sender. Any other attribute is looked up on
    the wrapped client, so this can replace an existing client.

    Example:
        async with session.client("sqs") as client:
            sqs = TracingSQS(client)
            await sqs.send_message(QueueUrl=url, MessageBody="hello")

            for msg in response["Messages"]:
                with sqs.start_span(msg):
                    await handle(msg)
    """

    def __init__(
        self,
        client: MessageSender,
        config: TracingConfig | None = None,
        tracer_provider: TracerProvider | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._config = config or TracingConfig()
        provider = tracer_provider or trace.get_tracer_provider()
        self._tracer = provider.get_tracer("natricine.aws_tracing")
        self._log = logger or logging.getLogger("natricine.aws_tracing")

    @property
    def config(self) -> TracingConfig:
        return self._config

    def __getattr__(self, name: str) -> Any:
        return getattr(self._client, name)

    def _with_span_context(
        self,
        context: Context | None,
        params: Mapping[str, Any],
        queue_url: str | None,
    ) -> dict[str, Any]:
        """Return a copy of params with span context message attributes."""
        span_context = trace.get_current_span(context).get_span_context()
        if not span_context.is_valid:
            return dict(params)

        attributes = SQSMessageAttributes(dict(params.get("MessageAttributes") or {}))
        if not self._config.propagator.inject(span_context, attributes):
            self._log.debug("Propagator did not accept SQS message attributes")
            return dict(params)

        if queue_url:
            attributes.set(TRACE_QUEUE_URL, queue_url)

        return {**params, "MessageAttributes": attributes.attributes}

    async def send_message(
        self, context: Context | None = None, **kwargs: Any
    ) -> "SendMessageResultTypeDef":
        """Send a message propagating the span context of context.

        Keyword arguments are those of the SQS SendMessage call. The caller's
        MessageAttributes mapping is not modified. Errors from the client are
        raised unchanged.
        """
        return await self._client.send_message(
            **self._with_span_context(context, kwargs, kwargs.get("QueueUrl"))
        )

    async def send_message_batch(
        self, context: Context | None = None, **kwargs: Any
    ) -> "SendMessageBatchResultTypeDef":
        """Send a batch of messages, propagating span context on each entry."""
        queue_url = kwargs.get("QueueUrl")
        entries = [
            self._with_span_context(context, entry, queue_url)
            for entry in kwargs.get("Entries", [])
        ]

        client: Any = self._client
        return await client.send_message_batch(**{**kwargs, "Entries": entries})

    def context_with_span(
        self, message: Mapping[str, Any], context: Context | None = None
    ) -> Context:
        """Attach the message's span context to context for a later span."""
        return attach_span_context(context, message, self._config)

    @contextmanager
    def start_span(
        self, message: Mapping[str, Any], context: Context | None = None
    ) -> Iterator[Span]:
        """Start a span for processing a received message.

        The span continues the sender's trace when the message carries a
        span context, otherwise it starts under context (a new trace when
        context has no active span).
        """
        name = self._config.format_span_name(message)
        options = self._config.options_for(message)

        attributes: dict[str, Any] = {
            "messaging.system": "aws_sqs",
            "messaging.operation.type": "process",
            "messaging.operation.name": "process",
            **options.attributes,
        }
        message_id = message.get("MessageId")
        if message_id:
            attributes["messaging.message.id"] = message_id

        parent = context
        span_context = span_context_from_message(message, self._config)
        if span_context is not None:
            parent = trace.set_span_in_context(
                NonRecordingSpan(span_context), context
            )
        else:
            self._log.debug("No span context on message %s", message_id)

        with self._tracer.start_as_current_span(
            name,
            context=parent,
            kind=options.kind,
            attributes=attributes,
        ) as span:
            yield span
