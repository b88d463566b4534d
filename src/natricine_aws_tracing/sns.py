"""SNS client wrapper propagating span context on published messages."""

import logging
from typing import TYPE_CHECKING, Any, Protocol

from opentelemetry import trace
from opentelemetry.context import Context

from natricine_aws_tracing.attributes import TRACE_TOPIC_NAME, SNSMessageAttributes
from natricine_aws_tracing.propagation import B3Propagator, Propagator

if TYPE_CHECKING:
    from types_aiobotocore_sns.type_defs import PublishResponseTypeDef


class Publisher(Protocol):
    """Protocol for clients that publish messages to an SNS topic."""

    async def publish(self, **kwargs: Any) -> Any:
        """Publish a message (boto Publish keyword arguments)."""
        ...


def topic_name_from_arn(arn: str) -> str:
    """Return the topic name, the last ``:`` separated part of an ARN."""
    return arn.split(":")[-1]


class TracingSNS:
    """SNS client wrapper that propagates span context.

    Published messages get the current span context and the topic name added
    to their message attributes. Any other attribute is looked up on the
    wrapped client.

    Example:
        async with session.client("sns") as client:
            sns = TracingSNS(client)
            await sns.publish(TopicArn=arn, Message="hello")
    """

    def __init__(
        self,
        client: Publisher,
        propagator: Propagator | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._propagator = propagator or B3Propagator()
        self._log = logger or logging.getLogger("natricine.aws_tracing")

    def __getattr__(self, name: str) -> Any:
        return getattr(self._client, name)

    async def publish(
        self, context: Context | None = None, **kwargs: Any
    ) -> "PublishResponseTypeDef":
        """Publish a message propagating the span context of context.

        Keyword arguments are those of the SNS Publish call. The caller's
        MessageAttributes mapping is not modified. Errors from the client are
        raised unchanged.
        """
        span_context = trace.get_current_span(context).get_span_context()
        if span_context.is_valid:
            attributes = SNSMessageAttributes(
                dict(kwargs.get("MessageAttributes") or {})
            )
            if self._propagator.inject(span_context, attributes):
                arn = kwargs.get("TopicArn") or kwargs.get("TargetArn")
                if arn:
                    attributes.set(TRACE_TOPIC_NAME, topic_name_from_arn(arn))
                kwargs["MessageAttributes"] = attributes.attributes
            else:
                self._log.debug("Propagator did not accept SNS message attributes")

        return await self._client.publish(**kwargs)
