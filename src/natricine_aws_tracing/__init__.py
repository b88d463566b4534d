"""B3 trace context propagation for AWS SNS and SQS messages."""

from natricine_aws_tracing.attributes import (
    TRACE_QUEUE_URL,
    TRACE_TOPIC_NAME,
    AttributeContainer,
    SNSMessageAttributes,
    SQSMessageAttributes,
)
from natricine_aws_tracing.config import StartOptions, TracingConfig
from natricine_aws_tracing.context import (
    attach_span_context,
    retrieve_span_context,
    span_context_from_message,
)
from natricine_aws_tracing.message import format_span_name, get_message_attributes
from natricine_aws_tracing.propagation import B3Propagator, Propagator
from natricine_aws_tracing.sns import Publisher, TracingSNS, topic_name_from_arn
from natricine_aws_tracing.sqs import MessageSender, TracingSQS

__all__ = [
    # propagation
    "Propagator",
    "B3Propagator",
    # attributes
    "AttributeContainer",
    "SQSMessageAttributes",
    "SNSMessageAttributes",
    "TRACE_TOPIC_NAME",
    "TRACE_QUEUE_URL",
    # messages
    "get_message_attributes",
    "format_span_name",
    # context
    "attach_span_context",
    "retrieve_span_context",
    "span_context_from_message",
    # clients
    "StartOptions",
    "TracingConfig",
    "TracingSQS",
    "TracingSNS",
    "MessageSender",
    "Publisher",
    "topic_name_from_arn",
]
