"""Reading trace attributes and span names from received SQS messages."""

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from natricine_aws_tracing.attributes import (
    TRACE_QUEUE_URL,
    TRACE_TOPIC_NAME,
    flatten_attributes,
    string_attribute,
)

if TYPE_CHECKING:
    from types_aiobotocore_sqs.type_defs import (
        MessageAttributeValueTypeDef,
        MessageTypeDef,
    )

logger = logging.getLogger(__name__)

SPAN_NAME_PREFIX = "sqs.Message"
UNKNOWN_MESSAGE_ID = "unknwonMessageId"

# Field of the SNS notification envelope holding the published attributes
ENVELOPE_ATTRIBUTES_FIELD = "MessageAttributes"


def get_message_attributes(
    message: "MessageTypeDef | Mapping[str, Any]",
    raw_message_delivery: bool = False,
) -> "dict[str, MessageAttributeValueTypeDef] | None":
    """Return the message attributes carrying trace context.

    With raw message delivery (or when the message already has attributes)
    the message's own attributes are used. Otherwise the body is treated as
    an SNS notification envelope and its nested attributes, of the form
    ``{"key": {"Type": "String", "Value": "..."}}``, are rebuilt as SQS
    string attributes.

    Malformed or absent data yields None, never an exception.
    """
    attributes = message.get("MessageAttributes")
    if raw_message_delivery or attributes:
        return dict(attributes) if attributes else None

    body = message.get("Body")
    if not isinstance(body, str):
        return None

    try:
        envelope = json.loads(body)
    except (ValueError, RecursionError):
        logger.debug("Message %s body is not JSON", message.get("MessageId"))
        return None

    if not isinstance(envelope, dict):
        return None

    rebuilt: dict[str, MessageAttributeValueTypeDef] = {}
    if ENVELOPE_ATTRIBUTES_FIELD not in envelope:
        return rebuilt

    nested = envelope[ENVELOPE_ATTRIBUTES_FIELD]
    if not isinstance(nested, dict):
        logger.debug(
            "Message %s has malformed envelope attributes", message.get("MessageId")
        )
        return None

    for key, value in nested.items():
        if not isinstance(value, dict) or not all(
            v is None or isinstance(v, str) for v in value.values()
        ):
            logger.debug(
                "Message %s has malformed envelope attribute %s",
                message.get("MessageId"),
                key,
            )
            return None
        rebuilt[key] = string_attribute(value.get("Value") or "")

    return rebuilt


def _queue_path(queue_url: str) -> str:
    try:
        return urlparse(queue_url).path.lstrip("/")
    except ValueError:
        return ""


def format_span_name(message: "MessageTypeDef | Mapping[str, Any]") -> str:
    """Format a span name for an SQS message.

    Looks at the message attributes for the publishing topic name and the
    queue url path, and always includes the message id:

    - ``sqs.Message/$MESSAGEID``
    - ``sqs.Message/$TOPICNAME/$MESSAGEID``
    - ``sqs.Message/$QUEUEURLPATH/$MESSAGEID``
    - ``sqs.Message/$TOPICNAME/$QUEUEURLPATH/$MESSAGEID``

    Attributes are read the same way regardless of raw message delivery:
    direct attributes first, then the SNS envelope in the body. A name can
    therefore include a topic read from the body even when a raw delivery
    config would not decode span context from it.
    """
    attrs = flatten_attributes(get_message_attributes(message))

    segments = [SPAN_NAME_PREFIX]

    topic = attrs.get(TRACE_TOPIC_NAME)
    if topic:
        segments.append(topic)

    queue_url = attrs.get(TRACE_QUEUE_URL)
    if queue_url:
        queue = _queue_path(queue_url)
        if queue:
            segments.append(queue)

    segments.append(message.get("MessageId") or UNKNOWN_MESSAGE_ID)
    return "/".join(segments)
