"""Attribute containers bridging propagators to SNS/SQS message attributes.

SQS and SNS both describe a message attribute as a value holder with a
``DataType`` tag and a ``StringValue``. The adapters here wrap the boto
attribute mapping of one transport so a propagator can read and write plain
strings without knowing which transport it is talking to.
"""

from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types_aiobotocore_sns.type_defs import (
        MessageAttributeValueTypeDef as SNSMessageAttributeValueTypeDef,
    )
    from types_aiobotocore_sqs.type_defs import (
        MessageAttributeValueTypeDef as SQSMessageAttributeValueTypeDef,
    )

# Extra attribute keys unrelated to span context, used for span naming only
TRACE_TOPIC_NAME = "Trace-Topic-Name"
TRACE_QUEUE_URL = "Trace-Queue-Url"

STRING_DATA_TYPE = "String"


@runtime_checkable
class AttributeContainer(Protocol):
    """Protocol for a string key/value view over transport attributes."""

    def get(self, key: str) -> str | None:
        """Return the string value for key, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key as a string attribute."""
        ...

    def to_dict(self) -> dict[str, str]:
        """Flatten into a plain string mapping."""
        ...


def string_attribute(value: str) -> dict[str, str]:
    """Build a String-typed attribute value holder."""
    return {"DataType": STRING_DATA_TYPE, "StringValue": value}


def flatten_attributes(attributes: Mapping[str, Any] | None) -> dict[str, str]:
    """Flatten boto message attributes into a plain string mapping.

    Entries whose value holder carries no string value are dropped.
    """
    flat: dict[str, str] = {}
    if not attributes:
        return flat

    for key, value in attributes.items():
        if not isinstance(value, Mapping):
            continue
        str_value = value.get("StringValue")
        if isinstance(str_value, str):
            flat[key] = str_value
    return flat


class _MessageAttributes:
    """Adapter writing through to a boto message attribute mapping."""

    def __init__(self, attributes: MutableMapping[str, Any] | None = None) -> None:
        self.attributes: MutableMapping[str, Any] = (
            attributes if attributes is not None else {}
        )

    def get(self, key: str) -> str | None:
        value = self.attributes.get(key)
        if not isinstance(value, Mapping):
            return None
        str_value = value.get("StringValue")
        return str_value if isinstance(str_value, str) else None

    def set(self, key: str, value: str) -> None:
        self.attributes[key] = string_attribute(value)

    def to_dict(self) -> dict[str, str]:
        return flatten_attributes(self.attributes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.attributes)!r})"


class SQSMessageAttributes(_MessageAttributes):
    """SQS ``MessageAttributes`` (send_message input, received messages)."""

    attributes: "MutableMapping[str, SQSMessageAttributeValueTypeDef]"


class SNSMessageAttributes(_MessageAttributes):
    """SNS ``MessageAttributes`` (publish input)."""

    attributes: "MutableMapping[str, SNSMessageAttributeValueTypeDef]"


def as_container(obj: object) -> AttributeContainer | None:
    """Return obj as an attribute container if its shape is recognized.

    Raw mappings are not containers: wrap them in SQSMessageAttributes or
    SNSMessageAttributes first.
    """
    if isinstance(obj, AttributeContainer):
        return obj
    return None
