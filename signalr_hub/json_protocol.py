"""The JSON hub protocol: records of JSON text ended by a record separator."""

from __future__ import annotations

import base64
import json
import logging
from typing import Any

from signalr_hub.messages import (
    CloseMessage,
    CompletionMessage,
    HubMessage,
    HubProtocol,
    InvocationMessage,
    MessageType,
    PingMessage,
)
from signalr_hub.value import SignalRValue, ValueType

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = "\x1e"

# Integral floats up to this size are written without a fractional part.
_MAX_EXACT_INTEGER = 2**53


def _encode_number(number: float) -> int | float:
    if number.is_integer() and abs(number) <= _MAX_EXACT_INTEGER:
        return int(number)
    return number


def serialize_value(value: SignalRValue) -> Any:
    """Turn a hub value into an object that :func:`json.dumps` accepts.

    Binary data becomes a base64 string.
    """
    value = SignalRValue.of(value)
    kind = value.type
    if kind is ValueType.NULL:
        return None
    if kind is ValueType.BOOLEAN:
        return bool(value.value)
    if kind is ValueType.NUMBER:
        return _encode_number(float(value.value))
    if kind is ValueType.STRING:
        return value.value
    if kind is ValueType.OBJECT:
        return {key: serialize_value(item) for key, item in value.value.items()}
    if kind is ValueType.ARRAY:
        return [serialize_value(item) for item in value.value]
    if kind is ValueType.BINARY:
        return base64.b64encode(bytes(value.value)).decode("ascii")
    raise TypeError(f"cannot serialize value of type {kind!r}")


def deserialize_value(data: Any) -> SignalRValue:
    """Turn an object decoded by :func:`json.loads` into a hub value."""
    if data is None:
        return SignalRValue()
    if isinstance(data, bool):
        return SignalRValue(ValueType.BOOLEAN, data)
    if isinstance(data, (int, float)):
        return SignalRValue(ValueType.NUMBER, float(data))
    if isinstance(data, str):
        return SignalRValue(ValueType.STRING, data)
    if isinstance(data, list):
        return SignalRValue(ValueType.ARRAY, tuple(deserialize_value(item) for item in data))
    if isinstance(data, dict):
        return SignalRValue(
            ValueType.OBJECT, {key: deserialize_value(item) for key, item in data.items()}
        )
    return SignalRValue()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class JsonHubProtocol(HubProtocol):
    """Hub protocol that exchanges JSON objects, one per record."""

    record_separator = RECORD_SEPARATOR

    def name(self) -> str:
        return "json"

    def version(self) -> int:
        return 1

    def serialize_message(self, message: HubMessage) -> str:
        obj: dict[str, Any] = {}
        if isinstance(message, InvocationMessage):
            obj["type"] = int(message.message_type)
            if message.invocation_id:
                obj["invocationId"] = message.invocation_id
            obj["target"] = message.target
            obj["arguments"] = [serialize_value(arg) for arg in message.arguments]
            if message.stream_ids:
                obj["streamIds"] = list(message.stream_ids)
        elif isinstance(message, CompletionMessage):
            obj["type"] = int(message.message_type)
            obj["invocationId"] = message.invocation_id
            if message.error:
                obj["error"] = message.error
            elif message.has_result:
                obj["result"] = serialize_value(message.result)
        elif isinstance(message, PingMessage):
            obj["type"] = int(message.message_type)
        elif isinstance(message, CloseMessage):
            obj["type"] = int(message.message_type)
            if message.error is not None:
                obj["error"] = message.error
        return json.dumps(obj, separators=(",", ":"), ensure_ascii=False) + RECORD_SEPARATOR

    def parse_messages(self, data: str) -> list[HubMessage]:
        """Decode every complete record; invalid records and any trailing partial record are dropped."""
        *records, _partial = data.split(RECORD_SEPARATOR)
        messages = []
        for record in records:
            message = self._parse_message(record)
            if message is not None:
                messages.append(message)
        return messages

    def _parse_message(self, payload: str) -> HubMessage | None:
        try:
            obj = json.loads(payload)
        except ValueError as exc:
            logger.error("Cannot unserialize hub message: %s: %s", exc, payload)
            return None
        if not isinstance(obj, dict):
            logger.error("Message is not an 'object' type")
            return None
        if not _is_number(obj.get("type")):
            logger.error("Field 'type' not found in message %s", payload)
            return None

        try:
            message_type = MessageType(int(obj["type"]))
        except (ValueError, OverflowError):
            return None

        if message_type is MessageType.INVOCATION:
            return self._parse_invocation(obj, payload)
        if message_type is MessageType.COMPLETION:
            return self._parse_completion(obj, payload)
        if message_type is MessageType.PING:
            return PingMessage()
        if message_type is MessageType.CLOSE:
            error = obj.get("error")
            allow_reconnect = obj.get("allowReconnect")
            return CloseMessage(
                error=error if isinstance(error, str) else None,
                allow_reconnect=allow_reconnect if isinstance(allow_reconnect, bool) else None,
            )
        return None

    @staticmethod
    def _parse_invocation(obj: dict[str, Any], payload: str) -> InvocationMessage | None:
        target = obj.get("target")
        if not isinstance(target, str):
            logger.error("Field 'target' not found in invocation message %s", payload)
            return None
        arguments = obj.get("arguments")
        if not isinstance(arguments, list):
            logger.error("Field 'arguments' not found in invocation message %s", payload)
            return None
        invocation_id = obj.get("invocationId")
        return InvocationMessage(
            invocation_id=invocation_id if isinstance(invocation_id, str) else "",
            target=target,
            arguments=[deserialize_value(arg) for arg in arguments],
        )

    @staticmethod
    def _parse_completion(obj: dict[str, Any], payload: str) -> CompletionMessage | None:
        invocation_id = obj.get("invocationId")
        if not isinstance(invocation_id, str):
            logger.error("Field 'invocationId' not found in completion message %s", payload)
            return None
        error = obj.get("error")
        error = error if isinstance(error, str) else ""
        has_result = "result" in obj
        result = deserialize_value(obj["result"]) if has_result else SignalRValue()
        if error and has_result:
            logger.error(
                "Fields 'error' and 'result' are mutually exclusive in completion message %s",
                payload,
            )
            return None
        return CompletionMessage(
            invocation_id=invocation_id, error=error, result=result, has_result=has_result
        )