"""Hub protocol message kinds and the protocol interface."""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass, field
from typing import ClassVar, Sequence

from signalr_hub.value import SignalRValue


class MessageType(enum.IntEnum):
    """Numeric message type codes carried in the ``type`` field."""

    INVOCATION = 1
    STREAM_ITEM = 2
    COMPLETION = 3
    STREAM_INVOCATION = 4
    CANCEL_INVOCATION = 5
    PING = 6
    CLOSE = 7


@dataclass(frozen=True)
class HubMessage:
    """Base of every hub message."""

    message_type: ClassVar[MessageType]


@dataclass(frozen=True)
class InvocationMessage(HubMessage):
    """A request to call a method on the other side."""

    message_type: ClassVar[MessageType] = MessageType.INVOCATION

    invocation_id: str = ""
    target: str = ""
    arguments: Sequence[SignalRValue] = ()
    stream_ids: Sequence[str] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "arguments", tuple(SignalRValue.of(arg) for arg in self.arguments)
        )
        object.__setattr__(self, "stream_ids", tuple(self.stream_ids))


@dataclass(frozen=True)
class CompletionMessage(HubMessage):
    """The result or error of a previous invocation."""

    message_type: ClassVar[MessageType] = MessageType.COMPLETION

    invocation_id: str = ""
    error: str = ""
    result: SignalRValue = field(default_factory=SignalRValue)
    has_result: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "result", SignalRValue.of(self.result))


@dataclass(frozen=True)
class PingMessage(HubMessage):
    """A keep-alive message."""

    message_type: ClassVar[MessageType] = MessageType.PING


@dataclass(frozen=True)
class CloseMessage(HubMessage):
    """A request to close the connection, optionally with an error."""

    message_type: ClassVar[MessageType] = MessageType.CLOSE

    error: str | None = None
    allow_reconnect: bool | None = None


class HubProtocol(abc.ABC):
    """Encodes and decodes hub messages for the wire."""

    @abc.abstractmethod
    def name(self) -> str:
        """The protocol name sent in the handshake."""

    @abc.abstractmethod
    def version(self) -> int:
        """The protocol version sent in the handshake."""

    @abc.abstractmethod
    def serialize_message(self, message: HubMessage) -> str:
        """Encode one message as a wire record."""

    @abc.abstractmethod
    def parse_messages(self, data: str) -> list[HubMessage]:
        """Decode every complete record in ``data``."""