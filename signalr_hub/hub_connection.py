"""Client side of a hub connection running over a pluggable transport."""

from __future__ import annotations

import abc
import enum
import logging
from concurrent.futures import Future
from typing import Any, Callable, Optional, Sequence

from signalr_hub.callbacks import CallbackManager
from signalr_hub.handshake import create_handshake_message, parse_handshake_response
from signalr_hub.json_protocol import JsonHubProtocol
from signalr_hub.messages import (
    CloseMessage,
    CompletionMessage,
    HubProtocol,
    InvocationMessage,
    PingMessage,
)
from signalr_hub.strings import is_empty_or_whitespace
from signalr_hub.value import InvokeResult, SignalRValue

logger = logging.getLogger(__name__)

InvocationHandler = Callable[[list[SignalRValue]], None]

STOPPED_ERROR = "Connection was stopped before invocation result was received."
CONNECT_FAILED_ERROR = "Could not connect to host"


class ConnectionState(enum.Enum):
    """Lifecycle state of a hub connection."""

    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"
    DISCONNECTED = "disconnected"


class HubConnectionError(Exception):
    """Raised when a hub connection is used in a way its state forbids."""


class Event:
    """A multicast event: every added handler is called on broadcast."""

    def __init__(self) -> None:
        self._handlers: list[Callable[..., Any]] = []

    def add(self, handler: Callable[..., Any]) -> Callable[..., Any]:
        """Subscribe ``handler``; returns it so this can be used as a decorator."""
        self._handlers.append(handler)
        return handler

    def remove(self, handler: Callable[..., Any]) -> None:
        """Unsubscribe ``handler``; raises ValueError if it was not subscribed."""
        self._handlers.remove(handler)

    def broadcast(self, *args: Any) -> None:
        """Call every subscribed handler with ``args``."""
        for handler in list(self._handlers):
            handler(*args)

    def __len__(self) -> int:
        return len(self._handlers)


class Transport(abc.ABC):
    """A bidirectional text channel to a hub server.

    Implementations broadcast ``on_connected()``, ``on_connection_failed()``,
    ``on_connection_error(error)``, ``on_closed(status_code, reason, was_clean)``
    and ``on_message(text)`` as things happen on the channel.
    """

    def __init__(self) -> None:
        self.on_connected = Event()
        self.on_connection_failed = Event()
        self.on_connection_error = Event()
        self.on_closed = Event()
        self.on_message = Event()

    @abc.abstractmethod
    def connect(self) -> None:
        """Begin opening the channel."""

    @abc.abstractmethod
    def is_connected(self) -> bool:
        """True while the channel is open."""

    @abc.abstractmethod
    def send(self, data: str) -> None:
        """Send ``data`` over the channel."""

    @abc.abstractmethod
    def close(self, code: int = 1000, reason: str = "") -> None:
        """Close the channel with a status code and reason."""


class HubConnection:
    """A connection to a hub: invokes server methods and dispatches client ones."""

    PING_INTERVAL = 10.0

    def __init__(
        self, url: str, transport: Transport, protocol: Optional[HubProtocol] = None
    ) -> None:
        self.url = url
        self._transport = transport
        self._protocol: HubProtocol = protocol if protocol is not None else JsonHubProtocol()
        self._state = ConnectionState.DISCONNECTED
        self._handlers: dict[str, InvocationHandler] = {}
        self._callbacks = CallbackManager()
        self._handshake_received = False
        self._tick_counter = 0.0
        self._waiting_calls: list[str] = []
        self._received_close_message = False
        self._should_reconnect = False

        self.on_connected = Event()
        self.on_connection_error = Event()
        self.on_closed = Event()

        transport.on_connected.add(self.handle_connected)
        transport.on_connection_failed.add(self.handle_connection_failed)
        transport.on_message.add(self.process_message)
        transport.on_connection_error.add(self.handle_connection_error)
        transport.on_closed.add(self.handle_closed)

    @property
    def state(self) -> ConnectionState:
        return self._state

    def __enter__(self) -> "HubConnection":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def start(self) -> None:
        """Open the transport; only allowed while disconnected."""
        if self._state is not ConnectionState.DISCONNECTED:
            raise HubConnectionError(
                "Hub connection can only be started if it is in the disconnected state"
            )
        self._state = ConnectionState.CONNECTING
        self._transport.connect()

    def stop(self) -> None:
        """Send a close message and close the transport."""
        if self._state is ConnectionState.DISCONNECTED:
            logger.info("Stop ignored because the connection is already disconnected")
            return
        self._state = ConnectionState.DISCONNECTING
        self._send_close_message()
        self._transport.close()

    def close(self) -> None:
        """Release the connection, closing the transport if it is open."""
        if self._transport.is_connected():
            self._send_close_message()
            self._transport.close()

    def on(self, event_name: str, handler: InvocationHandler) -> InvocationHandler:
        """Register ``handler`` for server calls of ``event_name``."""
        if is_empty_or_whitespace(event_name):
            raise ValueError("EventName cannot be empty.")
        if event_name in self._handlers:
            raise HubConnectionError(
                f"An action for this event has already been registered. event name: {event_name}"
            )
        self._handlers[event_name] = handler
        return handler

    def invoke(self, method_name: str, *args: Any) -> "Future[InvokeResult]":
        """Call a hub method; the future resolves with its result."""
        future: Future[InvokeResult] = Future()
        callback_id = self._callbacks.register_callback(future.set_result)
        self._invoke_hub_method(method_name, args, callback_id)
        return future

    def send(self, method_name: str, *args: Any) -> None:
        """Call a hub method without waiting for a result."""
        self._invoke_hub_method(method_name, args, "")

    def tick(self, delta_time: float) -> None:
        """Advance the keep-alive clock by ``delta_time`` seconds."""
        self._tick_counter += delta_time
        if self._tick_counter > self.PING_INTERVAL:
            self._ping()
            self._tick_counter = 0.0

    def process_message(self, message: str) -> None:
        """Handle text received from the transport."""
        if not self._handshake_received:
            response, remaining = parse_handshake_response(message)
            if response is None:
                logger.error("Bad handshake response.")
                return
            if "error" in response:
                logger.error("Handshake error: %s", response["error"])
                return
            if "type" in response:
                logger.error(
                    "Received unexpected message while waiting for the handshake response."
                )
                return
            self._handshake_received = True
            self._state = ConnectionState.CONNECTED
            self.on_connected.broadcast()
            message = remaining
            waiting, self._waiting_calls = self._waiting_calls, []
            for call in waiting:
                self._transport.send(call)

        for hub_message in self._protocol.parse_messages(message):
            if isinstance(hub_message, InvocationMessage):
                handler = self._handlers.get(hub_message.target)
                if handler is not None:
                    handler(list(hub_message.arguments))
            elif isinstance(hub_message, CompletionMessage):
                self._handle_completion(hub_message)
            elif isinstance(hub_message, PingMessage):
                logger.debug("Ping received")
            elif isinstance(hub_message, CloseMessage):
                self._handle_close_message(hub_message)
            else:
                logger.warning(
                    "Received unexpected message type '%s'", hub_message.message_type.name
                )

    def handle_connected(self) -> None:
        """Send the handshake once the transport is open."""
        logger.debug("Connected to %s.", self.url)
        self._handshake_received = False
        self._transport.send(create_handshake_message(self._protocol))

    def handle_connection_failed(self) -> None:
        logger.debug("Connection to %s failed.", self.url)
        self.on_connection_error.broadcast(CONNECT_FAILED_ERROR)

    def handle_connection_error(self, error: str) -> None:
        self.on_connection_error.broadcast(error)
        if self._should_reconnect:
            self._should_reconnect = False
            logger.debug("Reconnecting")
            self._restart()

    def handle_closed(self, status_code: int, reason: str, was_clean: bool) -> None:
        if not self._received_close_message:
            logger.warning("The server was unexpectedly disconnected")
        self._callbacks.clear(STOPPED_ERROR)
        self._handshake_received = False
        self._state = ConnectionState.DISCONNECTED
        self.on_closed.broadcast()

        if self._received_close_message:
            self._received_close_message = False
            if self._should_reconnect:
                self._should_reconnect = False
                logger.debug("Reconnecting")
                self._restart()

    def _restart(self) -> None:
        try:
            self.start()
        except HubConnectionError as exc:
            logger.error("%s", exc)

    def _handle_completion(self, message: CompletionMessage) -> None:
        if message.error:
            logger.error("%s", message.error)
            return
        if not self._callbacks.invoke_callback(message.invocation_id, message.result, True):
            logger.warning("No callback found for id: %s", message.invocation_id)

    def _handle_close_message(self, message: CloseMessage) -> None:
        if message.error is not None:
            logger.warning("Received close message with error: %s", message.error)
            self.on_connection_error.broadcast(message.error)
        self._received_close_message = True
        self._should_reconnect = bool(message.allow_reconnect)
        self.stop()

    def _ping(self) -> None:
        if self._handshake_received:
            self._transport.send(self._protocol.serialize_message(PingMessage()))
            logger.debug("Ping sent")

    def _invoke_hub_method(
        self, method_name: str, args: Sequence[Any], callback_id: str
    ) -> None:
        invocation = InvocationMessage(
            invocation_id=callback_id, target=method_name, arguments=args
        )
        data = self._protocol.serialize_message(invocation)
        if self._handshake_received:
            self._transport.send(data)
        else:
            self._waiting_calls.append(data)

    def _send_close_message(self) -> None:
        self._transport.send(self._protocol.serialize_message(CloseMessage()))


def create_hub_connection(url: str, transport: Transport) -> HubConnection:
    """Create a hub connection to ``url`` over ``transport``."""
    return HubConnection(url, transport)