# signalr-hub

Client-side logic for talking to a SignalR hub: hub values, the JSON hub
protocol, the handshake, invocation callbacks and a hub connection state
machine. The network transport is yours to supply, so the package works
with any WebSocket library or with an in-memory fake in tests.

## Install

```
pip install signalr-hub
```

The package has no dependencies outside the standard library.

## Values

Arguments and results are carried as `SignalRValue` objects
(`signalr_hub.value`), tagged with a `ValueType`: `NULL`, `BOOLEAN`,
`NUMBER`, `STRING`, `ARRAY`, `OBJECT` or `BINARY`. Numbers are stored as
floats, arrays as tuples, objects as dicts with string keys and binary data
as bytes.

```python
from signalr_hub.value import SignalRValue, InvokeResult

value = SignalRValue.of({"name": "probe", "scores": [1, 2.5], "ok": True})
assert value.to_python() == {"name": "probe", "scores": [1.0, 2.5], "ok": True}

failed = InvokeResult.error("boom")
assert failed.has_error() and failed.error_message == "boom"
```

`SignalRValue.of` raises `TypeError` for objects it cannot represent and for
mappings with non-string keys.

## Messages and the JSON hub protocol

`signalr_hub.messages` defines `MessageType` and the message classes
`InvocationMessage`, `CompletionMessage`, `PingMessage` and `CloseMessage`,
together with the abstract `HubProtocol` (`name`, `version`,
`serialize_message`, `parse_messages`).

`signalr_hub.json_protocol.JsonHubProtocol` implements it with JSON text,
each record ended by the record separator `\x1e` (`RECORD_SEPARATOR`).

```python
from signalr_hub.json_protocol import JsonHubProtocol
from signalr_hub.messages import PingMessage

protocol = JsonHubProtocol()
frame = protocol.serialize_message(PingMessage())   # '{"type":6}\x1e'
messages = protocol.parse_messages(frame)            # [PingMessage()]
```

Records that cannot be parsed, and a trailing record with no separator, are
left out of the result. Binary values are written as base64 strings.
`serialize_value` and `deserialize_value` convert single values to and from
JSON-ready Python objects.

## Handshake

```python
from signalr_hub.handshake import create_handshake_message, parse_handshake_response

request = create_handshake_message(protocol)   # '{"protocol":"json","version":1}\x1e'
response, remaining = parse_handshake_response("{}\x1e{\"type\":6}\x1e")
# response == {}, remaining == '{"type":6}\x1e'
```

When no complete record is present the response is `None` and the input is
returned unchanged.

## Hub connections

Subclass `Transport` (`signalr_hub.hub_connection`) over your WebSocket:
implement `connect`, `is_connected`, `send` and `close(code=1000,
reason="")`, call `Transport.__init__`, and broadcast its events as things
happen on the socket: `on_connected()`, `on_connection_failed()`,
`on_connection_error(error)`, `on_closed(status_code, reason, was_clean)`
and `on_message(text)`. A `HubConnection` subscribes to these events
itself.

```python
from signalr_hub.hub_connection import Transport, create_hub_connection


class LoopbackTransport(Transport):
    def __init__(self):
        super().__init__()
        self.sent = []
        self.open = False

    def connect(self):
        self.open = True
        self.on_connected.broadcast()

    def is_connected(self):
        return self.open

    def send(self, data):
        self.sent.append(data)

    def close(self, code=1000, reason=""):
        self.open = False
        self.on_closed.broadcast(code, reason, True)


transport = LoopbackTransport()
with create_hub_connection("https://localhost:5001/chat", transport) as hub:
    hub.on("ReceiveMessage", lambda args: print([a.to_python() for a in args]))
    future = hub.invoke("Echo", "hello")    # concurrent.futures.Future
    hub.send("Broadcast", "hi everyone")
    hub.start()                              # sends the handshake request

    # What the server would answer:
    transport.on_message.broadcast('{}\x1e{"type":3,"invocationId":"0","result":"hello"}\x1e')
    print(future.result().to_python())       # hello
```

Behaviour worth knowing:

- Calls made before the handshake response arrives are queued and sent once
  it does.
- `invoke` returns a `concurrent.futures.Future` resolved with an
  `InvokeResult`. When the transport closes, pending invocations resolve with
  a result whose `has_error()` is true. A completion carrying an error is
  logged and its future is left pending.
- `on(event_name, handler)` raises `ValueError` for an empty or blank name
  and `HubConnectionError` if a handler is already registered for it.
- `start()` raises `HubConnectionError` unless the connection is
  disconnected; `state` reports the current `ConnectionState`.
- Call `tick(delta_time)` regularly; a ping is sent once more than
  `PING_INTERVAL` (ten) seconds have gone by since the last one.
- `stop()` sends a close message and closes the transport. A close message
  from the server stops the connection, and if it allows reconnecting the
  connection starts again after the transport closes.
- The events `on_connected`, `on_connection_error` and `on_closed` on the
  hub are `Event` objects: `add` a handler, `remove` it, or `broadcast`.
- Leaving the `with` block, or calling `close()`, sends a close message and
  closes the transport if it is still open.

`create_hub_connection` uses `JsonHubProtocol`; construct `HubConnection`
directly to pass another `HubProtocol`.

## What this package does not do

It contains no network code: there is no WebSocket transport and no
negotiation request to the server's negotiate endpoint. You supply the
`Transport`. Stream items, stream invocations and cancellations are not
handled; such messages are dropped by the JSON protocol.

## Tests

```
pip install "signalr-hub[test]"
pytest
```