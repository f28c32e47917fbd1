"""SignalR hub client logic: values, messages, JSON hub protocol, handshake, callbacks and hub connection."""

__version__ = "0.1.0"

__all__ = [
    "callbacks",
    "handshake",
    "hub_connection",
    "json_protocol",
    "messages",
    "strings",
    "value",
]