"""The handshake exchanged when a hub connection opens."""

from __future__ import annotations

import json
import logging
from typing import Any

from signalr_hub.json_protocol import RECORD_SEPARATOR
from signalr_hub.messages import HubProtocol

logger = logging.getLogger(__name__)


def create_handshake_message(protocol: HubProtocol) -> str:
    """Build the handshake request naming ``protocol`` and its version."""
    request = {"protocol": protocol.name(), "version": protocol.version()}
    return json.dumps(request, separators=(",", ":"), ensure_ascii=False) + RECORD_SEPARATOR


def parse_handshake_response(response: str) -> tuple[dict[str, Any] | None, str]:
    """Split the handshake response off the front of ``response``.

    Returns the decoded handshake object and the data that follows it. When
    no complete record is present the object is None and ``response`` is
    returned unchanged; when the record is not a JSON object the object is
    None and the remaining data is still returned.
    """
    handshake, separator, remaining = response.partition(RECORD_SEPARATOR)
    if not separator:
        return None, response

    try:
        decoded = json.loads(handshake)
    except ValueError as exc:
        logger.warning("Cannot unserialize handshake message: %s", exc)
        return None, remaining

    if not isinstance(decoded, dict):
        logger.warning("Cannot unserialize handshake message: not a JSON object")
        return None, remaining

    return decoded, remaining