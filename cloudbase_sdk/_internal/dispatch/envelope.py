"""Response envelope decoding.

cloudbase.io nests every response under the function identifier of the call:

    {"<function>": {"status": "OK" | "...", "message": <any JSON value>}}
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from cloudbase_sdk._internal.json_value import JsonNull, JsonObject, JsonString, JsonValue, decode, encode
from cloudbase_sdk.exceptions import AmbiguousEnvelopeError, CloudbaseValidationError, DecodeError

STATUS_OK = "OK"


class ResponseEnvelope(BaseModel):
    """Normalized result of a JSON call.

    Fields:
        function: Function identifier echoed from the request
        success: True when the server reported status "OK"
        http_status: HTTP status code, 0 when it could not be read
        payload: The decoded "message" value
        output: Canonical JSON text of the payload
        error_message: Server-supplied error text for failed calls, if any
    """

    model_config = ConfigDict(frozen=True)

    function: str
    success: bool
    http_status: int = 0
    payload: JsonValue
    output: str
    error_message: str | None = None

    @property
    def data(self) -> Any:
        """The payload as native Python data."""
        return self.payload.to_python()


def parse_status_line(line: str | None) -> int:
    """Extract the status code from "<protocol> <code> <reason>".

    Returns 0 when the line is missing or malformed.
    """
    if not line:
        return 0
    parts = line.split()
    if len(parts) < 2:
        return 0
    try:
        return int(parts[1])
    except ValueError:
        return 0


def _error_message(payload: JsonValue) -> str | None:
    if isinstance(payload, JsonString):
        return payload.value
    if isinstance(payload, JsonObject):
        for key in ("error", "message"):
            member = payload.get(key)
            if isinstance(member, JsonString):
                return member.value
    return None


def decode_envelope(body: str | bytes, status_line: str | None, function: str) -> ResponseEnvelope:
    """Decode a raw response into a ResponseEnvelope.

    Args:
        body: The raw response body.
        status_line: The status line read from the STATUS header.
        function: The function identifier of the originating request.

    Returns:
        The decoded envelope. status != "OK" is a normal, unsuccessful result.

    Raises:
        ParseError: If the body is not well-formed JSON.
        AmbiguousEnvelopeError: If the body has no entry for the function.
        DecodeError: If the body or its entry is not a JSON object, or the
            message cannot be re-encoded.
    """
    http_status = parse_status_line(status_line)

    document = decode(body)
    if not isinstance(document, JsonObject):
        raise DecodeError(f"expected a JSON object response, got {document.kind}")

    entry = document.get(function)
    if entry is None:
        raise AmbiguousEnvelopeError(function)
    if not isinstance(entry, JsonObject):
        raise DecodeError(f"entry for function '{function}' is {entry.kind}, not an object")

    status = entry.get("status")
    success = isinstance(status, JsonString) and status.value == STATUS_OK

    payload = entry.get("message")
    if payload is None:
        payload = JsonNull()

    try:
        output = encode(payload)
    except (CloudbaseValidationError, RecursionError) as e:
        raise DecodeError(f"message for function '{function}' cannot be re-encoded: {e}") from e

    return ResponseEnvelope(
        function=function,
        success=success,
        http_status=http_status,
        payload=payload,
        output=output,
        error_message=None if success else _error_message(payload),
    )
