"""JSON request body decoding with an explicit transport encoding flag.

Some gateways forward bodies base64-encoded. The sender declares this with
``X-Body-Encoding: base64``; the flag is trusted as given and the body is
never inspected to guess its encoding.
"""

import base64
import binascii
import json
from typing import Any

from fastapi import Request

from board_access.core.errors import MalformedRequestError

BODY_ENCODING_HEADER = "X-Body-Encoding"

_IDENTITY_ENCODINGS = frozenset({"", "identity", "json"})


def decode_body(raw: bytes, encoding: str = "") -> dict[str, Any]:
    """Decode a request body into a JSON object.

    Args:
        raw: Body bytes as received.
        encoding: Declared transport encoding ("base64" or identity).

    Returns:
        Parsed JSON object. An empty body yields an empty dict.

    Raises:
        MalformedRequestError: Unknown encoding, invalid base64, invalid
            JSON, or a JSON value that is not an object.
    """
    declared = encoding.strip().lower()
    if declared == "base64":
        try:
            raw = base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise MalformedRequestError("Request body is not valid base64") from exc
    elif declared not in _IDENTITY_ENCODINGS:
        raise MalformedRequestError(f"Unsupported body encoding: {declared}")

    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError as exc:
        raise MalformedRequestError("Invalid JSON in request body") from exc
    if not isinstance(body, dict):
        raise MalformedRequestError("Request body must be a JSON object")
    return body


async def read_json_body(request: Request) -> dict[str, Any]:
    """Read and decode the body of an incoming request.

    Args:
        request: The incoming request.

    Returns:
        Parsed JSON object.
    """
    raw = await request.body()
    return decode_body(raw, request.headers.get(BODY_ENCODING_HEADER, ""))
