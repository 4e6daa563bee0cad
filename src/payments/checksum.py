"""PhonePe X-VERIFY checksums.

The gateway authenticates both directions with a salted SHA-256 over the
payload, suffixed with ``###<salt index>``.
"""

import base64
import hashlib
import hmac
import json
from typing import Any

PAY_API_PATH = "/pg/v1/pay"


def _salted_sha256(*parts: str) -> str:
    return hashlib.sha256("".join(parts).encode("utf-8")).hexdigest()


def encode_payload(payload: dict[str, Any]) -> str:
    """Serialize a request payload to the base64 JSON the gateway expects."""
    raw = json.dumps(payload, separators=(",", ":"))
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def request_checksum(base64_payload: str, api_path: str, salt_key: str, salt_index: int) -> str:
    """Checksum for an outgoing request: ``sha256(payload + path + salt)###index``."""
    return f"{_salted_sha256(base64_payload, api_path, salt_key)}###{salt_index}"


def callback_checksum(decoded_response: str, salt_key: str, salt_index: int) -> str:
    """Checksum for a server callback: ``sha256(decoded response + salt)###index``."""
    return f"{_salted_sha256(decoded_response, salt_key)}###{salt_index}"


def verify_callback_checksum(
    decoded_response: str,
    received: str | None,
    salt_key: str,
    salt_index: int,
) -> bool:
    """Compare a callback's X-VERIFY header against the expected checksum."""
    if not received:
        return False
    expected = callback_checksum(decoded_response, salt_key, salt_index)
    return hmac.compare_digest(expected.encode("utf-8"), received.strip().encode("utf-8"))
