"""Unit tests for PhonePe X-VERIFY checksums."""

import base64
import hashlib
import json

import pytest_check as check

from src.payments.checksum import (
    PAY_API_PATH,
    callback_checksum,
    encode_payload,
    request_checksum,
    verify_callback_checksum,
)


class TestRequestChecksum:
    def test_payload_is_compact_base64_json(self) -> None:
        encoded = encode_payload({"amount": 100, "merchantId": "M"})

        decoded = base64.b64decode(encoded).decode("utf-8")
        check.equal(decoded, '{"amount":100,"merchantId":"M"}')

    def test_request_checksum_format(self) -> None:
        digest = hashlib.sha256(("abc" + PAY_API_PATH + "salt").encode()).hexdigest()

        check.equal(request_checksum("abc", PAY_API_PATH, "salt", 1), f"{digest}###1")


class TestCallbackChecksum:
    def test_hash_covers_decoded_response_and_salt(self) -> None:
        decoded = json.dumps({"code": "PAYMENT_SUCCESS"})
        digest = hashlib.sha256((decoded + "salt").encode()).hexdigest()

        check.equal(callback_checksum(decoded, "salt", 2), f"{digest}###2")

    def test_verify_accepts_matching_header(self) -> None:
        decoded = '{"code":"PAYMENT_SUCCESS"}'
        header = callback_checksum(decoded, "salt", 1)

        check.is_true(verify_callback_checksum(decoded, header, "salt", 1))

    def test_verify_rejects_tampered_payload(self) -> None:
        header = callback_checksum('{"code":"PAYMENT_ERROR"}', "salt", 1)

        check.is_false(verify_callback_checksum('{"code":"PAYMENT_SUCCESS"}', header, "salt", 1))

    def test_verify_rejects_wrong_salt_index(self) -> None:
        decoded = '{"code":"PAYMENT_SUCCESS"}'
        header = callback_checksum(decoded, "salt", 2)

        check.is_false(verify_callback_checksum(decoded, header, "salt", 1))

    def test_verify_rejects_missing_header(self) -> None:
        check.is_false(verify_callback_checksum("{}", None, "salt", 1))
        check.is_false(verify_callback_checksum("{}", "", "salt", 1))
