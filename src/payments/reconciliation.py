"""Pending payment / gateway callback reconciliation.

Flow:

1. ``create_payment`` validates the order, stores a ``pendingPayments``
   record with status ``Created`` and asks PhonePe for a pay-page URL.
2. PhonePe calls back asynchronously. ``handle_callback`` verifies the
   X-VERIFY checksum, then either writes the finalized ``orders`` record and
   marks the pending record ``Success``, or marks it ``Failed``.

Both records are keyed by the merchant transaction id. The order is written
with a create-if-absent write and the status change is conditional on the
record still being ``Created``, so a callback delivered twice changes
nothing the second time.

The store is synchronous. ``create_payment`` runs its store calls in a
worker thread; callers run ``handle_callback`` and ``get_status`` off the
event loop.
"""

import asyncio
import base64
import binascii
import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlencode

from src.models.schemas import PaymentRequest, PaymentStatus
from src.payments.checksum import verify_callback_checksum
from src.payments.config import PaymentConfig
from src.payments.errors import (
    ChecksumMismatchError,
    GatewayError,
    InvalidOrderError,
    MalformedCallbackError,
    UnknownTransactionError,
)
from src.payments.phonepe import PhonePeClient
from src.storage.firestore import DocumentExistsError, DocumentStore

logger = logging.getLogger(__name__)

PENDING_COLLECTION = "pendingPayments"
ORDERS_COLLECTION = "orders"

SUCCESS_CODE = "PAYMENT_SUCCESS"
PROVIDER = "PhonePe"


@dataclass(frozen=True)
class CallbackOutcome:
    """Result of processing one gateway callback."""

    transaction_id: str
    status: PaymentStatus
    code: str
    redirect_url: str
    duplicate: bool = False


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PaymentReconciler:
    """Creates pending payments and reconciles them with gateway callbacks."""

    def __init__(
        self,
        store: DocumentStore,
        config: PaymentConfig,
        gateway: PhonePeClient | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._gateway = gateway or PhonePeClient(config)

    # -- payment creation -------------------------------------------------

    async def create_payment(self, request: PaymentRequest) -> str:
        """Store a pending payment and return the gateway redirect URL.

        Raises:
            InvalidOrderError: Non-positive amount, missing ids, or a reused
                transaction id. Raised before the gateway is contacted.
            GatewayConfigError: PhonePe credentials are missing.
            GatewayError: PhonePe rejected the request.
        """
        if not request.amount or request.amount < 1:
            raise InvalidOrderError("Invalid order data provided.")
        if not request.user_id or not request.merchant_transaction_id:
            raise InvalidOrderError("Invalid order data provided.")
        self._gateway.ensure_configured()

        transaction_id = request.merchant_transaction_id
        address = request.delivery_address
        record = {
            "transactionId": transaction_id,
            "userId": request.user_id,
            "items": [item.model_dump() for item in request.items],
            "deliveryAddress": address.model_dump() if address else None,
            "orderType": request.order_type,
            "amount": request.amount,
            "provider": PROVIDER,
            "status": PaymentStatus.CREATED.value,
            "createdAt": _now(),
            "updatedAt": _now(),
        }
        try:
            await asyncio.to_thread(self._store.create, PENDING_COLLECTION, transaction_id, record)
        except DocumentExistsError as e:
            raise InvalidOrderError("Transaction id has already been used.", status_code=409) from e

        try:
            redirect_url = await self._gateway.create_payment(
                transaction_id=transaction_id,
                user_id=request.user_id,
                amount=request.amount,
                mobile_number=address.mobile if address else None,
            )
        except GatewayError as e:
            await asyncio.to_thread(
                self._store.transition,
                PENDING_COLLECTION,
                transaction_id,
                "status",
                PaymentStatus.CREATED.value,
                {"status": PaymentStatus.FAILED.value, "providerCode": "GATEWAY_ERROR", "updatedAt": _now()},
            )
            logger.warning(f"Pending payment {transaction_id} failed at gateway: {e}")
            raise

        logger.info(f"Pending payment {transaction_id} created for user {request.user_id}")
        return redirect_url

    # -- callback ----------------------------------------------------------

    @staticmethod
    def decode_callback(raw_body: bytes) -> tuple[str, dict[str, Any]]:
        """Decode the ``{"response": <base64 JSON>}`` envelope.

        Returns:
            The decoded response text (the checksum input) and its parsed JSON.

        Raises:
            MalformedCallbackError: If any layer fails to decode.
        """
        try:
            envelope = json.loads(raw_body)
            decoded = base64.b64decode(envelope["response"], validate=True).decode("utf-8")
            response = json.loads(decoded)
        except (ValueError, KeyError, TypeError, binascii.Error) as e:
            raise MalformedCallbackError(f"Malformed callback body: {e}") from e
        if not isinstance(response, dict):
            raise MalformedCallbackError("Malformed callback body: response is not an object")
        return decoded, response

    def _redirect(self, status: PaymentStatus, transaction_id: str, code: str) -> str:
        base = self._config.public_base_url
        if status is PaymentStatus.SUCCESS:
            return f"{base}/payment/success?{urlencode({'transactionId': transaction_id})}"
        query = urlencode({"transactionId": transaction_id, "status": code})
        return f"{base}/payment/failure?{query}"

    def _build_order(self, pending: dict[str, Any], data: dict[str, Any], transaction_id: str) -> dict[str, Any]:
        paise = data.get("amount")
        amount = paise / 100 if isinstance(paise, (int, float)) else pending.get("amount")
        return {
            "id": transaction_id,
            "userId": data.get("merchantUserId") or pending.get("userId"),
            "orderDate": _now(),
            "orderType": pending.get("orderType", "Unknown"),
            "items": pending.get("items", []),
            "deliveryAddress": pending.get("deliveryAddress"),
            "totalAmount": amount,
            "status": "Processing",
            "paymentTransactionId": transaction_id,
            "providerTransactionId": data.get("transactionId"),
            "paymentProvider": PROVIDER,
            "paymentStatus": PaymentStatus.SUCCESS.value,
        }

    def handle_callback(self, raw_body: bytes, x_verify: str | None) -> CallbackOutcome:
        """Verify a PhonePe server callback and settle its pending payment.

        Nothing is written unless the checksum matches.

        Raises:
            MalformedCallbackError: Undecodable envelope or missing id.
            ChecksumMismatchError: X-VERIFY does not match the payload.
            UnknownTransactionError: No pending payment for the id.
        """
        decoded, response = self.decode_callback(raw_body)

        if not verify_callback_checksum(
            decoded,
            x_verify,
            self._config.phonepe_salt_key,
            self._config.phonepe_salt_index,
        ):
            logger.error("Checksum mismatch!")
            raise ChecksumMismatchError("Checksum mismatch")

        data = response.get("data") or {}
        if not isinstance(data, dict):
            raise MalformedCallbackError("Callback data is not an object")
        transaction_id = data.get("merchantTransactionId")
        if not transaction_id:
            raise MalformedCallbackError("Callback has no merchantTransactionId")
        code = str(response.get("code") or "")

        pending = self._store.get(PENDING_COLLECTION, transaction_id)
        if pending is None:
            logger.warning(f"Callback for unknown transaction {transaction_id}")
            raise UnknownTransactionError(f"Unknown transaction: {transaction_id}")

        current = PaymentStatus(pending.get("status", PaymentStatus.CREATED.value))
        if current is not PaymentStatus.CREATED:
            logger.info(f"Duplicate callback for {transaction_id} ignored (already {current.value})")
            return CallbackOutcome(
                transaction_id=transaction_id,
                status=current,
                code=code,
                redirect_url=self._redirect(current, transaction_id, pending.get("providerCode", code)),
                duplicate=True,
            )

        if code == SUCCESS_CODE:
            target = PaymentStatus.SUCCESS
            try:
                self._store.create(
                    ORDERS_COLLECTION,
                    transaction_id,
                    self._build_order(pending, data, transaction_id),
                )
            except DocumentExistsError:
                logger.info(f"Order {transaction_id} already exists; not creating it again")
        else:
            target = PaymentStatus.FAILED

        applied = self._store.transition(
            PENDING_COLLECTION,
            transaction_id,
            "status",
            PaymentStatus.CREATED.value,
            {"status": target.value, "providerCode": code, "updatedAt": _now()},
        )
        if not applied:
            logger.info(f"Pending payment {transaction_id} settled concurrently")
        else:
            logger.info(f"Pending payment {transaction_id} -> {target.value} ({code})")

        return CallbackOutcome(
            transaction_id=transaction_id,
            status=target,
            code=code,
            redirect_url=self._redirect(target, transaction_id, code),
            duplicate=not applied,
        )

    # -- status ------------------------------------------------------------

    def get_status(self, transaction_id: str) -> PaymentStatus:
        """Return the status of a pending payment.

        Raises:
            UnknownTransactionError: If no pending payment exists.
        """
        pending = self._store.get(PENDING_COLLECTION, transaction_id)
        if pending is None:
            raise UnknownTransactionError(f"Unknown transaction: {transaction_id}")
        return PaymentStatus(pending.get("status", PaymentStatus.CREATED.value))
