"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - make_pdf: Factory building N-page PDFs with PyMuPDF
    - sample_pdf: Three-page text PDF
    - memory_store: In-memory DocumentStore
    - payment_config: PaymentConfig with test credentials
    - signed_callback: Factory building PhonePe callbacks with valid checksums
    - async_client: HTTPX client wired to the in-memory store and test config
    - loop_stall: Awaits a coroutine and reports the worst event loop delay
"""

import asyncio
import base64
import copy
import json
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any, TypeVar

import pymupdf
import pytest
from httpx import ASGITransport, AsyncClient

from src.api import app
from src.payments.checksum import callback_checksum
from src.payments.config import PaymentConfig, get_payment_config
from src.storage.firestore import DocumentExistsError, DocumentNotFoundError, get_document_store

SALT_KEY = "test-salt-key"
SALT_INDEX = 1
BASE_URL = "https://docuease.test"
TICK = 0.01

T = TypeVar("T")


def build_pdf(pages: int = 3, text: str = "Page") -> bytes:
    """Build a PDF whose page i carries the text ``"<text> i"``."""
    doc = pymupdf.open()
    for number in range(1, pages + 1):
        page = doc.new_page(width=595, height=842)
        page.insert_text(pymupdf.Point(72, 72), f"{text} {number}", fontsize=14)
    doc.set_metadata({"title": "Sample Document", "author": "Test Suite"})
    data = doc.tobytes()
    doc.close()
    return data


class InMemoryDocumentStore:
    """DocumentStore fake keeping collections in dictionaries.

    ``writes`` records every successful mutation so tests can assert that
    nothing was written.
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.writes: list[tuple[str, str, str]] = []

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self.collections.setdefault(name, {})

    def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        record = self._collection(collection).get(document_id)
        return copy.deepcopy(record) if record is not None else None

    def set(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        self._collection(collection)[document_id] = copy.deepcopy(data)
        self.writes.append(("set", collection, document_id))

    def create(self, collection: str, document_id: str, data: dict[str, Any]) -> None:
        if document_id in self._collection(collection):
            raise DocumentExistsError(f"{collection}/{document_id} already exists")
        self._collection(collection)[document_id] = copy.deepcopy(data)
        self.writes.append(("create", collection, document_id))

    def update(self, collection: str, document_id: str, changes: dict[str, Any]) -> None:
        if document_id not in self._collection(collection):
            raise DocumentNotFoundError(f"{collection}/{document_id} not found")
        self._collection(collection)[document_id].update(copy.deepcopy(changes))
        self.writes.append(("update", collection, document_id))

    def transition(
        self,
        collection: str,
        document_id: str,
        field: str,
        expected: Any,
        changes: dict[str, Any],
    ) -> bool:
        record = self._collection(collection).get(document_id)
        if record is None:
            raise DocumentNotFoundError(f"{collection}/{document_id} not found")
        if record.get(field) != expected:
            return False
        record.update(copy.deepcopy(changes))
        self.writes.append(("transition", collection, document_id))
        return True


def build_callback(
    transaction_id: str,
    code: str = "PAYMENT_SUCCESS",
    amount_paise: int = 15000,
    data: Any = None,
) -> tuple[bytes, str]:
    """Build a PhonePe callback body and its valid X-VERIFY header.

    ``data`` replaces the generated ``data`` block when given.
    """
    response = {
        "success": code == "PAYMENT_SUCCESS",
        "code": code,
        "message": "Your payment is successful." if code == "PAYMENT_SUCCESS" else "Payment failed",
        "data": {
            "merchantId": "MERCHANTUAT",
            "merchantTransactionId": transaction_id,
            "transactionId": f"T{transaction_id}",
            "amount": amount_paise,
            "state": "COMPLETED" if code == "PAYMENT_SUCCESS" else "FAILED",
        },
    }
    if data is not None:
        response["data"] = data
    decoded = json.dumps(response)
    encoded = base64.b64encode(decoded.encode("utf-8")).decode("ascii")
    body = json.dumps({"response": encoded}).encode("utf-8")
    return body, callback_checksum(decoded, SALT_KEY, SALT_INDEX)


async def measure_loop_stall(awaitable: Awaitable[T]) -> tuple[T, float]:
    """Await ``awaitable`` beside a 10 ms ticker.

    Returns the result and the longest gap between ticks. A handler that
    blocks the event loop shows up as a gap close to its blocking time.
    """
    loop = asyncio.get_running_loop()
    delays: list[float] = []
    done = asyncio.Event()

    async def tick() -> None:
        while not done.is_set():
            started = loop.time()
            await asyncio.sleep(TICK)
            delays.append(loop.time() - started)

    ticker = asyncio.create_task(tick())
    await asyncio.sleep(0)
    try:
        result = await awaitable
    finally:
        done.set()
        await ticker
    return result, max(delays, default=0.0)


@pytest.fixture
def signed_callback() -> Callable[..., tuple[bytes, str]]:
    """Return the callback factory."""
    return build_callback


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Return the PDF factory."""
    return build_pdf


@pytest.fixture
def sample_pdf() -> bytes:
    """Return a three-page text PDF."""
    return build_pdf(3)


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def payment_config() -> PaymentConfig:
    """Return a fully configured PaymentConfig for tests."""
    return PaymentConfig(
        phonepe_host_url="https://phonepe.test/apis/pg-sandbox",
        phonepe_merchant_id="MERCHANTUAT",
        phonepe_salt_key=SALT_KEY,
        phonepe_salt_index=SALT_INDEX,
        public_base_url=BASE_URL,
        stripe_secret_key="sk_test_123",
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret="rzp_test_secret",
        razorpay_base_url="https://razorpay.test",
    )


@pytest.fixture
async def async_client(
    memory_store: InMemoryDocumentStore,
    payment_config: PaymentConfig,
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    app.dependency_overrides[get_document_store] = lambda: memory_store
    app.dependency_overrides[get_payment_config] = lambda: payment_config
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def loop_stall() -> Callable[..., Awaitable[tuple[Any, float]]]:
    """Return the event loop stall meter."""
    return measure_loop_stall
