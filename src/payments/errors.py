"""Payment flow exceptions.

Each exception carries the HTTP status the API layer answers with.
"""


class PaymentError(Exception):
    """Base class for payment failures."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class InvalidOrderError(PaymentError):
    """Order data rejected before contacting any gateway."""

    status_code = 400


class GatewayConfigError(PaymentError):
    """Gateway credentials are missing on the server."""

    status_code = 500


class GatewayError(PaymentError):
    """The gateway refused the request or could not be reached."""

    status_code = 500

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, status_code)
        self.details = details or {}


class MalformedCallbackError(PaymentError):
    """Callback envelope could not be decoded."""

    status_code = 400


class ChecksumMismatchError(PaymentError):
    """Callback X-VERIFY header does not match the payload."""

    status_code = 400


class UnknownTransactionError(PaymentError):
    """No pending payment exists for the transaction id."""

    status_code = 404
