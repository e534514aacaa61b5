"""
Exception hierarchy for the payment sync.

Integrations raise these; the reconciliation entry point catches them and
turns them into a structured outcome.
"""
from typing import Optional


class PaymentSyncError(Exception):
    """Base exception for payment sync errors."""

    pass


class ConfigurationError(PaymentSyncError):
    """Raised when a required configuration option is missing or invalid."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class FetchError(PaymentSyncError):
    """Raised when an order or payment list cannot be read from a remote system."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.original_error = original_error


class WriteError(PaymentSyncError):
    """Raised when a payment or its order relation cannot be persisted."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.original_error = original_error
