"""Shared exceptions module."""

from typing import Optional


class TransferQuotaException(Exception):
    """Base exception for transfer quota services."""

    pass


class StorageUnavailableError(TransferQuotaException):
    """Raised by repositories when the backing store cannot be reached."""

    def __init__(self, message: Optional[str] = "Storage unavailable"):
        """Create a new StorageUnavailableError instance."""
        self.message = message
        super().__init__(self.message)


class InvalidQuotaLimitError(TransferQuotaException):
    """Raised when a quota limit is negative."""

    def __init__(self, limit_bytes: int):
        """Create a new InvalidQuotaLimitError instance."""
        self.limit_bytes = limit_bytes
        super().__init__(f"Quota limit must be >= 0 bytes, got {limit_bytes}")


class InvalidThresholdsError(TransferQuotaException):
    """Raised when warning/critical percentages are out of range or inverted."""

    def __init__(self, warning: int, critical: int, message: Optional[str] = None):
        """Create a new InvalidThresholdsError instance."""
        if message is None:
            message = (
                f"Invalid thresholds warning={warning} critical={critical}: "
                "both must be within 1..100 and warning must be below critical"
            )
        self.warning = warning
        self.critical = critical
        self.message = message
        super().__init__(message)


class InvalidTransferError(TransferQuotaException):
    """Raised when a transfer report carries a negative byte count or no account."""

    pass


class EmailDeliveryError(TransferQuotaException):
    """Raised by e-mail adapters when the transport rejects a message."""

    def __init__(self, recipient: str, message: Optional[str] = None):
        """Create a new EmailDeliveryError instance."""
        self.recipient = recipient
        self.message = message or f"Could not deliver e-mail to {recipient}"
        super().__init__(self.message)
