"""Error taxonomy for the donation pipeline.

Every failure a single message's pipeline can hit is a DonationError
subclass carrying a stable ``code``. Codes are logged for diagnosis and
attached to error outcomes, but are not shown to chat users.

A zero amount is not an error; see ValidationAction.NO_DONATION.
"""

from typing import ClassVar

__all__ = [
    "DonationError",
    "ExtractionUnavailable",
    "ExtractionParseFailed",
    "InvalidAmount",
    "RecipientUnresolved",
    "AmountPrecisionError",
    "DispatchRejected",
    "INTERNAL_ERROR_CODE",
]

INTERNAL_ERROR_CODE = "Internal"


class DonationError(Exception):
    """Base class for all donation pipeline failures."""

    code: ClassVar[str] = "DonationError"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.code)
        self.detail = detail


class ExtractionUnavailable(DonationError):
    """The inference service call failed (network, timeout, provider error)."""

    code = "ExtractionUnavailable"


class ExtractionParseFailed(DonationError):
    """The inference response could not be read as a donation record."""

    code = "ExtractionParseFailed"


class InvalidAmount(DonationError):
    """The extracted amount is negative or not a finite number."""

    code = "InvalidAmount"


class RecipientUnresolved(DonationError):
    """The stream or its owning account could not be found."""

    code = "RecipientUnresolved"


class AmountPrecisionError(DonationError):
    """The amount cannot be represented exactly in the chain's smallest unit."""

    code = "AmountPrecisionError"


class DispatchRejected(DonationError):
    """The chain layer rejected the submission or did not answer in time.

    ``detail`` carries the underlying reason as reported by the chain layer.
    """

    code = "DispatchRejected"
