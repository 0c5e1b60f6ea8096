"""
Certification Error Taxonomy

Typed failures raised by the certificate builder and the payment gate.
Routes translate these into HTTP responses; domain code never substitutes
default data for a record-level failure.
"""


class CertificationError(Exception):
    """Base class for every domain failure in this service."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class RecordUnavailable(CertificationError):
    """The attempt is missing, not owned by the caller, or its store failed."""


class UnknownReference(CertificationError):
    """No ledger row exists for the payment reference."""

    def __init__(self, reference: str):
        super().__init__(f"Unknown payment reference: {reference}")
        self.reference = reference


class GatewayError(CertificationError):
    """Gateway unreachable or returned a non-success HTTP status. Retryable."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(CertificationError):
    """Required configuration (API credentials) is missing. Not retryable."""


class ScoreValidationError(CertificationError, ValueError):
    """A score value could not be interpreted as a number."""


class PaymentRequired(CertificationError):
    """No verified, unconsumed reattempt payment is available."""
