from typing import Optional


class VerifierError(Exception):
    """Base class for errors raised by the verifier."""


class TransportError(VerifierError):
    """A collaborator call failed at the network level or returned non-2xx."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class InvalidFormatError(VerifierError, ValueError):
    """Evidence does not have the shape its producer promised."""


class VerificationError(VerifierError):
    """The verification flow cannot continue with the data it received."""
