"""
Exceptions for the co-signer callback.
"""
from enum import Enum


class RejectionKind(str, Enum):
    """
    Categories of rejection reported in a signed REJECT decision.

    The value is used as the prefix of ``rejectionReason``.
    """
    AMOUNT_MISMATCH = "amount mismatch"
    ADDRESS_MISMATCH = "address mismatch"
    HASH_MISMATCH = "hash mismatch"
    DECODE_FAILURE = "decode failure"
    INVALID_CLAIMS = "invalid claims"
    UNSUPPORTED_OPERATION = "unsupported operation"


class CallbackError(Exception):
    """Base exception for co-signer callback errors."""
    pass


class AuthenticationError(CallbackError):
    """Raised when an inbound envelope is malformed, unsigned or signed by the wrong key."""
    pass


class DecodeError(CallbackError):
    """Raised when raw transaction bytes match no known transaction schema."""
    pass


class SigningError(CallbackError):
    """Raised when the outbound decision cannot be signed."""
    pass
