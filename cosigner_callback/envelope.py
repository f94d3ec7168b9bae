"""
Signed envelope codec.

Inbound requests and outbound decisions are compact JWTs signed with RS256.
This module verifies the co-signer's envelopes against its public key and
signs our decisions with the callback's private key.
"""
import logging
from typing import Any, Dict, Mapping, Union

import jwt

from .exceptions import AuthenticationError, SigningError
from .models import Decision

# Configure logger
logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM = "RS256"

# Unsafe algorithms that should always be rejected
UNSAFE_JWT_ALGORITHMS = ["none", ""]


def is_safe_jwt_algorithm(algorithm: str) -> bool:
    """
    Check if a JWT algorithm is considered safe.

    Args:
        algorithm: JWT algorithm string

    Returns:
        True if the algorithm is considered safe, False otherwise
    """
    return algorithm.lower() not in UNSAFE_JWT_ALGORITHMS


def verify_envelope(
    envelope: Union[bytes, str],
    public_key: Any,
    algorithm: str = DEFAULT_ALGORITHM,
) -> Dict[str, Any]:
    """
    Verify a signed envelope and return its claims.

    The header is inspected before any signature work so that tokens
    declaring ``none`` or a different algorithm (e.g. HS256 keyed with the
    public key) are refused outright.

    Args:
        envelope: Compact JWT as received on the wire
        public_key: Co-signer public key (PEM or cryptography key object)
        algorithm: The only algorithm accepted

    Returns:
        Decoded claims, without any business-field validation

    Raises:
        AuthenticationError: If the envelope is malformed, uses an unexpected
            algorithm or carries an invalid signature
    """
    if isinstance(envelope, (bytes, bytearray)):
        try:
            envelope = bytes(envelope).decode("ascii").strip()
        except UnicodeDecodeError as e:
            raise AuthenticationError("Envelope is not ASCII") from e
    if not envelope:
        raise AuthenticationError("Empty envelope")

    # Get JWT header without verification to check algorithm
    try:
        header = jwt.get_unverified_header(envelope)
    except jwt.DecodeError as e:
        raise AuthenticationError("Invalid JWT format - could not decode header") from e

    token_alg = header.get("alg") or ""
    if not isinstance(token_alg, str):
        raise AuthenticationError("JWT header alg must be a string")
    if not is_safe_jwt_algorithm(token_alg):
        raise AuthenticationError(f"Unsafe JWT algorithm: {token_alg!r}")
    if token_alg != algorithm:
        raise AuthenticationError(f"Unexpected JWT algorithm {token_alg}, expected {algorithm}")

    try:
        claims = jwt.decode(
            envelope,
            public_key,
            algorithms=[algorithm],
            options={"verify_signature": True, "verify_aud": False},
        )
    except jwt.InvalidSignatureError as e:
        raise AuthenticationError("Invalid JWT signature") from e
    except jwt.PyJWTError as e:
        raise AuthenticationError(f"JWT validation failed: {type(e).__name__}") from e

    if not isinstance(claims, dict):
        raise AuthenticationError("JWT claims are not a JSON object")

    logger.debug("Envelope signature verified")
    return claims


def sign_envelope(
    decision: Union[Decision, Mapping[str, Any]],
    private_key: Any,
    algorithm: str = DEFAULT_ALGORITHM,
) -> bytes:
    """
    Sign a decision as a compact JWT.

    Args:
        decision: Decision model or plain claims mapping
        private_key: Callback private key (PEM or cryptography key object)
        algorithm: Signing algorithm

    Returns:
        ASCII bytes of the compact JWT

    Raises:
        SigningError: If the key material is unusable
    """
    if isinstance(decision, Decision):
        payload = decision.to_claims()
    else:
        payload = dict(decision)

    if not is_safe_jwt_algorithm(algorithm):
        raise SigningError(f"Refusing to sign with unsafe algorithm: {algorithm!r}")

    try:
        token = jwt.encode(payload, private_key, algorithm=algorithm)
    except Exception as e:
        raise SigningError(f"Failed to sign decision: {e}") from e

    if isinstance(token, bytes):
        return token
    return token.encode("ascii")
