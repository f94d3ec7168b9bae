"""
CallbackHandler - request pipeline for co-signer approval callbacks.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from ._rate_limited_log import rate_limited_log
from .config import Settings
from .decision import build_decision
from .envelope import sign_envelope, verify_envelope
from .exceptions import AuthenticationError, RejectionKind, SigningError
from .keys import KeyMaterial
from .models import ApprovalClaims, Decision, ValidationResult
from .validator import check_claims

HTTP_OK = 200
HTTP_UNAUTHORIZED = 401
HTTP_SERVER_ERROR = 500


class CallbackHandler:
    """
    Turns a signed approval request into a signed decision.

    Every request is handled independently; the handler holds only the
    read-only key material and settings, so one instance may serve
    concurrent requests.

    Each call to :meth:`handle` ends in exactly one of:

    - ``(401, b"")`` when the request cannot be authenticated
    - ``(200, <signed REJECT>)`` when it is authenticated but does not verify
    - ``(200, <signed APPROVE>)`` when every check passes
    - ``(500, b"")`` when the decision cannot be signed
    """

    def __init__(
        self,
        keys: KeyMaterial,
        settings: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the handler

        Args:
            keys: Co-signer public key and callback private key
            settings: Process settings (defaults to built-in defaults)
            logger: Optional logger instance to use
        """
        self.keys = keys
        self.settings = settings or Settings()
        self.logger = logger or logging.getLogger(__name__)

    def authenticate(self, body: bytes) -> Dict[str, Any]:
        """
        Verify the inbound envelope.

        Raises:
            AuthenticationError: If the envelope does not verify
        """
        return verify_envelope(
            body, self.keys.cosigner_public_key, algorithm=self.settings.jwt_algorithm
        )

    def evaluate(self, raw_claims: Dict[str, Any]) -> Decision:
        """
        Decide on authenticated claims. Never raises for bad claim content.
        """
        request_id = raw_claims.get("requestId")
        try:
            claims = ApprovalClaims.model_validate(raw_claims)
        except ValidationError as e:
            fields = sorted({".".join(str(p) for p in err["loc"]) for err in e.errors()})
            reason = f"{RejectionKind.INVALID_CLAIMS.value}: {', '.join(fields)}"
            self.logger.warning(f"Request {request_id} rejected: {reason}")
            return build_decision(ValidationResult(ok=False, reason=reason), request_id)

        result = check_claims(claims, decimals=self.settings.native_decimals)
        return build_decision(result, claims.request_id)

    def reject(self, raw_claims: Dict[str, Any], reason: str) -> Decision:
        """Build a REJECT decision for authenticated claims without evaluating them."""
        request_id = raw_claims.get("requestId")
        return build_decision(ValidationResult(ok=False, reason=reason), request_id)

    def sign(self, decision: Decision) -> bytes:
        return sign_envelope(
            decision, self.keys.signing_private_key, algorithm=self.settings.jwt_algorithm
        )

    def _respond(self, decision: Decision) -> Tuple[int, bytes]:
        try:
            token = self.sign(decision)
        except SigningError as e:
            self.logger.error(f"Could not sign decision for request {decision.request_id}: {e}")
            return HTTP_SERVER_ERROR, b""

        self.logger.info(f"Request {decision.request_id}: {decision.action}"
                         + (f" ({decision.rejection_reason})" if decision.rejection_reason else ""))
        return HTTP_OK, token

    def _authenticate_or_log(self, body: bytes) -> Optional[Dict[str, Any]]:
        try:
            return self.authenticate(body)
        except AuthenticationError as e:
            rate_limited_log(
                f"Rejected unauthenticated callback request: {e}",
                level="warning",
                interval=self.settings.auth_log_interval,
                logger_instance=self.logger,
            )
            return None

    def handle(self, body: bytes) -> Tuple[int, bytes]:
        """
        Process a transaction signing request.

        Args:
            body: Raw request body (compact JWT)

        Returns:
            Tuple of (HTTP status, response body)
        """
        raw_claims = self._authenticate_or_log(body)
        if raw_claims is None:
            return HTTP_UNAUTHORIZED, b""
        return self._respond(self.evaluate(raw_claims))

    def handle_config_change(self, body: bytes) -> Tuple[int, bytes]:
        """
        Process a configuration change signing request.

        Configuration changes carry no raw transaction to verify, so they are
        always rejected once authenticated.
        """
        raw_claims = self._authenticate_or_log(body)
        if raw_claims is None:
            return HTTP_UNAUTHORIZED, b""
        reason = f"{RejectionKind.UNSUPPORTED_OPERATION.value}: configuration changes are not approved by this callback"
        return self._respond(self.reject(raw_claims, reason))
