"""
Cross-validation of decoded transactions against asserted claims.

Each check is an independent predicate returning ``(ok, reason)`` so every
failure mode can be exercised and reported on its own.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Callable, List, Optional, Tuple, Union

from eth_utils import remove_0x_prefix

from .decoder import decode_transaction, signing_hash
from .exceptions import DecodeError, RejectionKind
from .models import ApprovalClaims, ValidationResult
from .transactions import DecodedTransaction

logger = logging.getLogger(__name__)

# Decimal exponent of the native asset (wei per ether)
DEFAULT_DECIMALS = 18

CheckOutcome = Tuple[bool, Optional[str]]


def to_native_units(value: int, decimals: int = DEFAULT_DECIMALS) -> Decimal:
    """Convert a smallest-denomination integer to the asset's native unit."""
    # string construction is exact; arithmetic would round to context precision
    return Decimal(f"{value}E-{decimals}")


def _parse_amount(amount: Union[str, int, float]) -> Decimal:
    # str() first so that floats compare by their shortest repr, not binary value
    try:
        parsed = Decimal(str(amount).strip())
    except InvalidOperation as e:
        raise ValueError(f"amountNative is not a decimal number: {amount!r}") from e
    if not parsed.is_finite():
        raise ValueError(f"amountNative is not a finite number: {amount!r}")
    return parsed


def amount_matches(
    decoded: DecodedTransaction,
    claims: ApprovalClaims,
    decimals: int = DEFAULT_DECIMALS,
) -> CheckOutcome:
    claimed_raw = claims.destination.amount_native
    try:
        claimed = _parse_amount(claimed_raw)
    except ValueError:
        return False, f"{RejectionKind.AMOUNT_MISMATCH.value}: unparseable claimed amount {claimed_raw!r}"

    actual = to_native_units(decoded.value, decimals)
    if actual != claimed:
        return False, (
            f"{RejectionKind.AMOUNT_MISMATCH.value}: transaction transfers {actual.normalize():f}, "
            f"claims declare {claimed.normalize():f}"
        )
    return True, None


def address_matches(decoded: DecodedTransaction, claims: ApprovalClaims) -> CheckOutcome:
    claimed = claims.destination.display_dst_address.strip().lower()
    if decoded.to is None:
        return False, f"{RejectionKind.ADDRESS_MISMATCH.value}: transaction is a contract creation"

    actual = "0x" + decoded.to.hex()
    if actual != claimed:
        return False, (
            f"{RejectionKind.ADDRESS_MISMATCH.value}: transaction sends to {actual}, "
            f"claims declare {claimed}"
        )
    return True, None


def hash_matches(decoded: DecodedTransaction, claims: ApprovalClaims) -> CheckOutcome:
    claimed = remove_0x_prefix(claims.transaction.payload.strip()).lower()
    if signing_hash(decoded).hex() != claimed:
        return False, RejectionKind.HASH_MISMATCH.value
    return True, None


def check(
    decoded: DecodedTransaction,
    claims: ApprovalClaims,
    decimals: int = DEFAULT_DECIMALS,
) -> ValidationResult:
    """
    Check that the claims describe exactly the decoded transaction.

    The hash check runs first since it binds the claims to the raw bytes
    byte-for-byte; evaluation stops at the first failing check.

    Args:
        decoded: Transaction decoded from ``claims.rawTx[0].rawTx``
        claims: Authenticated approval claims
        decimals: Decimal exponent of the native asset

    Returns:
        ValidationResult with the reason of the first failing check
    """
    checks: List[Callable[[], CheckOutcome]] = [
        lambda: hash_matches(decoded, claims),
        lambda: amount_matches(decoded, claims, decimals),
        lambda: address_matches(decoded, claims),
    ]
    for run in checks:
        ok, reason = run()
        if not ok:
            logger.warning(f"Request {claims.request_id} failed validation: {reason}")
            return ValidationResult(ok=False, reason=reason)
    return ValidationResult(ok=True)


def check_claims(claims: ApprovalClaims, decimals: int = DEFAULT_DECIMALS) -> ValidationResult:
    """Decode ``claims.rawTx[0].rawTx`` and check it, folding decode errors into the result."""
    try:
        decoded = decode_transaction(claims.transaction.raw_tx)
    except DecodeError as e:
        reason = f"{RejectionKind.DECODE_FAILURE.value}: {e}"
        logger.warning(f"Request {claims.request_id} failed validation: {reason}")
        return ValidationResult(ok=False, reason=reason)
    return check(decoded, claims, decimals)
