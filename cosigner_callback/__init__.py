"""
Co-signer callback: verifies signed transaction approval requests and
returns signed APPROVE/REJECT decisions.
"""
from .version import __version__
from .exceptions import (
    CallbackError, AuthenticationError, DecodeError, SigningError, RejectionKind
)
from .models import (
    ApprovalClaims, Destination, RawTx, ValidationResult, Decision, Action
)
from .transactions import (
    TransactionType, LegacyTransaction, AccessListTransaction, FeeMarketTransaction,
    AccessListEntry, TransactionSignature, DecodedTransaction
)
from .envelope import verify_envelope, sign_envelope
from .decoder import decode_transaction, signing_hash
from .validator import check, check_claims
from .decision import build_decision
from .config import Settings
from .keys import KeyMaterial, load_key_material
from .handler import CallbackHandler

__all__ = [
    "__version__",
    "CallbackError",
    "AuthenticationError",
    "DecodeError",
    "SigningError",
    "RejectionKind",
    "ApprovalClaims",
    "Destination",
    "RawTx",
    "ValidationResult",
    "Decision",
    "Action",
    "TransactionType",
    "LegacyTransaction",
    "AccessListTransaction",
    "FeeMarketTransaction",
    "AccessListEntry",
    "TransactionSignature",
    "DecodedTransaction",
    "verify_envelope",
    "sign_envelope",
    "decode_transaction",
    "signing_hash",
    "check",
    "check_claims",
    "build_decision",
    "Settings",
    "KeyMaterial",
    "load_key_material",
    "CallbackHandler",
]
