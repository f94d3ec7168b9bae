"""
Raw transaction decoding.

Parses an unsigned (or signed) RLP-encoded transaction into one of the
variants in :mod:`cosigner_callback.transactions` and computes the keccak256
digest of its signable representation.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import rlp
from eth_utils import keccak, remove_0x_prefix
from rlp.exceptions import RLPException
from rlp.sedes import Binary, CountableList, List as RLPList, big_endian_int, binary

from .exceptions import DecodeError
from .transactions import (
    AccessListEntry, AccessListTransaction, DecodedTransaction, FeeMarketTransaction,
    LegacyTransaction, TransactionSignature, TransactionType,
)

logger = logging.getLogger(__name__)

# First byte of an RLP list header; anything at or above is a legacy transaction
LEGACY_LIST_PREFIX = 0xC0

address = Binary.fixed_length(20, allow_empty=False)
to_address = Binary.fixed_length(20, allow_empty=True)
storage_key = Binary.fixed_length(32, allow_empty=False)
access_list_sedes = CountableList(RLPList([address, CountableList(storage_key)]))

LEGACY_FIELDS: Sequence[Tuple[str, Any]] = (
    ("nonce", big_endian_int),
    ("gas_price", big_endian_int),
    ("gas", big_endian_int),
    ("to", to_address),
    ("value", big_endian_int),
    ("data", binary),
)

ACCESS_LIST_FIELDS: Sequence[Tuple[str, Any]] = (
    ("chain_id", big_endian_int),
    ("nonce", big_endian_int),
    ("gas_price", big_endian_int),
    ("gas", big_endian_int),
    ("to", to_address),
    ("value", big_endian_int),
    ("data", binary),
    ("access_list", access_list_sedes),
)

FEE_MARKET_FIELDS: Sequence[Tuple[str, Any]] = (
    ("chain_id", big_endian_int),
    ("nonce", big_endian_int),
    ("max_priority_fee_per_gas", big_endian_int),
    ("max_fee_per_gas", big_endian_int),
    ("gas", big_endian_int),
    ("to", to_address),
    ("value", big_endian_int),
    ("data", binary),
    ("access_list", access_list_sedes),
)

SIGNATURE_FIELDS: Sequence[Tuple[str, Any]] = (
    ("v", big_endian_int),
    ("r", big_endian_int),
    ("s", big_endian_int),
)

TYPED_SCHEMAS = {
    TransactionType.ACCESS_LIST.type_byte: (AccessListTransaction, ACCESS_LIST_FIELDS),
    TransactionType.FEE_MARKET.type_byte: (FeeMarketTransaction, FEE_MARKET_FIELDS),
}


def _to_bytes(raw: Union[str, bytes]) -> bytes:
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw)
    if not isinstance(raw, str):
        raise DecodeError(f"raw transaction must be hex string or bytes, got {type(raw).__name__}")
    try:
        return bytes.fromhex(remove_0x_prefix(raw.strip()))
    except ValueError as e:
        raise DecodeError(f"raw transaction is not valid hex: {e}") from e


def _decode_list(payload: bytes) -> List[Any]:
    if not payload:
        raise DecodeError("empty transaction payload")
    try:
        items = rlp.decode(payload, strict=True)
    except RLPException as e:
        raise DecodeError(f"invalid RLP encoding: {e}") from e
    if not isinstance(items, (list, tuple)):
        raise DecodeError("transaction payload is not an RLP list")
    return list(items)


def _deserialize(items: Sequence[Any], fields: Sequence[Tuple[str, Any]]) -> Dict[str, Any]:
    sedes = RLPList([s for _, s in fields], strict=True)
    try:
        values = sedes.deserialize(items)
    except (RLPException, TypeError, ValueError) as e:
        raise DecodeError(f"invalid transaction field: {e}") from e
    decoded = dict(zip((name for name, _ in fields), values))
    if "to" in decoded:
        decoded["to"] = decoded["to"] or None
    if "access_list" in decoded:
        decoded["access_list"] = tuple(
            AccessListEntry(address=bytes(addr), storage_keys=tuple(bytes(k) for k in keys))
            for addr, keys in decoded["access_list"]
        )
    return decoded


def _split_signature(
    items: List[Any],
    fields: Sequence[Tuple[str, Any]],
    label: str,
) -> Tuple[List[Any], Optional[Dict[str, int]]]:
    """Split off trailing v, r, s items; arity must be unsigned or signed length."""
    unsigned = len(fields)
    if len(items) == unsigned:
        return items, None
    if len(items) == unsigned + len(SIGNATURE_FIELDS):
        return items[:unsigned], _deserialize(items[unsigned:], SIGNATURE_FIELDS)
    raise DecodeError(
        f"{label} transaction must have {unsigned} or {unsigned + len(SIGNATURE_FIELDS)} "
        f"fields, got {len(items)}"
    )


def _decode_legacy(data: bytes) -> LegacyTransaction:
    items = _decode_list(data)
    body, sig = _split_signature(items, LEGACY_FIELDS, "legacy")
    fields = _deserialize(body, LEGACY_FIELDS)

    if sig is None:
        return LegacyTransaction(**fields)

    v, r, s = sig["v"], sig["r"], sig["s"]
    if r == 0 and s == 0:
        # unsigned EIP-155 form: v carries the chain id
        return LegacyTransaction(chain_id=v or None, **fields)
    if v in (27, 28):
        chain_id = None
    elif v >= 35:
        chain_id = (v - 35) // 2
    else:
        raise DecodeError(f"invalid legacy signature v value: {v}")
    return LegacyTransaction(chain_id=chain_id, signature=TransactionSignature(v, r, s), **fields)


def _decode_typed(type_byte: int, payload: bytes) -> DecodedTransaction:
    cls, schema = TYPED_SCHEMAS[type_byte]
    items = _decode_list(payload)
    body, sig = _split_signature(items, schema, cls.type.value)
    fields = _deserialize(body, schema)
    signature = None
    if sig is not None:
        if sig["v"] not in (0, 1):
            raise DecodeError(f"invalid y-parity value: {sig['v']}")
        signature = TransactionSignature(sig["v"], sig["r"], sig["s"])
    return cls(signature=signature, **fields)


def decode_transaction(raw: Union[str, bytes]) -> DecodedTransaction:
    """
    Decode a raw encoded transaction.

    Args:
        raw: Hex string (with or without ``0x``) or raw bytes

    Returns:
        LegacyTransaction, AccessListTransaction or FeeMarketTransaction

    Raises:
        DecodeError: If the bytes match no known transaction schema
    """
    data = _to_bytes(raw)
    if not data:
        raise DecodeError("empty raw transaction")

    first = data[0]
    if first >= LEGACY_LIST_PREFIX:
        tx = _decode_legacy(data)
    elif first in TYPED_SCHEMAS:
        tx = _decode_typed(first, data[1:])
    else:
        raise DecodeError(f"unknown transaction type byte 0x{first:02x}")

    logger.debug(f"Decoded {tx.type.value} transaction to={tx.to_address} value={tx.value}")
    return tx


def _access_list_items(entries: Sequence[AccessListEntry]) -> List[Any]:
    return [[e.address, list(e.storage_keys)] for e in entries]


def signable_fields(tx: DecodedTransaction) -> List[Any]:
    """
    Field list whose RLP encoding is signed, never including v, r, s.

    Legacy transactions with a known chain id follow EIP-155 and append
    ``[chain_id, 0, 0]``.
    """
    to = tx.to or b""
    if isinstance(tx, LegacyTransaction):
        fields = [tx.nonce, tx.gas_price, tx.gas, to, tx.value, tx.data]
        if tx.chain_id:
            fields += [tx.chain_id, 0, 0]
        return fields
    if isinstance(tx, AccessListTransaction):
        return [
            tx.chain_id, tx.nonce, tx.gas_price, tx.gas, to, tx.value, tx.data,
            _access_list_items(tx.access_list),
        ]
    if isinstance(tx, FeeMarketTransaction):
        return [
            tx.chain_id, tx.nonce, tx.max_priority_fee_per_gas, tx.max_fee_per_gas,
            tx.gas, to, tx.value, tx.data, _access_list_items(tx.access_list),
        ]
    raise TypeError(f"Unsupported transaction type: {type(tx).__name__}")


def signing_payload(tx: DecodedTransaction) -> bytes:
    """Exact byte sequence whose digest authorizes the transaction"""
    encoded = rlp.encode(signable_fields(tx))
    type_byte = tx.type.type_byte
    if type_byte is None:
        return encoded
    return bytes([type_byte]) + encoded


def signing_hash(tx: DecodedTransaction) -> bytes:
    """keccak256 of the signable representation"""
    return keccak(signing_payload(tx))
