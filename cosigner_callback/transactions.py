"""
Decoded transaction types.

A decoded transaction is one of three variants, each carrying only the
fields its encoding defines. All integer fields are Python ints and may
exceed 64 bits.
"""
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple, Union

from eth_utils import to_checksum_address


class TransactionType(str, Enum):
    """Transaction encodings, keyed by their envelope type byte"""
    LEGACY = "legacy"
    ACCESS_LIST = "access-list"
    FEE_MARKET = "fee-market"

    @property
    def type_byte(self) -> Optional[int]:
        return _TYPE_BYTES[self]


_TYPE_BYTES = {
    TransactionType.LEGACY: None,
    TransactionType.ACCESS_LIST: 0x01,
    TransactionType.FEE_MARKET: 0x02,
}


@dataclass(frozen=True)
class AccessListEntry:
    address: bytes
    storage_keys: Tuple[bytes, ...] = ()


@dataclass(frozen=True)
class TransactionSignature:
    """
    Signature fields of an already-signed transaction.

    For legacy transactions ``v`` is the raw (possibly EIP-155) value;
    for typed transactions it is the y-parity bit.
    """
    v: int
    r: int
    s: int


class _AddressMixin:
    to: Optional[bytes]

    @property
    def is_contract_creation(self) -> bool:
        return self.to is None

    @property
    def to_address(self) -> Optional[str]:
        """Checksummed destination address, or None for contract creation"""
        if self.to is None:
            return None
        return to_checksum_address(self.to)


@dataclass(frozen=True)
class LegacyTransaction(_AddressMixin):
    type: ClassVar[TransactionType] = TransactionType.LEGACY

    nonce: int
    gas_price: int
    gas: int
    to: Optional[bytes]
    value: int
    data: bytes
    chain_id: Optional[int] = None
    signature: Optional[TransactionSignature] = None


@dataclass(frozen=True)
class AccessListTransaction(_AddressMixin):
    type: ClassVar[TransactionType] = TransactionType.ACCESS_LIST

    chain_id: int
    nonce: int
    gas_price: int
    gas: int
    to: Optional[bytes]
    value: int
    data: bytes
    access_list: Tuple[AccessListEntry, ...] = ()
    signature: Optional[TransactionSignature] = None


@dataclass(frozen=True)
class FeeMarketTransaction(_AddressMixin):
    type: ClassVar[TransactionType] = TransactionType.FEE_MARKET

    chain_id: int
    nonce: int
    max_priority_fee_per_gas: int
    max_fee_per_gas: int
    gas: int
    to: Optional[bytes]
    value: int
    data: bytes
    access_list: Tuple[AccessListEntry, ...] = ()
    signature: Optional[TransactionSignature] = None


DecodedTransaction = Union[LegacyTransaction, AccessListTransaction, FeeMarketTransaction]
