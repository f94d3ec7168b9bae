"""
Data models for the co-signer callback.
"""
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class Destination(BaseModel):
    """A single transfer destination as asserted by the co-signer"""
    amount_native: Union[str, int, float] = Field(..., alias="amountNative")
    display_dst_address: str = Field(..., alias="displayDstAddress")
    amount: Optional[Union[str, int, float]] = None
    type: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "allow"


class RawTx(BaseModel):
    """Unsigned raw transaction and its expected signing digest"""
    raw_tx: str = Field(..., alias="rawTx")
    payload: str
    key_derivation_path: Optional[List[int]] = Field(None, alias="keyDerivationPath")

    class Config:
        populate_by_name = True
        extra = "allow"


class ApprovalClaims(BaseModel):
    """Authenticated claims of a transaction signing request"""
    request_id: str = Field(..., alias="requestId")
    destinations: List[Destination]
    raw_tx: List[RawTx] = Field(..., alias="rawTx")
    tx_id: Optional[str] = Field(None, alias="txId")
    asset: Optional[str] = None
    source_type: Optional[str] = Field(None, alias="sourceType")
    operation: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "allow"

    @field_validator("destinations", "raw_tx")
    @classmethod
    def non_empty(cls, v: List[Any]) -> List[Any]:
        if not v:
            raise ValueError("must contain at least one entry")
        return v

    @property
    def destination(self) -> Destination:
        return self.destinations[0]

    @property
    def transaction(self) -> RawTx:
        return self.raw_tx[0]


class ValidationResult(BaseModel):
    """Outcome of cross-checking decoded fields against the claims"""
    ok: bool
    reason: Optional[str] = None


class Action(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class Decision(BaseModel):
    """Decision returned to the co-signer, correlated by request id"""
    action: Action
    # echoed as received, whatever its JSON type
    request_id: Any = Field(..., alias="requestId")
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")

    class Config:
        populate_by_name = True
        use_enum_values = True

    def to_claims(self) -> Dict[str, Any]:
        """Serialize by alias, omitting an absent rejection reason."""
        return self.model_dump(by_alias=True, exclude_none=True)
