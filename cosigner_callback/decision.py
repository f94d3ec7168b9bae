"""
Decision construction.
"""
from typing import Any

from .models import Action, Decision, ValidationResult


def build_decision(result: ValidationResult, request_id: Any) -> Decision:
    """Map a validation result to an APPROVE or REJECT decision for ``request_id``."""
    if result.ok:
        return Decision(action=Action.APPROVE, request_id=request_id)
    return Decision(
        action=Action.REJECT,
        request_id=request_id,
        rejection_reason=result.reason,
    )
