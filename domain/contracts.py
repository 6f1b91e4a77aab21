"""
Contract signing rules: resolving a share token, which fields a signer may
fill, and what a complete submission looks like.
"""
from __future__ import annotations

import base64
from typing import Dict, Iterable, List, Optional, Sequence

from .formatting import slugify
from .models import ContractStatus, FieldType, SignatureContract, SignatureField, SignerParty
from .validators import is_valid_email


class SigningError(ValueError):
    """Raised when a contract cannot be resolved or a submission is incomplete."""


def find_by_token(contracts: Iterable[SignatureContract], token: str) -> Optional[SignatureContract]:
    """Active contract whose title slug equals the share token."""
    for c in contracts:
        if c.status == ContractStatus.ACTIVE and slugify(c.title) == token:
            return c
    return None


def counterparty_fields(fields: Sequence[SignatureField]) -> List[SignatureField]:
    return [f for f in fields if f.signer_party == SignerParty.COUNTERPARTY]


def initial_values(contract: SignatureContract) -> Dict[str, str]:
    """Owner values are pre-filled and shown read-only."""
    return dict(contract.owner_field_values or {})


def set_field_value(values: Dict[str, str], fields: Sequence[SignatureField], field_id: str, value: str) -> Dict[str, str]:
    field = next((f for f in fields if f.id == field_id), None)
    if field is None:
        raise SigningError("Unknown field.")
    if field.signer_party == SignerParty.OWNER:
        raise SigningError("This field has already been signed.")
    out = dict(values)
    out[field_id] = value
    return out


def build_submission_values(
    fields: Sequence[SignatureField],
    values: Dict[str, str],
    signer_name: str,
    signer_email: str,
) -> Dict[str, str]:
    """Check a submission and return counterparty values keyed by field label."""
    if not signer_name or not signer_name.strip() or not signer_email or not signer_email.strip():
        raise SigningError("Please enter your name and email")
    if not is_valid_email(signer_email):
        raise SigningError("Please enter a valid email address")
    out: Dict[str, str] = {}
    for f in counterparty_fields(fields):
        v = values.get(f.id)
        if not v:
            raise SigningError(f"Please fill in: {f.label}")
        out[f.label] = v
    return out


def is_image_field(field: SignatureField) -> bool:
    return field.field_type in (FieldType.SIGNATURE, FieldType.INITIALS)


def png_data_url(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")


def image_data_url(raw: bytes, mime: str) -> str:
    return f"data:{mime};base64," + base64.b64encode(raw).decode("ascii")
