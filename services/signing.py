"""
Public contract signing flow: resolve a share token, load the contract's
fields, persist the signer's submission and notify staff.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from domain.contracts import SigningError, build_submission_values, find_by_token, initial_values
from domain.models import (
    ContractStatus, SignatureContract, SignatureField, SignatureSubmission,
)
from domain.validators import require_fields

from .monitoring import capture_exception, get_logger
from .notifications import record_event
from .repository import Repository, RepositoryError

CONTRACTS = "signature_contracts"
FIELDS = "signature_fields"
SUBMISSIONS = "signature_submissions"

logger = get_logger(__name__)


@dataclass
class SigningSession:
    contract: SignatureContract
    fields: List[SignatureField]
    values: Dict[str, str] = field(default_factory=dict)


def load_for_token(repo: Repository, token: str) -> SigningSession:
    """Active contract for the token, with its fields in display order."""
    contracts = repo.fetch(SignatureContract, CONTRACTS, {"status": ContractStatus.ACTIVE.value})
    contract = find_by_token(contracts, token)
    if contract is None:
        raise SigningError("Contract not found or is no longer active")
    fields = fields_for(repo, contract.id)
    return SigningSession(contract=contract, fields=fields, values=initial_values(contract))


def submit(
    repo: Repository,
    session: SigningSession,
    signer_name: str,
    signer_email: str,
    user_agent: Optional[str] = None,
) -> SignatureSubmission:
    values = build_submission_values(session.fields, session.values, signer_name, signer_email)
    row = repo.insert(SUBMISSIONS, {
        "contract_id": session.contract.id,
        "signer_name": signer_name.strip(),
        "signer_email": signer_email.strip(),
        "field_values": values,
        "user_agent": user_agent,
    })
    submission = SignatureSubmission.model_validate(row)
    logger.info(f"Contract {session.contract.id} signed by {submission.signer_name}")

    # The submission stands even if staff cannot be notified
    try:
        record_event(
            repo,
            "contract_signed",
            "Contract Signed",
            f'{submission.signer_name} signed "{session.contract.title}"',
            {
                "contract_id": session.contract.id,
                "contract_title": session.contract.title,
                "signer_name": submission.signer_name,
                "signer_email": submission.signer_email,
            },
        )
    except RepositoryError as e:
        capture_exception(e, {"contract_id": session.contract.id})
    return submission


def fields_for(repo: Repository, contract_id: str) -> List[SignatureField]:
    return repo.fetch(SignatureField, FIELDS, {"contract_id": contract_id}, order_by="display_order")


def submissions_for(repo: Repository, contract_id: str) -> List[SignatureSubmission]:
    return repo.fetch(SignatureSubmission, SUBMISSIONS, {"contract_id": contract_id}, order_by="created_at", descending=True)


# -- staff side ------------------------------------------------------------

def list_contracts(repo: Repository) -> List[SignatureContract]:
    return repo.fetch(SignatureContract, CONTRACTS, order_by="title")


def create_contract(repo: Repository, title: str, file_url: str, file_name: str, description: Optional[str] = None) -> SignatureContract:
    if not title or not title.strip() or not file_url:
        raise SigningError("Title and document are required")
    row = repo.insert(CONTRACTS, {
        "title": title.strip(),
        "description": description or None,
        "file_url": file_url,
        "file_name": file_name,
        "status": ContractStatus.DRAFT.value,
        "owner_field_values": {},
    })
    return SignatureContract.model_validate(row)


def set_status(repo: Repository, contract_id: str, status: ContractStatus) -> SignatureContract:
    return SignatureContract.model_validate(repo.update(CONTRACTS, contract_id, {"status": status.value}))


def add_field(repo: Repository, contract_id: str, data: Dict) -> SignatureField:
    require_fields(data, ["label", "field_type"])
    repo.get(CONTRACTS, contract_id)
    order = len(repo.select(FIELDS, {"contract_id": contract_id}))
    candidate = SignatureField.model_validate({"id": "new", "contract_id": contract_id, "display_order": order, **data})
    row = candidate.model_dump(mode="json")
    row.pop("id")
    return SignatureField.model_validate(repo.insert(FIELDS, row))


def set_owner_value(repo: Repository, contract_id: str, field_id: str, value: str) -> SignatureContract:
    """Owner-side values are filled by staff before sharing the link."""
    contract = repo.fetch_one(SignatureContract, CONTRACTS, contract_id)
    values = dict(contract.owner_field_values or {})
    values[field_id] = value
    return SignatureContract.model_validate(repo.update(CONTRACTS, contract_id, {"owner_field_values": values}))
