import pytest

from domain.contracts import (
    SigningError, build_submission_values, find_by_token, png_data_url, set_field_value,
)
from domain.models import ContractStatus, SignatureContract, SignatureField
from services import signing
from services.notifications import recent_events
from services.repository import Repository, RepositoryError


def make_contract(title="Image Rights Agreement", status=ContractStatus.ACTIVE, owner_values=None):
    return SignatureContract(
        id="c1", title=title, file_url="https://example.org/c.pdf", file_name="c.pdf",
        status=status, owner_field_values=owner_values,
    )


FIELDS = [
    SignatureField(id="f1", contract_id="c1", field_type="signature", label="Agency signature", signer_party="owner"),
    SignatureField(id="f2", contract_id="c1", field_type="text", label="Full name", display_order=1),
    SignatureField(id="f3", contract_id="c1", field_type="signature", label="Player signature", display_order=2),
]


def test_find_by_token_matches_active_slug_only():
    active = make_contract()
    draft = make_contract(title="Draft Deal", status=ContractStatus.DRAFT)
    assert find_by_token([active, draft], "image-rights-agreement") is active
    assert find_by_token([active, draft], "draft-deal") is None
    assert find_by_token([active], "unknown") is None


def test_owner_fields_are_read_only():
    with pytest.raises(SigningError):
        set_field_value({}, FIELDS, "f1", "x")
    with pytest.raises(SigningError):
        set_field_value({}, FIELDS, "nope", "x")
    values = set_field_value({}, FIELDS, "f2", "Jane Doe")
    assert values == {"f2": "Jane Doe"}


def test_submission_requires_name_and_email():
    values = {"f2": "Jane", "f3": "data:image/png;base64,AA=="}
    with pytest.raises(SigningError, match="name and email"):
        build_submission_values(FIELDS, values, "", "jane@example.org")
    with pytest.raises(SigningError):
        build_submission_values(FIELDS, values, "Jane", "not-an-email")


def test_submission_requires_every_counterparty_field():
    with pytest.raises(SigningError, match="Player signature"):
        build_submission_values(FIELDS, {"f2": "Jane"}, "Jane", "jane@example.org")


def test_submission_values_keyed_by_label():
    values = {"f1": "owner-sig", "f2": "Jane", "f3": "sig"}
    out = build_submission_values(FIELDS, values, "Jane", "jane@example.org")
    # Owner values are not part of the signer's submission
    assert out == {"Full name": "Jane", "Player signature": "sig"}


def test_png_data_url():
    assert png_data_url(b"\x89PNG") == "data:image/png;base64,iVBORw=="


def _seed(repo):
    contract = signing.create_contract(repo, "Image Rights Agreement", "https://example.org/c.pdf", "c.pdf")
    signing.add_field(repo, contract.id, {"field_type": "signature", "label": "Agency signature", "signer_party": "owner"})
    signing.add_field(repo, contract.id, {"field_type": "text", "label": "Full name"})
    return contract


def test_draft_contract_does_not_resolve(tmp_path):
    repo = Repository(tmp_path)
    _seed(repo)
    with pytest.raises(SigningError, match="not found"):
        signing.load_for_token(repo, "image-rights-agreement")


def test_sign_flow_records_submission_and_notification(tmp_path):
    repo = Repository(tmp_path)
    contract = _seed(repo)
    fields = signing.fields_for(repo, contract.id)
    assert [f.label for f in fields] == ["Agency signature", "Full name"]
    signing.set_owner_value(repo, contract.id, fields[0].id, "data:image/png;base64,AA==")
    signing.set_status(repo, contract.id, ContractStatus.ACTIVE)

    session = signing.load_for_token(repo, "image-rights-agreement")
    assert session.values == {fields[0].id: "data:image/png;base64,AA=="}
    session.values = set_field_value(session.values, session.fields, fields[1].id, "Jane Doe")
    sub = signing.submit(repo, session, " Jane Doe ", "jane@example.org", "pytest")

    assert sub.signer_name == "Jane Doe"
    assert sub.field_values == {"Full name": "Jane Doe"}
    assert [s.id for s in signing.submissions_for(repo, contract.id)] == [sub.id]
    events = recent_events(repo, event_type="contract_signed")
    assert len(events) == 1
    assert events[0].event_data["signer_email"] == "jane@example.org"


def test_notification_failure_does_not_fail_submission(tmp_path, monkeypatch):
    repo = Repository(tmp_path)
    contract = _seed(repo)
    signing.set_status(repo, contract.id, ContractStatus.ACTIVE)
    session = signing.load_for_token(repo, "image-rights-agreement")
    field_id = next(f.id for f in session.fields if f.label == "Full name")
    session.values[field_id] = "Jane"

    def boom(*args, **kwargs):
        raise RepositoryError("notifications unavailable")

    monkeypatch.setattr(signing, "record_event", boom)
    sub = signing.submit(repo, session, "Jane", "jane@example.org")
    assert signing.submissions_for(repo, contract.id)[0].id == sub.id


def test_invalid_submission_writes_nothing(tmp_path):
    repo = Repository(tmp_path)
    contract = _seed(repo)
    signing.set_status(repo, contract.id, ContractStatus.ACTIVE)
    session = signing.load_for_token(repo, "image-rights-agreement")
    with pytest.raises(SigningError):
        signing.submit(repo, session, "Jane", "jane@example.org")
    assert signing.submissions_for(repo, contract.id) == []
    assert recent_events(repo) == []


def test_add_field_requires_label(tmp_path):
    repo = Repository(tmp_path)
    contract = _seed(repo)
    with pytest.raises(ValueError):
        signing.add_field(repo, contract.id, {"field_type": "text", "label": " "})
