import streamlit as st

from components.banners import notify_error, report_failure
from components.signature import typed_signature_data_url
from domain.contracts import SigningError, image_data_url, is_image_field, set_field_value
from domain.models import FieldType, SignerParty
from services.monitoring import init_monitoring
from services.repository import Repository
from services.signing import load_for_token, submit

st.set_page_config(page_title="Sign Contract", page_icon="✍️")
init_monitoring()

repo = Repository()
token = st.query_params.get("token", "")

if not token:
    st.error("This signing link is incomplete.")
    st.stop()

state_key = f"signing_{token}"
if state_key not in st.session_state:
    try:
        st.session_state[state_key] = load_for_token(repo, token)
    except SigningError as e:
        st.error(str(e))
        st.stop()
    except Exception as e:
        report_failure("Loading contract", e)
        st.stop()
session = st.session_state[state_key]

if st.session_state.get(f"{state_key}_done"):
    st.success("Thank you! Your signature has been submitted.")
    st.stop()

st.title(f"✍️ {session.contract.title}")
if session.contract.description:
    st.write(session.contract.description)
st.markdown(f"📄 [{session.contract.file_name}]({session.contract.file_url})")

st.divider()


def _put(field_id: str, value: str) -> None:
    try:
        session.values = set_field_value(session.values, session.fields, field_id, value)
    except SigningError as e:
        notify_error(str(e))


for f in session.fields:
    current = session.values.get(f.id, "")
    label = f"{f.label} (page {f.page_number})"
    if f.signer_party == SignerParty.OWNER:
        if is_image_field(f) and current:
            st.caption(label)
            st.image(current, width=240)
        else:
            st.text_input(label, value=current, disabled=True, key=f"owner_{f.id}")
        continue

    if f.field_type == FieldType.TEXT:
        _put(f.id, st.text_input(label, value=current, key=f"fld_{f.id}").strip())
    elif f.field_type == FieldType.DATE:
        d = st.date_input(label, value=None, key=f"fld_{f.id}")
        _put(f.id, d.isoformat() if d else "")
    elif f.field_type == FieldType.CHECKBOX:
        _put(f.id, "true" if st.checkbox(label, value=current == "true", key=f"fld_{f.id}") else "")
    else:
        st.markdown(f"**{label}**")
        mode = st.radio("Signature", ["Type", "Upload"], horizontal=True, key=f"mode_{f.id}", label_visibility="collapsed")
        if mode == "Type":
            typed = st.text_input("Type your signature", key=f"typed_{f.id}")
            if st.button("Adopt signature", key=f"adopt_{f.id}"):
                try:
                    _put(f.id, typed_signature_data_url(typed))
                except ValueError as e:
                    notify_error(str(e))
        else:
            upload = st.file_uploader("Upload signature image", type=["png", "jpg", "jpeg"], key=f"upload_{f.id}")
            if upload is not None:
                _put(f.id, image_data_url(upload.getvalue(), upload.type or "image/png"))
        if session.values.get(f.id):
            st.image(session.values[f.id], width=240)

st.divider()
st.subheader("Your details")
c1, c2 = st.columns(2)
with c1:
    signer_name = st.text_input("Full name", key="signer_name")
with c2:
    signer_email = st.text_input("Email", key="signer_email")

if st.button("Submit signature", type="primary"):
    try:
        submit(repo, session, signer_name, signer_email, st.context.headers.get("User-Agent"))
    except SigningError as e:
        notify_error(str(e))
    except Exception as e:
        report_failure("Submitting signature", e)
    else:
        st.session_state[f"{state_key}_done"] = True
        st.rerun()
