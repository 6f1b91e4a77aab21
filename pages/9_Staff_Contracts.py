import streamlit as st

from components.banners import notify_success, report_failure
from components.signature import typed_signature_data_url
from domain.contracts import is_image_field
from domain.formatting import slugify
from domain.models import ContractStatus, FieldType, SignerParty
from services.monitoring import init_monitoring
from services.repository import Repository
from services.signing import (
    add_field, create_contract, fields_for, list_contracts, set_owner_value, set_status, submissions_for,
)

st.set_page_config(page_title="Contracts", page_icon="📑", layout="wide")
init_monitoring()

st.title("📑 Contracts")
repo = Repository()

with st.sidebar.form("new_contract", clear_on_submit=True):
    st.subheader("New contract")
    title = st.text_input("Title")
    file_url = st.text_input("Document URL")
    file_name = st.text_input("File name", placeholder="contract.pdf")
    description = st.text_area("Description")
    if st.form_submit_button("Create"):
        try:
            create_contract(repo, title, file_url, file_name or "contract.pdf", description)
        except Exception as e:
            report_failure("Creating contract", e)
        else:
            notify_success("Contract created as draft")
            st.rerun()

try:
    contracts = list_contracts(repo)
except Exception as e:
    report_failure("Loading contracts", e)
    st.stop()

if not contracts:
    st.info("No contracts yet. Create one from the sidebar.")
    st.stop()

contract_id = st.selectbox("Contract", [c.id for c in contracts], format_func=lambda i: next(c.title for c in contracts if c.id == i))
contract = next(c for c in contracts if c.id == contract_id)

c1, c2 = st.columns([2, 1])
with c1:
    st.markdown(f"📄 [{contract.file_name}]({contract.file_url})")
    st.caption(f"Share link: `?token={slugify(contract.title)}` on the Sign Contract page")
with c2:
    statuses = list(ContractStatus)
    new_status = st.selectbox("Status", statuses, index=statuses.index(contract.status), format_func=lambda s: s.value.capitalize())
    if new_status != contract.status:
        try:
            set_status(repo, contract.id, new_status)
        except Exception as e:
            report_failure("Changing status", e)
        else:
            st.rerun()

tab_fields, tab_subs = st.tabs(["Fields", "Submissions"])

with tab_fields:
    fields = fields_for(repo, contract.id)
    owner_values = contract.owner_field_values or {}
    for f in fields:
        st.markdown(f"**{f.label}** · {f.field_type.value} · page {f.page_number} · {f.signer_party.value}")
        if f.signer_party != SignerParty.OWNER:
            continue
        if is_image_field(f):
            if owner_values.get(f.id):
                st.image(owner_values[f.id], width=200)
            typed = st.text_input("Type signature", key=f"own_sig_{f.id}")
            if st.button("Sign", key=f"own_btn_{f.id}"):
                try:
                    set_owner_value(repo, contract.id, f.id, typed_signature_data_url(typed))
                except Exception as e:
                    report_failure("Signing field", e)
                else:
                    st.rerun()
        else:
            val = st.text_input("Value", value=owner_values.get(f.id, ""), key=f"own_val_{f.id}")
            if val != owner_values.get(f.id, "") and st.button("Save value", key=f"own_save_{f.id}"):
                try:
                    set_owner_value(repo, contract.id, f.id, val)
                except Exception as e:
                    report_failure("Saving value", e)
                else:
                    st.rerun()

    with st.form("new_field", clear_on_submit=True):
        st.markdown("**Add field**")
        a1, a2, a3 = st.columns(3)
        label = a1.text_input("Label")
        field_type = a2.selectbox("Type", list(FieldType), format_func=lambda t: t.value)
        party = a3.selectbox("Filled by", list(SignerParty), index=1, format_func=lambda p: p.value)
        b1, b2, b3, b4, b5 = st.columns(5)
        page_number = b1.number_input("Page", min_value=1, value=1)
        x = b2.number_input("X %", min_value=0.0, max_value=100.0, value=10.0)
        y = b3.number_input("Y %", min_value=0.0, max_value=100.0, value=80.0)
        w = b4.number_input("Width %", min_value=0.0, max_value=100.0, value=25.0)
        h = b5.number_input("Height %", min_value=0.0, max_value=100.0, value=5.0)
        if st.form_submit_button("Add field"):
            try:
                add_field(repo, contract.id, {
                    "label": label, "field_type": field_type.value, "signer_party": party.value,
                    "page_number": int(page_number), "x_position": x, "y_position": y, "width": w, "height": h,
                })
            except Exception as e:
                report_failure("Adding field", e)
            else:
                st.rerun()

with tab_subs:
    subs = submissions_for(repo, contract.id)
    if not subs:
        st.caption("No submissions yet.")
    for s in subs:
        with st.expander(f"{s.signer_name} <{s.signer_email}> · {s.created_at:%Y-%m-%d %H:%M}" if s.created_at else s.signer_name):
            for label, value in s.field_values.items():
                if value.startswith("data:image"):
                    st.caption(label)
                    st.image(value, width=240)
                else:
                    st.write(f"**{label}:** {value}")
