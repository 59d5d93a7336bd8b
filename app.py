"""Streamlit UI — five-step loan intake wizard."""

import asyncio
import json

import streamlit as st
import streamlit.components.v1 as components

from config import configure_logging, load_config
from intake.formatters import mailto_uri, tel_uri
from intake.rules import missing_fields
from intake.state import FIELD_NAMES
from intake.steps import (
    FIELD_DEFS,
    LOAN_KINDS,
    BusinessFields,
    ContactFields,
    FieldUpdate,
    LoanDetailsFields,
    LoanTypeFields,
    ReviewFields,
    consent_text,
    review_lines,
    step_slice,
)
from intake.submission import SubmissionOutcome, SubmissionResult, submit_application
from intake.wizard import WizardController

configure_logging()

# ── Page config ─────────────────────────────────────────────────────────
st.set_page_config(page_title="Loan Intake", page_icon="🏦", layout="centered")


# ── Session state init ──────────────────────────────────────────────────
def _init_session():
    if "wizard" not in st.session_state:
        st.session_state.config = load_config()
        st.session_state.wizard = WizardController(
            gate_forward_jumps=st.session_state.config.gate_forward_jumps,
        )
        st.session_state.notice = None

_init_session()

config = st.session_state.config
wizard: WizardController = st.session_state.wizard


# ── Field widgets ───────────────────────────────────────────────────────
def _widget_key(name: str) -> str:
    return f"field_{name}"


def _commit(name: str, update: FieldUpdate):
    """on_change: run the formatter and write the display value back."""
    key = _widget_key(name)
    st.session_state[key] = update(name, st.session_state[key] or "")


def _field(name: str, value: str, update: FieldUpdate):
    field_def = FIELD_DEFS[name]
    key = _widget_key(name)
    # Widget state is dropped when a step is hidden; reseed from the form
    if key not in st.session_state:
        st.session_state[key] = value or (None if field_def.widget == "select" else "")

    if field_def.widget == "select":
        st.selectbox(
            field_def.label,
            options=list(LOAN_KINDS),
            format_func=LOAN_KINDS.get,
            placeholder=field_def.placeholder,
            key=key,
            on_change=_commit,
            args=(name, update),
        )
    elif field_def.widget == "textarea":
        st.text_area(field_def.label, placeholder=field_def.placeholder, key=key,
                     on_change=_commit, args=(name, update))
    else:
        st.text_input(field_def.label, placeholder=field_def.placeholder, key=key,
                      on_change=_commit, args=(name, update))


# ── Step renderers ──────────────────────────────────────────────────────
def render_loan_type(fields: LoanTypeFields, update: FieldUpdate):
    _field("loan_kind", fields["loan_kind"], update)
    _field("amount_desired", fields["amount_desired"], update)


def render_contact(fields: ContactFields, update: FieldUpdate):
    for name in ("first_name", "last_name", "email", "phone"):
        _field(name, fields[name], update)


def render_business(fields: BusinessFields, update: FieldUpdate):
    for name in ("business_name", "monthly_revenue", "industry"):
        _field(name, fields[name], update)


def render_loan_details(fields: LoanDetailsFields, update: FieldUpdate):
    _field("credit_score_range", fields["credit_score_range"], update)
    _field("use_of_funds", fields["use_of_funds"], update)


def render_review(fields: ReviewFields, set_consent):
    for label, value in review_lines(fields["form"]):
        st.markdown(f"**{label}:** {value}")
    st.divider()
    st.caption(consent_text(config.contact_email, config.contact_phone))
    st.checkbox(
        "I agree to the Privacy & Terms.",
        value=fields["consent"],
        key="consent",
        on_change=lambda: set_consent(st.session_state.consent),
    )


STEP_RENDERERS = {
    0: render_loan_type,
    1: render_contact,
    2: render_business,
    3: render_loan_details,
}


# ── Notices ─────────────────────────────────────────────────────────────
def open_mail_draft(uri: str):
    """Hand the draft to the browser's mail client."""
    components.html(f"<script>window.top.location.href = {json.dumps(uri)};</script>", height=0)


def show_notice(result: SubmissionResult | None):
    if result is None or result.outcome is SubmissionOutcome.BLOCKED:
        return
    if result.ok:
        st.success(result.message)
        if result.mail_uri:
            st.link_button("Open email draft", result.mail_uri)
    elif result.outcome is SubmissionOutcome.CONSENT_MISSING:
        st.warning(result.message)
    else:
        st.error(result.message)


# ── Header + progress ───────────────────────────────────────────────────
st.title("🏦 Commercial & Residential Loans")
st.caption("Submit your loan request quickly and securely.")

for col, marker in zip(st.columns(len(wizard.progress())), wizard.progress()):
    col.button(
        marker["label"],
        key=f"progress_{marker['index']}",
        type="primary" if marker["status"] == "current" else "secondary",
        use_container_width=True,
        on_click=wizard.jump_to,
        args=(marker["index"],),
    )

# ── Current step ────────────────────────────────────────────────────────
st.subheader(wizard.current_step.label)

if wizard.is_review:
    render_review(ReviewFields(form=wizard.state["form"], consent=wizard.state["consent"]),
                  wizard.set_consent)
else:
    STEP_RENDERERS[wizard.step](step_slice(wizard.state["form"], wizard.step), wizard.update_field)
    missing = missing_fields(wizard.state)
    if missing:
        labels = ", ".join(FIELD_DEFS[name].label for name in missing if name in FIELD_NAMES)
        st.caption(f"Required to continue: {labels}")

# ── Navigation ──────────────────────────────────────────────────────────
back_col, next_col = st.columns(2)
back_col.button("Back", key="nav_back", disabled=not wizard.can_go_back(), on_click=wizard.retreat)

if wizard.is_review:
    label = "Sending…" if wizard.state["submitting"] else "Send Application"
    if next_col.button(label, key="nav_submit", type="primary", disabled=not wizard.can_submit()):
        with st.spinner("Sending…"):
            st.session_state.notice = asyncio.run(
                submit_application(wizard, config, open_uri=open_mail_draft)
            )
else:
    next_col.button("Continue", key="nav_continue", type="primary",
                    disabled=not wizard.can_continue(), on_click=wizard.advance)

# One-shot: shown on this render, cleared for the next
show_notice(st.session_state.notice)
st.session_state.notice = None

# ── Contact ─────────────────────────────────────────────────────────────
st.divider()
st.markdown(f"Email: [{config.contact_email}]({mailto_uri(config.contact_email)})  \n"
            f"Phone: [{config.contact_phone}]({tel_uri(config.contact_phone)})")
email_col, call_col = st.columns(2)
email_col.link_button("Email Us", mailto_uri(config.contact_email), use_container_width=True)
call_col.link_button("Call Us", tel_uri(config.contact_phone), use_container_width=True)

with st.sidebar:
    if st.button("🔄 Start over"):
        for key in list(st.session_state.keys()):
            del st.session_state[key]
        st.rerun()
