"""App-wide configuration and environment settings."""

import logging
import os

import streamlit as st
from dotenv import load_dotenv
from pydantic import BaseModel
from streamlit.errors import StreamlitAPIException

load_dotenv()  # Load from .env file


def get_secret(key, default=None):
    """Try st.secrets first, then os.getenv."""
    try:
        # Accessing st.secrets raises if there is no secrets.toml on local
        if key in st.secrets:
            return st.secrets[key]
    except (FileNotFoundError, AttributeError, KeyError, StreamlitAPIException):
        pass
    return os.getenv(key, default)


def _flag(value) -> bool:
    return str(value).lower() in ("true", "1")


# Contacts
CONTACT_EMAIL = get_secret("CONTACT_EMAIL", "aioncapitalfl@gmail.com")
CONTACT_PHONE = get_secret("CONTACT_PHONE", "321-607-0070")

# Submission sink. Empty → fall back to a mailto: draft
SUBMIT_ENDPOINT = get_secret("SUBMIT_ENDPOINT", "")
MAIL_SUBJECT = get_secret("MAIL_SUBJECT", "New AION Capital Application")

# Wizard behaviour
GATE_FORWARD_JUMPS = _flag(get_secret("GATE_FORWARD_JUMPS", "false"))

# Logging
LOG_LEVEL = get_secret("LOG_LEVEL", "INFO").upper()

# LangSmith
LANGSMITH_TRACING = _flag(os.getenv("LANGSMITH_TRACING", "false"))
LANGSMITH_PROJECT = os.getenv("LANGSMITH_PROJECT", "loan-intake")

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))


class IntakeConfig(BaseModel):
    """Everything the wizard and the submission pipeline need from the outside."""

    contact_email: str
    contact_phone: str
    submission_endpoint: str = ""
    mail_subject: str = "New AION Capital Application"
    success_message: str = "Application sent! AION Capital will contact you shortly."
    failure_message: str = "Could not send the application. Please try again."
    consent_message: str = "Please agree to the Privacy & Terms before submitting."
    gate_forward_jumps: bool = False


def load_config() -> IntakeConfig:
    """Build the injected config from the environment / secrets."""
    return IntakeConfig(
        contact_email=CONTACT_EMAIL,
        contact_phone=CONTACT_PHONE,
        submission_endpoint=SUBMIT_ENDPOINT or "",
        mail_subject=MAIL_SUBJECT,
        gate_forward_jumps=GATE_FORWARD_JUMPS,
    )


def configure_logging(level: str | None = None) -> None:
    """Shared logging setup for the Streamlit app and the API."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
