from __future__ import annotations

import sys
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

import pytest

from config import IntakeConfig
from intake.wizard import WizardController


@pytest.fixture
def config() -> IntakeConfig:
    return IntakeConfig(contact_email="intake@example.com", contact_phone="321-607-0070")


@pytest.fixture
def endpoint_config(config) -> IntakeConfig:
    return config.model_copy(update={"submission_endpoint": "https://sink.example.com/leads"})


def fill_through_loan_details(wizard: WizardController) -> None:
    """Populate every required field and walk to the Review step."""
    wizard.update_field("loan_kind", "working-capital")
    wizard.update_field("amount_desired", "50000")
    assert wizard.advance()
    wizard.update_field("first_name", "Ada")
    wizard.update_field("last_name", "Lovelace")
    wizard.update_field("email", "ada@example.com")
    wizard.update_field("phone", "3216070070")
    assert wizard.advance()
    wizard.update_field("business_name", "Analytical Engines LLC")
    wizard.update_field("monthly_revenue", "120000")
    assert wizard.advance()
    wizard.update_field("credit_score_range", "720")
    wizard.update_field("use_of_funds", "Equipment, payroll")
    assert wizard.advance()


@pytest.fixture
def review_wizard() -> WizardController:
    wizard = WizardController(session_id="test-session")
    fill_through_loan_details(wizard)
    return wizard


@pytest.fixture
def fill_steps():
    return fill_through_loan_details
