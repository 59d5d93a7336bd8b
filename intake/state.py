"""FormData / WizardState schemas — single source of truth for the wizard."""

from typing import TypedDict


class FormData(TypedDict):
    """Field values exactly as the applicant sees them (display-formatted)."""

    loan_kind: str
    amount_desired: str         # "50,000"
    first_name: str
    last_name: str
    email: str
    phone: str                  # "(321) 607 0070"
    business_name: str
    monthly_revenue: str        # optional, "120,000"
    industry: str               # optional
    credit_score_range: str
    use_of_funds: str           # optional, multi-line


FIELD_NAMES: tuple[str, ...] = tuple(FormData.__annotations__)


class WizardState(TypedDict):
    """Mutable per-session wizard state."""

    step: int                   # 0–4
    consent: bool
    submitting: bool
    form: FormData


def initial_form() -> FormData:
    """Factory — every field empty."""
    return FormData(**{name: "" for name in FIELD_NAMES})


def initial_state() -> WizardState:
    """Factory — returns a clean starting state."""
    return WizardState(
        step=0,
        consent=False,
        submitting=False,
        form=initial_form(),
    )
