"""Deterministic step rules — pure predicates gating forward navigation."""

import re
from typing import Callable, Dict, List

from intake.state import FormData, WizardState

EMAIL_PATTERN = re.compile(r".+@.+\..+")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.search(value or ""))


def _loan_type(form: FormData, consent: bool) -> bool:
    return bool(form["loan_kind"])


def _contact(form: FormData, consent: bool) -> bool:
    return bool(form["first_name"]) and bool(form["last_name"]) and is_valid_email(form["email"])


def _business(form: FormData, consent: bool) -> bool:
    return bool(form["business_name"])


def _loan_details(form: FormData, consent: bool) -> bool:
    return bool(form["amount_desired"]) and bool(form["credit_score_range"])


def _review(form: FormData, consent: bool) -> bool:
    return consent


# Mapping: step index → rule
STEP_RULES: Dict[int, Callable[[FormData, bool], bool]] = {
    0: _loan_type,
    1: _contact,
    2: _business,
    3: _loan_details,
    4: _review,
}

# Required fields per step, for hints. Consent is reported as "consent".
REQUIRED_FIELDS: Dict[int, tuple[str, ...]] = {
    0: ("loan_kind",),
    1: ("first_name", "last_name", "email"),
    2: ("business_name",),
    3: ("amount_desired", "credit_score_range"),
    4: ("consent",),
}


def step_is_valid(state: WizardState, step: int | None = None) -> bool:
    """Evaluate the rule for `step` (default: the current step)."""
    if step is None:
        step = state["step"]
    return STEP_RULES[step](state["form"], state["consent"])


def missing_fields(state: WizardState, step: int | None = None) -> List[str]:
    """Return the required fields that still block `step`."""
    if step is None:
        step = state["step"]
    form = state["form"]
    missing = []
    for name in REQUIRED_FIELDS[step]:
        if name == "consent":
            if not state["consent"]:
                missing.append(name)
        elif name == "email":
            if not is_valid_email(form["email"]):
                missing.append(name)
        elif not form[name]:
            missing.append(name)
    return missing
