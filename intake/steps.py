"""Step catalogue — names, labels and field definitions for the five steps.

Each step renderer only sees its own slice of the form (one TypedDict per
step) plus a callback for writing a field back.
"""

from typing import Callable, Dict, List, NamedTuple, Tuple, TypedDict

from intake.state import FormData


class Step(NamedTuple):
    key: str
    label: str


STEPS: Tuple[Step, ...] = (
    Step("type", "Loan Type"),
    Step("contact", "Contact"),
    Step("business", "Business"),
    Step("loan", "Loan Details"),
    Step("review", "Review & Send"),
)

FIRST_STEP = 0
REVIEW_STEP = len(STEPS) - 1

LOAN_KINDS: Dict[str, str] = {
    "line-of-credit": "Line of Credit",
    "working-capital": "Working Capital",
    "equipment": "Equipment Financing",
    "mortgage": "Mortgage",
}


class FieldDef(NamedTuple):
    label: str
    placeholder: str = ""
    widget: str = "text"        # text | select | textarea


FIELD_DEFS: Dict[str, FieldDef] = {
    "loan_kind": FieldDef("Loan Type", "Select loan type", "select"),
    "amount_desired": FieldDef("Amount Desired (USD)", "50,000"),
    "first_name": FieldDef("First Name"),
    "last_name": FieldDef("Last Name"),
    "email": FieldDef("Email"),
    "phone": FieldDef("Phone", "(321) 607 0070"),
    "business_name": FieldDef("Business Name"),
    "monthly_revenue": FieldDef("Monthly Revenue (USD)", "120,000"),
    "industry": FieldDef("Industry"),
    "credit_score_range": FieldDef("Approximate Credit Score", "Example: 720"),
    "use_of_funds": FieldDef("Use of Funds", "Equipment, payroll, etc.", "textarea"),
}

# Fields each step edits, in display order. Review edits none.
STEP_FIELDS: Dict[int, Tuple[str, ...]] = {
    0: ("loan_kind", "amount_desired"),
    1: ("first_name", "last_name", "email", "phone"),
    2: ("business_name", "monthly_revenue", "industry"),
    3: ("credit_score_range", "use_of_funds"),
    4: (),
}


# ── Per-step slices ─────────────────────────────────────────────────────
class LoanTypeFields(TypedDict):
    loan_kind: str
    amount_desired: str


class ContactFields(TypedDict):
    first_name: str
    last_name: str
    email: str
    phone: str


class BusinessFields(TypedDict):
    business_name: str
    monthly_revenue: str
    industry: str


class LoanDetailsFields(TypedDict):
    credit_score_range: str
    use_of_funds: str


class ReviewFields(TypedDict):
    form: FormData
    consent: bool


# (field name, raw value) → stored display value
FieldUpdate = Callable[[str, str], str]


def step_slice(form: FormData, step: int) -> dict:
    """Copy of just the fields a step edits."""
    return {name: form[name] for name in STEP_FIELDS[step]}


# ── Review ──────────────────────────────────────────────────────────────
REVIEW_LINES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("Loan Type", ("loan_kind",)),
    ("Amount", ("amount_desired",)),
    ("Name", ("first_name", "last_name")),
    ("Email", ("email",)),
    ("Phone", ("phone",)),
    ("Business", ("business_name",)),
    ("Revenue", ("monthly_revenue",)),
    ("Credit Score", ("credit_score_range",)),
    ("Use of Funds", ("use_of_funds",)),
)


def review_lines(form: FormData) -> List[Tuple[str, str]]:
    """(label, value) pairs for the Review step summary."""
    lines = []
    for label, names in REVIEW_LINES:
        lines.append((label, " ".join(form[n] for n in names).strip()))
    return lines


def consent_text(contact_email: str, contact_phone: str) -> str:
    return (
        "By submitting, you agree that AION Capital may contact you about your request "
        "and share your application with potential lenders for the purpose of financing "
        "review. Your data will be handled in accordance with our privacy practices. "
        f"For questions, email {contact_email} or call {contact_phone}."
    )
