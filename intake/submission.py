"""Submission pipeline — payload assembly, HTTP sink, mailto fallback.

Exactly one attempt per call. The outcome comes back as a SubmissionResult;
showing it to the applicant is the caller's job.
"""

import json
import logging
from enum import Enum
from typing import Callable, Optional

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from config import IntakeConfig
from intake.formatters import digits_only, mailto_uri
from intake.state import WizardState
from intake.steps import REVIEW_STEP
from intake.wizard import WizardController
from langsmith_tracing import submission_trace

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class LeadPayload(BaseModel):
    """Wire shape of an application. Amounts are digit-only strings."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    loan_kind: str
    amount_desired: str
    first_name: str
    last_name: str
    email: str
    phone: str
    business_name: str
    monthly_revenue: str
    industry: str
    credit_score_range: str
    use_of_funds: str
    consent: bool

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class SubmissionOutcome(str, Enum):
    SENT = "sent"                       # POSTed to the endpoint
    DRAFTED = "drafted"                 # mailto: draft handed off
    CONSENT_MISSING = "consent_missing"
    FAILED = "failed"
    BLOCKED = "blocked"                 # not on Review, or already submitting


class SubmissionResult(BaseModel):
    outcome: SubmissionOutcome
    message: str = ""
    mail_uri: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (SubmissionOutcome.SENT, SubmissionOutcome.DRAFTED)


def build_payload(state: WizardState) -> LeadPayload:
    form = state["form"]
    return LeadPayload(
        **{
            **form,
            "amount_desired": digits_only(form["amount_desired"]),
            "monthly_revenue": digits_only(form["monthly_revenue"]),
        },
        consent=state["consent"],
    )


def mail_draft_uri(config: IntakeConfig, payload: LeadPayload) -> str:
    """mailto: draft to the contact address with the payload as pretty JSON."""
    body = json.dumps(payload.to_wire(), indent=2, ensure_ascii=False)
    return mailto_uri(config.contact_email, subject=config.mail_subject, body=body)


async def post_payload(endpoint: str, payload: LeadPayload,
                       client: httpx.AsyncClient | None = None) -> httpx.Response:
    """POST the payload as JSON. Non-2xx raises httpx.HTTPStatusError."""
    if client is None:
        # No timeout: the request resolves or fails on the network's terms.
        async with httpx.AsyncClient(timeout=None) as owned:
            response = await owned.post(endpoint, json=payload.to_wire(), headers=JSON_HEADERS)
    else:
        response = await client.post(endpoint, json=payload.to_wire(), headers=JSON_HEADERS)
    response.raise_for_status()
    return response


async def submit_application(
    wizard: WizardController,
    config: IntakeConfig,
    *,
    client: httpx.AsyncClient | None = None,
    open_uri: Callable[[str], None] | None = None,
) -> SubmissionResult:
    """
    Send the application once.

    With `config.submission_endpoint` set the payload is POSTed; otherwise a
    mailto: draft is built and passed to `open_uri`. The in-progress flag is
    always cleared on the way out.
    """
    state = wizard.state
    if state["submitting"] or state["step"] != REVIEW_STEP:
        return SubmissionResult(outcome=SubmissionOutcome.BLOCKED)
    if not state["consent"]:
        return SubmissionResult(outcome=SubmissionOutcome.CONSENT_MISSING,
                                message=config.consent_message)

    channel = "endpoint" if config.submission_endpoint else "email"
    state["submitting"] = True
    try:
        with submission_trace(wizard.session_id, channel):
            payload = build_payload(state)
            if config.submission_endpoint:
                await post_payload(config.submission_endpoint, payload, client)
                result = SubmissionResult(outcome=SubmissionOutcome.SENT,
                                          message=config.success_message)
            else:
                uri = mail_draft_uri(config, payload)
                if open_uri is not None:
                    open_uri(uri)
                result = SubmissionResult(outcome=SubmissionOutcome.DRAFTED,
                                          message=config.success_message, mail_uri=uri)
        logger.info("Application %s via %s (session %s)", result.outcome.value, channel, wizard.session_id)
        return result
    except Exception as e:
        logger.exception("Could not send application (session %s)", wizard.session_id)
        return SubmissionResult(outcome=SubmissionOutcome.FAILED,
                                message=config.failure_message, error=str(e))
    finally:
        state["submitting"] = False
