import asyncio
import json
from urllib.parse import unquote

import httpx

from intake.submission import (
    LeadPayload,
    SubmissionOutcome,
    build_payload,
    mail_draft_uri,
    submit_application,
)

WIRE_KEYS = [
    "loanKind", "amountDesired", "firstName", "lastName", "email", "phone",
    "businessName", "monthlyRevenue", "industry", "creditScoreRange", "useOfFunds", "consent",
]


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _mail_body(uri: str) -> dict:
    return json.loads(unquote(uri.split("body=", 1)[1]))


def test_build_payload_strips_amount_formatting(review_wizard):
    review_wizard.set_consent(True)
    wire = build_payload(review_wizard.state).to_wire()
    assert list(wire) == WIRE_KEYS
    assert wire["amountDesired"] == "50000"
    assert wire["monthlyRevenue"] == "120000"
    assert wire["phone"] == "(321) 607 0070"
    assert wire["consent"] is True


def test_payload_accepts_wire_names():
    payload = LeadPayload.model_validate({key: "" for key in WIRE_KEYS[:-1]} | {"consent": False})
    assert payload.loan_kind == ""


def test_mail_draft_uri_carries_subject_and_pretty_json(review_wizard, config):
    review_wizard.set_consent(True)
    uri = mail_draft_uri(config, build_payload(review_wizard.state))
    assert uri.startswith("mailto:intake@example.com?subject=New%20AION%20Capital%20Application&body=")
    assert '\n  "loanKind": "working-capital"' in unquote(uri)


def test_scenario_b_consent_given_no_endpoint_opens_mail_draft(review_wizard, config):
    review_wizard.set_consent(True)
    opened = []

    result = asyncio.run(submit_application(review_wizard, config, open_uri=opened.append))

    assert result.outcome is SubmissionOutcome.DRAFTED
    assert result.ok
    assert result.message == config.success_message
    assert opened == [result.mail_uri]
    body = _mail_body(opened[0])
    assert body["amountDesired"] == "50000"
    assert body["consent"] is True
    assert review_wizard.state["submitting"] is False


def test_endpoint_receives_json_post(review_wizard, endpoint_config):
    review_wizard.set_consent(True)
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": "lead-1"})

    async def run():
        async with _client(handler) as client:
            return await submit_application(review_wizard, endpoint_config, client=client)

    result = asyncio.run(run())

    assert result.outcome is SubmissionOutcome.SENT
    assert result.mail_uri is None
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://sink.example.com/leads"
    assert request.headers["content-type"] == "application/json"
    assert json.loads(request.content)["amountDesired"] == "50000"


def test_scenario_c_network_failure_reports_and_releases(review_wizard, endpoint_config, caplog):
    review_wizard.set_consent(True)
    form_before = dict(review_wizard.state["form"])

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def run():
        async with _client(handler) as client:
            return await submit_application(review_wizard, endpoint_config, client=client)

    result = asyncio.run(run())

    assert result.outcome is SubmissionOutcome.FAILED
    assert not result.ok
    assert result.message == endpoint_config.failure_message
    assert "connection refused" in result.error
    assert review_wizard.state["submitting"] is False
    assert review_wizard.can_submit()
    assert dict(review_wizard.state["form"]) == form_before
    assert "Could not send application" in caplog.text


def test_error_status_counts_as_failure(review_wizard, endpoint_config):
    review_wizard.set_consent(True)

    async def run():
        async with _client(lambda request: httpx.Response(500)) as client:
            return await submit_application(review_wizard, endpoint_config, client=client)

    result = asyncio.run(run())
    assert result.outcome is SubmissionOutcome.FAILED
    assert review_wizard.state["submitting"] is False


def test_missing_consent_is_surfaced(review_wizard, config):
    opened = []
    result = asyncio.run(submit_application(review_wizard, config, open_uri=opened.append))
    assert result.outcome is SubmissionOutcome.CONSENT_MISSING
    assert result.message == config.consent_message
    assert opened == []


def test_submit_outside_review_is_blocked(config):
    from intake.wizard import WizardController

    wizard = WizardController()
    wizard.set_consent(True)
    result = asyncio.run(submit_application(wizard, config))
    assert result.outcome is SubmissionOutcome.BLOCKED
    assert result.message == ""


def test_second_submit_while_in_flight_is_blocked(review_wizard, endpoint_config):
    review_wizard.set_consent(True)

    async def run():
        second = []

        async def handler(request: httpx.Request) -> httpx.Response:
            second.append(await submit_application(review_wizard, endpoint_config))
            return httpx.Response(200)

        async with _client(handler) as client:
            first = await submit_application(review_wizard, endpoint_config, client=client)
        return first, second[0]

    first, second = asyncio.run(run())
    assert second.outcome is SubmissionOutcome.BLOCKED
    assert first.outcome is SubmissionOutcome.SENT
    assert review_wizard.state["submitting"] is False


def test_mail_draft_keeps_non_ascii_text_readable(review_wizard, config):
    review_wizard.update_field("first_name", "José")
    review_wizard.set_consent(True)
    uri = mail_draft_uri(config, build_payload(review_wizard.state))
    body = unquote(uri.split("body=", 1)[1])
    assert '"firstName": "José"' in body
    assert "\\u00e9" not in body
    assert "é" not in uri
