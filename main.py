"""FastAPI entrypoint — exposes the intake wizard via REST."""

from typing import Dict

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from config import HOST, PORT, IntakeConfig, configure_logging, load_config
from intake.formatters import mailto_uri, tel_uri
from intake.rules import missing_fields
from intake.submission import SubmissionResult, submit_application
from intake.wizard import WizardController

configure_logging()

# ── App + sessions ──────────────────────────────────────────────────────
app = FastAPI(title="Loan Intake", version="1.0.0")

# In-memory: session_id → controller. Gone on restart; oldest evicted past MAX_SESSIONS.
MAX_SESSIONS = 1000
_sessions: Dict[str, WizardController] = {}


def get_config() -> IntakeConfig:
    return load_config()


# ── Request / Response models ───────────────────────────────────────────
class FieldsRequest(BaseModel):
    fields: Dict[str, str]


class JumpRequest(BaseModel):
    step: int


class ConsentRequest(BaseModel):
    agreed: bool


class SubmitResponse(BaseModel):
    session: dict
    result: SubmissionResult


# ── Endpoints ───────────────────────────────────────────────────────────

@app.post("/wizard/start")
def start_wizard(config: IntakeConfig = Depends(get_config)):
    """Create a fresh wizard session."""
    wizard = WizardController(gate_forward_jumps=config.gate_forward_jumps)
    _sessions[wizard.session_id] = wizard
    while len(_sessions) > MAX_SESSIONS:
        _sessions.pop(next(iter(_sessions)))
    return _view(wizard)


@app.get("/wizard/{session_id}")
def get_wizard(session_id: str):
    return _view(_get_wizard(session_id))


@app.patch("/wizard/{session_id}/fields")
def update_fields(session_id: str, req: FieldsRequest):
    """Format and store field values; returns the display values."""
    wizard = _get_wizard(session_id)
    try:
        wizard.update_fields(req.fields)
    except ValueError as e:
        raise HTTPException(422, str(e))
    return _view(wizard)


@app.post("/wizard/{session_id}/advance")
def advance(session_id: str):
    wizard = _get_wizard(session_id)
    moved = wizard.advance()
    return {**_view(wizard), "moved": moved}


@app.post("/wizard/{session_id}/retreat")
def retreat(session_id: str):
    wizard = _get_wizard(session_id)
    moved = wizard.retreat()
    return {**_view(wizard), "moved": moved}


@app.post("/wizard/{session_id}/jump")
def jump(session_id: str, req: JumpRequest):
    wizard = _get_wizard(session_id)
    moved = wizard.jump_to(req.step)
    return {**_view(wizard), "moved": moved}


@app.post("/wizard/{session_id}/consent")
def consent(session_id: str, req: ConsentRequest):
    wizard = _get_wizard(session_id)
    wizard.set_consent(req.agreed)
    return _view(wizard)


@app.post("/wizard/{session_id}/submit", response_model=SubmitResponse)
async def submit(session_id: str, config: IntakeConfig = Depends(get_config)):
    """Run the submission pipeline. The mail fallback returns its mailto: URI."""
    wizard = _get_wizard(session_id)
    result = await submit_application(wizard, config)
    return SubmitResponse(session=_view(wizard), result=result)


@app.delete("/wizard/{session_id}")
def discard(session_id: str):
    if _sessions.pop(session_id, None) is None:
        raise HTTPException(404, "Session not found.")
    return {"session_id": session_id, "discarded": True}


@app.get("/contact")
def contact(config: IntakeConfig = Depends(get_config)):
    """Quick-contact links."""
    return {
        "email": mailto_uri(config.contact_email),
        "phone": tel_uri(config.contact_phone),
    }


# ── Helpers ─────────────────────────────────────────────────────────────
def _get_wizard(session_id: str) -> WizardController:
    wizard = _sessions.get(session_id)
    if wizard is None:
        raise HTTPException(404, "Session not found.")
    return wizard


def _view(wizard: WizardController) -> dict:
    """Serializable snapshot of a session."""
    state = wizard.state
    return {
        "session_id": wizard.session_id,
        "step": state["step"],
        "step_label": wizard.current_step.label,
        "form": dict(state["form"]),
        "consent": state["consent"],
        "submitting": state["submitting"],
        "can_continue": wizard.can_continue(),
        "can_submit": wizard.can_submit(),
        "missing": missing_fields(state),
        "progress": wizard.progress(),
    }


# ── Run ─────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=HOST, port=PORT, reload=True)
