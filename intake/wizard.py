"""Wizard controller — the five-step state machine.

Loan Type → Contact → Business → Loan Details → Review & Send.
`advance` is gated by the current step's rule; `retreat` never is.
`jump_to` (progress markers) is ungated unless `gate_forward_jumps` is set.
"""

import logging
import uuid
from typing import Dict, List

from intake.formatters import format_field
from intake.rules import step_is_valid
from intake.state import FIELD_NAMES, WizardState, initial_state
from intake.steps import FIRST_STEP, REVIEW_STEP, STEPS, Step

logger = logging.getLogger(__name__)


class WizardController:
    def __init__(self, state: WizardState | None = None, *, session_id: str | None = None,
                 gate_forward_jumps: bool = False):
        self.state = state if state is not None else initial_state()
        self.session_id = session_id or uuid.uuid4().hex
        self.gate_forward_jumps = gate_forward_jumps

    # ── Reads ───────────────────────────────────────────────────────────
    @property
    def step(self) -> int:
        return self.state["step"]

    @property
    def current_step(self) -> Step:
        return STEPS[self.step]

    @property
    def is_review(self) -> bool:
        return self.step == REVIEW_STEP

    def can_continue(self) -> bool:
        """Continue affordance: the current step's rule holds."""
        return step_is_valid(self.state)

    def can_go_back(self) -> bool:
        return self.step > FIRST_STEP

    def can_submit(self) -> bool:
        """Send affordance: on Review, consent given, nothing in flight."""
        return self.is_review and self.state["consent"] and not self.state["submitting"]

    def progress(self) -> List[Dict[str, object]]:
        """One marker per step for the progress indicator."""
        markers = []
        for index, step in enumerate(STEPS):
            if index < self.step:
                status = "done"
            elif index == self.step:
                status = "current"
            else:
                status = "upcoming"
            markers.append({"index": index, "key": step.key, "label": step.label, "status": status})
        return markers

    # ── Edits ───────────────────────────────────────────────────────────
    def update_field(self, name: str, raw: str) -> str:
        """Format and store a field; returns the stored display value."""
        if name not in FIELD_NAMES:
            raise ValueError(f"Unknown field: {name}")
        value = format_field(name, raw or "")
        self.state["form"][name] = value
        return value

    def update_fields(self, values: Dict[str, str]) -> Dict[str, str]:
        """Format and store several fields; nothing is written if any name is unknown."""
        unknown = [name for name in values if name not in FIELD_NAMES]
        if unknown:
            raise ValueError(f"Unknown field: {', '.join(unknown)}")
        return {name: self.update_field(name, raw) for name, raw in values.items()}

    def set_consent(self, agreed: bool) -> None:
        self.state["consent"] = bool(agreed)

    # ── Transitions ─────────────────────────────────────────────────────
    def advance(self) -> bool:
        if self.step >= REVIEW_STEP or not self.can_continue():
            logger.debug("advance blocked at step %d", self.step)
            return False
        self.state["step"] += 1
        return True

    def retreat(self) -> bool:
        if not self.can_go_back():
            return False
        self.state["step"] -= 1
        return True

    def jump_to(self, index: int) -> bool:
        if not FIRST_STEP <= index <= REVIEW_STEP:
            logger.debug("jump to %r ignored, out of range", index)
            return False
        if self.gate_forward_jumps and index > self.step:
            for step in range(self.step, index):
                if not step_is_valid(self.state, step):
                    logger.debug("jump to %d blocked by step %d", index, step)
                    return False
        self.state["step"] = index
        return True

    def reset(self) -> None:
        self.state = initial_state()
