"""
fitplan.wizard — multi-step profile wizard

Session-scoped state machine that collects a profile over three steps
and drives plan generation:
  - next / back move between steps (no validation gate, every field has a default)
  - field_change updates one profile field
  - submit (last step only) runs prompt → request → extraction
  - a successful submit holds the plan ("plan ready" view)
  - regenerate drops the plan and returns to step 1, keeping the profile

At most one submission is in flight per form; a second submit while
generating is ignored, not queued.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from fitplan.client import PlanRequestClient
from fitplan.errors import ConfigurationError, FitplanError, UpstreamError
from fitplan.extract import PlanExtractor
from fitplan.generator import PlanGenerator
from fitplan.schema import Plan, ProfileRecord
from fitplan.store import PlanStore

logger = logging.getLogger(__name__)

# ── Steps and field metadata ─────────────────────────────────────

STEPS: list[dict[str, Any]] = [
    {"id": 1, "title": "Personal Details", "heading": "Tell us about yourself"},
    {"id": 2, "title": "Goals & Fitness", "heading": "Your Goals"},
    {"id": 3, "title": "Preferences", "heading": "Preferences"},
]

STEP_COUNT = len(STEPS)

FIELD_METADATA: dict[str, dict[str, Any]] = {
    # Personal Details
    "name": {"step": 1, "label": "Name", "example": "John Doe"},
    "age": {"step": 1, "label": "Age", "example": "25"},
    "gender": {
        "step": 1,
        "label": "Gender",
        "choices": ("Male", "Female", "Other"),
    },
    "height": {"step": 1, "label": "Height (cm)", "example": "175"},
    "weight": {"step": 1, "label": "Weight (kg)", "example": "70"},
    # Goals & Fitness
    "goal": {
        "step": 2,
        "label": "Fitness Goal",
        "choices": ("Weight Loss", "Muscle Gain", "Endurance", "Flexibility", "Maintenance"),
    },
    "experience_level": {
        "step": 2,
        "label": "Experience Level",
        "choices": ("Beginner", "Intermediate", "Advanced"),
    },
    "location": {
        "step": 2,
        "label": "Workout Location",
        "choices": ("Gym", "Home", "Outdoor"),
    },
    # Preferences
    "dietary_preference": {
        "step": 3,
        "label": "Dietary Preference",
        "choices": ("Non-Veg", "Veg", "Vegan", "Keto", "Paleo"),
    },
    "medical_notes": {
        "step": 3,
        "label": "Medical Conditions / Injuries (Optional)",
        "example": "None",
    },
}

GENERATION_FAILED_MESSAGE = "Failed to generate plan. Please try again."


def fields_for_step(step: int) -> list[str]:
    """Profile field names collected on ``step``, in display order."""
    return [k for k, meta in FIELD_METADATA.items() if meta["step"] == step]


def _log_notification(message: str) -> None:
    logger.warning("notification: %s", message)


# ── State ────────────────────────────────────────────────────────

@dataclass
class WizardState:
    """Current step, the profile being edited and the held plan."""
    current_step: int = 1
    profile: ProfileRecord = field(default_factory=ProfileRecord)
    plan: Plan | None = None
    generating: bool = False
    error: str | None = None


class ProfileForm:
    """
    Wizard session.

    Usage:
        form = ProfileForm(client=PlanRequestClient(), store=PlanStore())
        form.field_change("name", "Ana")
        form.next(); form.next()
        plan = await form.submit()
    """

    def __init__(
        self,
        client: PlanRequestClient,
        store: PlanStore | None = None,
        extractor: PlanExtractor | None = None,
        notify: Callable[[str], None] | None = None,
    ):
        self.generator = PlanGenerator(client=client, extractor=extractor)
        self.store = store
        self.notify = notify or _log_notification
        self.state = WizardState()
        self._submission = 0

        # a saved plan skips the wizard entirely
        if store is not None:
            saved = store.load()
            if saved is not None:
                logger.info("resuming with saved plan")
                self.state.plan = saved

    # ── views ────────────────────────────────────────────────

    @property
    def view(self) -> str:
        """``"plan"`` when a plan is held, else ``"form"``."""
        return "plan" if self.state.plan is not None else "form"

    @property
    def step_title(self) -> str:
        return STEPS[self.state.current_step - 1]["title"]

    @property
    def can_submit(self) -> bool:
        return (
            self.state.plan is None
            and self.state.current_step == STEP_COUNT
            and not self.state.generating
        )

    # ── transitions ──────────────────────────────────────────

    def next(self) -> int:
        self.state.current_step = min(self.state.current_step + 1, STEP_COUNT)
        return self.state.current_step

    def back(self) -> int:
        self.state.current_step = max(self.state.current_step - 1, 1)
        return self.state.current_step

    def field_change(self, key: str, value: Any) -> None:
        """
        Set one profile field. Never changes the step.

        Raises:
            KeyError: unknown field
            ValueError: value outside the field's choices
        """
        meta = FIELD_METADATA.get(key)
        if meta is None:
            raise KeyError(key)
        value = "" if value is None else str(value)
        choices = meta.get("choices")
        if choices and value not in choices:
            raise ValueError(f"{key} must be one of {', '.join(choices)}; got {value!r}")
        setattr(self.state.profile, key, value)

    async def submit(self) -> Plan | None:
        """
        Generate a plan from the current profile.

        Inert (returns None) unless on the last step with no request in
        flight. Failures are reported through ``notify`` and leave the form
        on the last step with the profile intact.
        """
        if not self.can_submit:
            logger.debug(
                "submit ignored (step=%d, generating=%s, plan=%s)",
                self.state.current_step, self.state.generating, self.state.plan is not None,
            )
            return None

        self._submission += 1
        token = self._submission
        self.state.generating = True
        self.state.error = None
        profile = replace(self.state.profile)

        try:
            plan = await self.generator.generate(profile)
        except FitplanError as e:
            if token != self._submission:
                logger.info("dropping failure of abandoned submission: %s", e)
                return None
            if isinstance(e, ConfigurationError):
                logger.error("plan service not configured: %s", e)
            elif isinstance(e, UpstreamError):
                logger.error("plan request failed: %s", e.detail)
            else:
                logger.error("plan extraction failed: %s", e)
            self.state.error = GENERATION_FAILED_MESSAGE
            self.notify(GENERATION_FAILED_MESSAGE)
            return None
        finally:
            if token == self._submission:
                self.state.generating = False

        if token != self._submission:
            logger.info("dropping plan of abandoned submission")
            return None

        self.state.plan = plan
        return plan

    def abandon(self) -> None:
        """Navigate away: the in-flight result, if any, is dropped on arrival."""
        if self.state.generating:
            logger.info("abandoning in-flight submission")
        self._submission += 1
        self.state.generating = False

    def regenerate(self) -> None:
        """Drop the held plan and restart at step 1 with the same profile."""
        self.state.plan = None
        self.state.error = None
        self.state.current_step = 1

    # ── persistence ──────────────────────────────────────────

    def save_plan(self) -> bool:
        """Snapshot the held plan into the store. False if nothing to save."""
        if self.store is None or self.state.plan is None:
            return False
        self.store.save(self.state.plan)
        return True

    def clear_saved(self) -> None:
        if self.store is not None:
            self.store.clear()
