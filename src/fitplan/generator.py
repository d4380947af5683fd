"""
fitplan.generator — plan generation pipeline

Builds the model prompt from a profile and runs the generation chain:
  1. build_prompt   — profile → prompt text (pure)
  2. client.request — prompt → raw model text (one attempt)
  3. extract_plan   — raw text → validated Plan
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from fitplan.client import PlanRequestClient
from fitplan.extract import PlanExtractor
from fitplan.schema import Plan, ProfileRecord

logger = logging.getLogger(__name__)

# ── Prompt template ──────────────────────────────────────────────

PREAMBLE = (
    "You are an expert fitness coach.\n"
    "Generate a **SINGLE DAY** sample workout and diet plan.\n"
    "This is a demo for a Free Tier usage. Keep it extremely brief."
)

# Profile fields as labelled in the prompt's user data block; fields not
# listed keep their attribute name.
PROMPT_FIELD_NAMES = {
    "experience_level": "level",
    "dietary_preference": "diet",
    "medical_notes": "medical",
}

# The extractor relies on the model copying these field names verbatim.
REQUIRED_OUTPUT_SCHEMA: dict[str, Any] = {
    "workoutPlan": {
        "summary": "1-sentence strategy",
        "schedule": [
            {
                "day": "Day 1",
                "focus": "Full Body",
                "exercises": [
                    {"name": "Pushups", "sets": "3", "reps": "10", "rest": "60s"},
                ],
            }
        ],
    },
    "dietPlan": {
        "summary": "1-sentence diet goal",
        "meals": [
            {"type": "Breakfast", "options": ["Oats & Fruit"]},
        ],
    },
    "tips": ["Stay hydrated"],
    "motivation": "You got this!",
}


def build_prompt(profile: ProfileRecord) -> str:
    """
    Serialize a profile into a single model prompt.

    Deterministic: identical profiles give identical prompts.

    Args:
        profile: the submitted profile

    Returns:
        prompt text with preamble, user data block and output schema example
    """
    user_data = json.dumps(
        {PROMPT_FIELD_NAMES.get(k, k): v for k, v in profile.to_dict().items()},
        ensure_ascii=False, indent=2,
    )
    schema = json.dumps(REQUIRED_OUTPUT_SCHEMA, ensure_ascii=False, indent=2)
    return (
        f"\n{PREAMBLE}\n\n"
        f"User data:\n{user_data}\n\n"
        f"Required JSON structure:\n{schema}\n"
    )


# ── Pipeline ─────────────────────────────────────────────────────

class PlanGenerator:
    """
    Prompt → request → extraction chain.

    Usage:
        generator = PlanGenerator(client=PlanRequestClient())
        plan = await generator.generate(profile)
    """

    def __init__(
        self,
        client: PlanRequestClient,
        extractor: PlanExtractor | None = None,
        prompt_builder: Callable[[ProfileRecord], str] = build_prompt,
    ):
        self.client = client
        self.extractor = extractor or PlanExtractor()
        self.prompt_builder = prompt_builder

    async def generate(self, profile: ProfileRecord) -> Plan:
        """
        Generate a plan for one profile.

        Raises:
            ConfigurationError, UpstreamError, ExtractionError
        """
        prompt = self.prompt_builder(profile)
        logger.debug("prompt built (%d chars)", len(prompt))
        raw_text = await self.client.request(prompt)
        logger.debug("model returned %d chars", len(raw_text))
        plan = self.extractor.extract(raw_text)
        logger.info(
            "plan generated: %d day(s), %d meal(s)",
            len(plan.workout_plan.schedule), len(plan.diet_plan.meals),
        )
        return plan
