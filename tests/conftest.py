"""
conftest.py — shared fixtures: fake model objects and sample model output
"""

from __future__ import annotations

import asyncio
import json

import pytest

from fitplan.client import PlanRequestClient

SAMPLE_PLAN_DATA = {
    "workoutPlan": {
        "summary": "Full body circuit to burn calories.",
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
        "summary": "Light calorie deficit.",
        "meals": [
            {"type": "Breakfast", "options": ["Oats & Fruit"]},
        ],
    },
    "tips": ["Stay hydrated"],
    "motivation": "Go!",
}

SAMPLE_RAW = (
    "Here is your plan: "
    + json.dumps(SAMPLE_PLAN_DATA)
    + " Hope this helps!"
)

# nesting far deeper than the JSON decoder can follow
DEEPLY_NESTED_RAW = 'Here: {"a": ' + "[" * 100000 + "]" * 100000 + "} done"


class FakeResponse:
    def __init__(self, text: str):
        self.text = text


class FakeModel:
    """Stands in for a GenerativeModel; records prompts."""

    def __init__(
        self,
        text: str = SAMPLE_RAW,
        error: Exception | None = None,
        gate: asyncio.Event | None = None,
    ):
        self.text = text
        self.error = error
        self.gate = gate
        self.calls: list[str] = []

    async def generate_content_async(self, prompt: str) -> FakeResponse:
        self.calls.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text)


def make_client(model: FakeModel, api_key: str = "test-key") -> PlanRequestClient:
    return PlanRequestClient(api_key=api_key, model_factory=lambda key, name: model)


@pytest.fixture
def plan_data() -> dict:
    return json.loads(json.dumps(SAMPLE_PLAN_DATA))


@pytest.fixture
def fake_model() -> FakeModel:
    return FakeModel()
