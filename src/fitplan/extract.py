"""
fitplan.extract — plan extraction from untrusted model text

The model answers in free-form prose around a JSON object. Extraction:
  1. locate the JSON region
  2. parse it
  3. check the plan invariants (optional)

Region scanning strategies:
  - greedy   — first ``{`` to last ``}``. Not nesting-aware: stray braces in
               the prose outside the object break it.
  - balanced — from the first ``{`` to its matching ``}``, skipping braces
               inside string literals.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fitplan.errors import MalformedContentError, NoStructuredContentError, PlanValidationError
from fitplan.schema import Plan

logger = logging.getLogger(__name__)

STRATEGIES = ("greedy", "balanced")

EXERCISE_FIELDS = ("name", "sets", "reps", "rest")


# ── Region scanning ──────────────────────────────────────────────

def find_json_region(raw_text: str) -> str | None:
    """First ``{`` through last ``}``, or None."""
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start == -1 or end < start:
        return None
    return raw_text[start:end + 1]


def find_balanced_json_region(raw_text: str) -> str | None:
    """First ``{`` through its matching ``}``, or None if it never closes."""
    start = raw_text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(raw_text)):
        ch = raw_text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return raw_text[start:i + 1]
    return None


# ── Validation ───────────────────────────────────────────────────

def validate_plan_data(data: dict[str, Any]) -> list[str]:
    """
    Check a parsed object against the plan invariants.

    Returns:
        list of problems (empty when valid)
    """
    problems: list[str] = []

    workout = data.get("workoutPlan")
    if not isinstance(workout, dict):
        problems.append("workoutPlan missing")
    else:
        schedule = workout.get("schedule")
        if not isinstance(schedule, list) or not schedule:
            problems.append("workoutPlan.schedule must be a non-empty list")
        else:
            for i, day in enumerate(schedule):
                if not isinstance(day, dict):
                    problems.append(f"schedule[{i}] is not an object")
                    continue
                exercises = day.get("exercises")
                if not isinstance(exercises, list):
                    problems.append(f"schedule[{i}].exercises must be a list")
                    continue
                for j, ex in enumerate(exercises):
                    if not isinstance(ex, dict):
                        problems.append(f"schedule[{i}].exercises[{j}] is not an object")
                        continue
                    missing = [k for k in EXERCISE_FIELDS if k not in ex]
                    if missing:
                        problems.append(
                            f"schedule[{i}].exercises[{j}] missing {', '.join(missing)}"
                        )

    diet = data.get("dietPlan")
    if not isinstance(diet, dict):
        problems.append("dietPlan missing")
    else:
        meals = diet.get("meals")
        if not isinstance(meals, list) or not meals:
            problems.append("dietPlan.meals must be a non-empty list")
        else:
            for i, meal in enumerate(meals):
                if not isinstance(meal, dict):
                    problems.append(f"meals[{i}] is not an object")
                elif "type" not in meal:
                    problems.append(f"meals[{i}] missing type")
                elif not isinstance(meal.get("options"), list):
                    problems.append(f"meals[{i}].options must be a list")

    if "tips" in data and not isinstance(data["tips"], list):
        problems.append("tips must be a list")

    return problems


# ── Extraction ───────────────────────────────────────────────────

def extract_plan(
    raw_text: str,
    strategy: str = "greedy",
    validate: bool = True,
) -> Plan:
    """
    Extract a Plan from raw model text.

    Args:
        raw_text: model output, possibly wrapped in prose
        strategy: "greedy" or "balanced" region scan
        validate: check plan invariants after parsing

    Raises:
        NoStructuredContentError: no bracketed region
        MalformedContentError: region is not a JSON object
        PlanValidationError: parsed object breaks plan invariants
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown strategy: {strategy} (expected one of {STRATEGIES})")

    if strategy == "balanced":
        region = find_balanced_json_region(raw_text)
    else:
        region = find_json_region(raw_text)

    if region is None:
        logger.warning("no JSON object in model output (%d chars)", len(raw_text))
        raise NoStructuredContentError("No valid JSON returned by model")

    try:
        data = json.loads(region)
    except (json.JSONDecodeError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow
        logger.warning("model output JSON parse failed: %s", e)
        raise MalformedContentError(f"Invalid JSON in model output: {e}") from e

    if validate:
        problems = validate_plan_data(data)
        if problems:
            logger.warning("plan validation failed: %s", "; ".join(problems))
            raise PlanValidationError("; ".join(problems))

    return Plan.from_dict(data)


class PlanExtractor:
    """Extraction settings bundled for the pipeline."""

    def __init__(self, strategy: str = "greedy", validate: bool = True):
        if strategy not in STRATEGIES:
            raise ValueError(f"unknown strategy: {strategy}")
        self.strategy = strategy
        self.validate = validate

    def extract(self, raw_text: str) -> Plan:
        return extract_plan(raw_text, strategy=self.strategy, validate=self.validate)
