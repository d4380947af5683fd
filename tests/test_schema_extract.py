"""
test_schema_extract.py — plan data model and extraction tests

Targets:
  - schema.ProfileRecord / Plan
  - extract.find_json_region / find_balanced_json_region
  - extract.validate_plan_data / extract_plan / PlanExtractor
"""

from __future__ import annotations

import json

import pytest

from fitplan.errors import (
    ExtractionError,
    MalformedContentError,
    NoStructuredContentError,
    PlanValidationError,
)
from fitplan.extract import (
    PlanExtractor,
    extract_plan,
    find_balanced_json_region,
    find_json_region,
    validate_plan_data,
)
from fitplan.schema import Exercise, Plan, ProfileRecord, create_sample_plan

from conftest import DEEPLY_NESTED_RAW, SAMPLE_PLAN_DATA, SAMPLE_RAW


# ── ProfileRecord ─────────────────────────────────────────────────

class TestProfileRecord:
    """ProfileRecord defaults and serialization."""

    def test_defaults(self):
        profile = ProfileRecord()
        assert profile.name == ""
        assert profile.gender == "Other"
        assert profile.goal == "Weight Loss"
        assert profile.experience_level == "Beginner"
        assert profile.location == "Gym"
        assert profile.dietary_preference == "Non-Veg"

    def test_display_name_defaults_to_user(self):
        assert ProfileRecord().display_name == "User"
        assert ProfileRecord(name="  ").display_name == "User"
        assert ProfileRecord(name="Ana").display_name == "Ana"

    def test_from_dict_ignores_unknown_keys_and_stringifies(self):
        profile = ProfileRecord.from_dict({"name": "Ana", "age": 30, "unknown": "x"})
        assert profile.name == "Ana"
        assert profile.age == "30"

    def test_save_and_load(self, tmp_path):
        profile = ProfileRecord(name="Ana", goal="Endurance")
        path = tmp_path / "nested" / "profile.json"
        profile.save(path)
        assert ProfileRecord.from_file(path) == profile


# ── Plan ──────────────────────────────────────────────────────────

class TestPlan:
    """Plan wire format and lenient construction."""

    def test_round_trip_wire_format(self, plan_data):
        assert Plan.from_dict(plan_data).to_dict() == plan_data

    def test_json_round_trip(self):
        plan = create_sample_plan(days=3, meals=2)
        assert Plan.from_json(plan.to_json()) == plan

    def test_missing_substructures_become_empty(self):
        plan = Plan.from_dict({"workoutPlan": {"schedule": [{"day": "Day 1"}]}})
        assert plan.workout_plan.schedule[0].exercises == ()
        assert plan.diet_plan.meals == ()
        assert plan.tips == ()
        assert plan.motivation == ""

    def test_numeric_fields_coerced_to_strings(self):
        ex = Exercise.from_dict({"name": "Squat", "sets": 3, "reps": 12, "rest": None})
        assert ex == Exercise(name="Squat", sets="3", reps="12", rest="")

    def test_exercise_label(self):
        assert Exercise(name="Pushups", sets="3", reps="10").label == "Pushups (3x10)"

    def test_plan_is_immutable(self):
        plan = create_sample_plan()
        with pytest.raises(AttributeError):
            plan.motivation = "changed"  # type: ignore[misc]

    def test_tips_order_preserved(self):
        plan = Plan.from_dict({"tips": ["c", "a", "b"]})
        assert plan.tips == ("c", "a", "b")

    def test_section_summary(self):
        plan = create_sample_plan()
        assert plan.section_summary("workout") == plan.workout_plan.summary
        assert plan.section_summary("diet") == plan.diet_plan.summary
        with pytest.raises(ValueError):
            plan.section_summary("tips")


# ── Region scanning ───────────────────────────────────────────────

class TestRegionScan:
    """Greedy and balanced JSON region scanners."""

    def test_greedy_first_to_last(self):
        assert find_json_region('pre {"a": {"b": 1}} post') == '{"a": {"b": 1}}'

    def test_greedy_no_braces(self):
        assert find_json_region("no json here") is None

    def test_greedy_close_before_open(self):
        assert find_json_region("} then {") is None

    def test_greedy_spans_stray_braces(self):
        # known limitation: stray braces in prose widen the region
        assert find_json_region('{"a": 1} and {oops}') == '{"a": 1} and {oops}'

    def test_balanced_stops_at_matching_brace(self):
        assert find_balanced_json_region('{"a": 1} and {oops}') == '{"a": 1}'

    def test_balanced_ignores_braces_in_strings(self):
        text = 'x {"a": "}{", "b": {"c": "\\"}"}} y'
        assert find_balanced_json_region(text) == '{"a": "}{", "b": {"c": "\\"}"}}'

    def test_balanced_unclosed(self):
        assert find_balanced_json_region('{"a": {"b": 1}') is None


# ── Validation ────────────────────────────────────────────────────

class TestValidatePlanData:
    """Plan invariant checks."""

    def test_valid(self, plan_data):
        assert validate_plan_data(plan_data) == []

    def test_empty_schedule(self, plan_data):
        plan_data["workoutPlan"]["schedule"] = []
        problems = validate_plan_data(plan_data)
        assert any("schedule" in p for p in problems)

    def test_empty_meals(self, plan_data):
        plan_data["dietPlan"]["meals"] = []
        assert any("meals" in p for p in validate_plan_data(plan_data))

    def test_exercise_missing_field(self, plan_data):
        del plan_data["workoutPlan"]["schedule"][0]["exercises"][0]["rest"]
        problems = validate_plan_data(plan_data)
        assert problems == ["schedule[0].exercises[0] missing rest"]

    def test_meal_missing_type(self, plan_data):
        del plan_data["dietPlan"]["meals"][0]["type"]
        assert validate_plan_data(plan_data) == ["meals[0] missing type"]

    def test_meal_options_not_list(self, plan_data):
        plan_data["dietPlan"]["meals"][0]["options"] = "Oats"
        assert validate_plan_data(plan_data) == ["meals[0].options must be a list"]

    def test_exercise_fields_may_be_empty(self, plan_data):
        plan_data["workoutPlan"]["schedule"][0]["exercises"][0]["rest"] = ""
        assert validate_plan_data(plan_data) == []

    def test_missing_sections(self):
        problems = validate_plan_data({"tips": "not a list"})
        assert "workoutPlan missing" in problems
        assert "dietPlan missing" in problems
        assert "tips must be a list" in problems


# ── extract_plan ──────────────────────────────────────────────────

class TestExtractPlan:
    """End-to-end extraction from raw model text."""

    def test_embedded_object_extracted_exactly(self):
        plan = extract_plan(SAMPLE_RAW)
        assert plan.to_dict() == SAMPLE_PLAN_DATA

    def test_result_satisfies_invariants(self):
        plan = extract_plan(SAMPLE_RAW)
        assert len(plan.workout_plan.schedule) > 0
        assert len(plan.diet_plan.meals) > 0

    def test_markdown_fenced_output(self):
        raw = "```json\n" + json.dumps(SAMPLE_PLAN_DATA, indent=2) + "\n```"
        assert extract_plan(raw).motivation == "Go!"

    def test_no_structured_content(self):
        with pytest.raises(NoStructuredContentError):
            extract_plan("Sorry, I cannot help with that.")

    def test_malformed_content(self):
        with pytest.raises(MalformedContentError) as exc_info:
            extract_plan("Here: {workoutPlan: nope} done")
        assert not isinstance(exc_info.value, PlanValidationError)

    def test_brace_region_not_json(self):
        with pytest.raises(MalformedContentError):
            extract_plan("{1} {2}")

    @pytest.mark.parametrize("strategy", ["greedy", "balanced"])
    def test_deeply_nested_is_malformed(self, strategy):
        with pytest.raises(MalformedContentError) as exc_info:
            extract_plan(DEEPLY_NESTED_RAW, strategy=strategy)
        assert isinstance(exc_info.value.__cause__, RecursionError)

    def test_both_failures_are_extraction_errors(self):
        for raw in ("nothing", "{bad}"):
            with pytest.raises(ExtractionError):
                extract_plan(raw)

    def test_stray_braces_break_greedy_but_not_balanced(self):
        raw = SAMPLE_RAW + " {see notes}"
        with pytest.raises(MalformedContentError):
            extract_plan(raw)
        assert extract_plan(raw, strategy="balanced").to_dict() == SAMPLE_PLAN_DATA

    def test_validation_failure(self, plan_data):
        plan_data["dietPlan"]["meals"] = []
        with pytest.raises(PlanValidationError):
            extract_plan(json.dumps(plan_data))

    def test_validation_can_be_skipped(self, plan_data):
        del plan_data["dietPlan"]
        plan = extract_plan(json.dumps(plan_data), validate=False)
        assert plan.diet_plan.meals == ()

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            extract_plan(SAMPLE_RAW, strategy="regex")

    def test_failure_is_logged(self, caplog):
        with caplog.at_level("WARNING", logger="fitplan.extract"):
            with pytest.raises(NoStructuredContentError):
                extract_plan("plain prose")
        assert "no JSON object" in caplog.text


class TestPlanExtractor:
    """PlanExtractor settings wrapper."""

    def test_defaults(self):
        extractor = PlanExtractor()
        assert extractor.strategy == "greedy"
        assert extractor.validate is True
        assert extractor.extract(SAMPLE_RAW).tips == ("Stay hydrated",)

    def test_invalid_strategy(self):
        with pytest.raises(ValueError):
            PlanExtractor(strategy="nope")
