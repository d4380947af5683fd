"""
fitplan.schema — profile and plan data models

The profile collected by the wizard and the structured plan extracted from
the model's output. Plan objects use the camelCase wire names of the model's
JSON when serialized, so a saved plan and a model response share one format.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any


@dataclass
class ProfileRecord:
    """
    Wizard-collected user profile.

    Numeric fields stay strings exactly as typed; no range checks.
    """

    # ── Personal details ───────────────────────────────────────
    name: str = ""                         # may be empty
    age: str = ""
    gender: str = "Other"                  # Male / Female / Other
    height: str = ""                       # cm
    weight: str = ""                       # kg

    # ── Goals & fitness ────────────────────────────────────────
    goal: str = "Weight Loss"
    experience_level: str = "Beginner"
    location: str = "Gym"

    # ── Preferences ────────────────────────────────────────────
    dietary_preference: str = "Non-Veg"
    medical_notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert to a JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProfileRecord:
        """Build from a dict, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: str(v) for k, v in data.items() if k in valid_fields and v is not None}
        return cls(**filtered)

    @classmethod
    def from_file(cls, path: str | Path) -> ProfileRecord:
        """Load from a JSON file."""
        path = Path(path)
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"profile file must hold a JSON object: {path}")
        return cls.from_dict(data)

    def save(self, path: str | Path) -> None:
        """Save as a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")

    @property
    def display_name(self) -> str:
        return self.name.strip() or "User"


# ── Plan ─────────────────────────────────────────────────────────

def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _items(value: Any) -> list[Any]:
    return list(value) if isinstance(value, list) else []


def _mapping(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class Exercise:
    """One exercise line of a workout day."""
    name: str = ""
    sets: str = ""
    reps: str = ""
    rest: str = ""

    @property
    def label(self) -> str:
        """`name (setsXreps)` as printed in the document table."""
        return f"{self.name} ({self.sets}x{self.reps})"

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "sets": self.sets, "reps": self.reps, "rest": self.rest}

    @classmethod
    def from_dict(cls, data: Any) -> Exercise:
        data = _mapping(data)
        return cls(
            name=_text(data.get("name")),
            sets=_text(data.get("sets")),
            reps=_text(data.get("reps")),
            rest=_text(data.get("rest")),
        )


@dataclass(frozen=True)
class WorkoutDay:
    """One schedule entry."""
    day: str = ""
    focus: str = ""
    exercises: tuple[Exercise, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "focus": self.focus,
            "exercises": [e.to_dict() for e in self.exercises],
        }

    @classmethod
    def from_dict(cls, data: Any) -> WorkoutDay:
        data = _mapping(data)
        return cls(
            day=_text(data.get("day")),
            focus=_text(data.get("focus")),
            exercises=tuple(Exercise.from_dict(e) for e in _items(data.get("exercises"))),
        )


@dataclass(frozen=True)
class WorkoutPlan:
    summary: str = ""
    schedule: tuple[WorkoutDay, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"summary": self.summary, "schedule": [d.to_dict() for d in self.schedule]}

    @classmethod
    def from_dict(cls, data: Any) -> WorkoutPlan:
        data = _mapping(data)
        return cls(
            summary=_text(data.get("summary")),
            schedule=tuple(WorkoutDay.from_dict(d) for d in _items(data.get("schedule"))),
        )


@dataclass(frozen=True)
class Meal:
    type: str = ""
    options: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "options": list(self.options)}

    @classmethod
    def from_dict(cls, data: Any) -> Meal:
        data = _mapping(data)
        return cls(
            type=_text(data.get("type")),
            options=tuple(_text(o) for o in _items(data.get("options"))),
        )


@dataclass(frozen=True)
class DietPlan:
    summary: str = ""
    meals: tuple[Meal, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"summary": self.summary, "meals": [m.to_dict() for m in self.meals]}

    @classmethod
    def from_dict(cls, data: Any) -> DietPlan:
        data = _mapping(data)
        return cls(
            summary=_text(data.get("summary")),
            meals=tuple(Meal.from_dict(m) for m in _items(data.get("meals"))),
        )


@dataclass(frozen=True)
class Plan:
    """
    Generated workout + diet plan.

    Immutable once built. Missing substructures in the source data become
    empty values, so renderers can iterate without guarding.
    """
    workout_plan: WorkoutPlan = field(default_factory=WorkoutPlan)
    diet_plan: DietPlan = field(default_factory=DietPlan)
    tips: tuple[str, ...] = ()
    motivation: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire-format dict (camelCase keys)."""
        return {
            "workoutPlan": self.workout_plan.to_dict(),
            "dietPlan": self.diet_plan.to_dict(),
            "tips": list(self.tips),
            "motivation": self.motivation,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to a JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Plan:
        """Build from a wire-format dict."""
        data = _mapping(data)
        return cls(
            workout_plan=WorkoutPlan.from_dict(data.get("workoutPlan")),
            diet_plan=DietPlan.from_dict(data.get("dietPlan")),
            tips=tuple(_text(t) for t in _items(data.get("tips"))),
            motivation=_text(data.get("motivation")),
        )

    @classmethod
    def from_json(cls, json_str: str) -> Plan:
        """Build from a JSON string."""
        return cls.from_dict(json.loads(json_str))

    def section_summary(self, section: str) -> str:
        """Summary text of the `workout` or `diet` section."""
        if section == "workout":
            return self.workout_plan.summary
        if section == "diet":
            return self.diet_plan.summary
        raise ValueError(f"unknown section: {section}")


def create_sample_plan(days: int = 1, meals: int = 1) -> Plan:
    """Sample plan for demos and tests."""
    day_names = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
    meal_types = ["Breakfast", "Lunch", "Dinner", "Snack", "Pre-Workout", "Post-Workout"]
    schedule = tuple(
        WorkoutDay(
            day=day_names[i % len(day_names)] if days > 1 else "Day 1",
            focus="Full Body",
            exercises=(
                Exercise(name="Pushups", sets="3", reps="10", rest="60s"),
                Exercise(name="Squats", sets="3", reps="12", rest="60s"),
            ),
        )
        for i in range(days)
    )
    meal_list = tuple(
        Meal(type=meal_types[i % len(meal_types)], options=("Oats & Fruit", "Greek Yogurt"))
        for i in range(meals)
    )
    return Plan(
        workout_plan=WorkoutPlan(summary="Build a base with compound movements.", schedule=schedule),
        diet_plan=DietPlan(summary="Moderate calorie deficit with high protein.", meals=meal_list),
        tips=("Stay hydrated", "Sleep 8 hours"),
        motivation="You got this!",
    )
