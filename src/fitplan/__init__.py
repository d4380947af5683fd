"""
fitplan — AI workout and diet plan generator.

Profile wizard → model prompt → plan extraction → saved plan / PDF export.
"""

__version__ = "0.1.0"

from fitplan.schema import ProfileRecord, Plan, WorkoutPlan, WorkoutDay, Exercise, DietPlan, Meal
from fitplan.errors import (
    FitplanError,
    ConfigurationError,
    UpstreamError,
    ExtractionError,
    NoStructuredContentError,
    MalformedContentError,
    PlanValidationError,
    PersistenceReadError,
)
from fitplan.generator import build_prompt, PlanGenerator
from fitplan.client import PlanRequestClient
from fitplan.extract import extract_plan, PlanExtractor
from fitplan.store import PlanStore
from fitplan.wizard import ProfileForm, WizardState
from fitplan.output import DocumentExporter, DocumentArtifact, export_plan, write_plan_pdf
from fitplan.illustrate import image_url

__all__ = [
    # schema
    "ProfileRecord",
    "Plan",
    "WorkoutPlan",
    "WorkoutDay",
    "Exercise",
    "DietPlan",
    "Meal",
    # errors
    "FitplanError",
    "ConfigurationError",
    "UpstreamError",
    "ExtractionError",
    "NoStructuredContentError",
    "MalformedContentError",
    "PlanValidationError",
    "PersistenceReadError",
    # generator
    "build_prompt",
    "PlanGenerator",
    # client
    "PlanRequestClient",
    # extract
    "extract_plan",
    "PlanExtractor",
    # store
    "PlanStore",
    # wizard
    "ProfileForm",
    "WizardState",
    # output
    "DocumentExporter",
    "DocumentArtifact",
    "export_plan",
    "write_plan_pdf",
    # illustrate
    "image_url",
]
