"""
fitplan.cli — command line interface

Usage:
    fitplan wizard                 interactive three-step profile wizard + generation
    fitplan generate -p <profile>  generate a plan from a profile JSON file
    fitplan prompt -p <profile>    print the model prompt for a profile
    fitplan extract <raw_file>     extract a plan from a saved model response
    fitplan show                   print the saved plan
    fitplan export -o <dir>        write my-fitness-plan.pdf from the saved plan
    fitplan clear                  clear the saved plan
    fitplan image-url <label>      illustration URL for an exercise or meal
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

logger = logging.getLogger("fitplan")


def _setup_logging(verbose: bool) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(name)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.version_option(package_name="fitplan")
def main(verbose: bool) -> None:
    """fitplan — AI workout and diet plan generator"""
    _setup_logging(verbose)
    load_dotenv()


# ── wizard ────────────────────────────────────────────────────────

@main.command()
@click.option("--profile-out", type=click.Path(), default=None,
              help="Save the collected profile as JSON")
@click.option("--save/--no-save", default=True, show_default=True,
              help="Save the generated plan for later sessions")
def wizard(profile_out: str | None, save: bool) -> None:
    """Collect a profile step by step and generate a plan.

    A previously saved plan is shown instead; run `fitplan clear` to start over.
    """
    from fitplan.client import PlanRequestClient
    from fitplan.errors import ConfigurationError
    from fitplan.store import PlanStore
    from fitplan.wizard import FIELD_METADATA, STEP_COUNT, STEPS, ProfileForm, fields_for_step

    client = PlanRequestClient()
    try:
        client.check_configured()
    except ConfigurationError as e:
        click.echo(f"❌ {e}", err=True)
        raise SystemExit(1)

    form = ProfileForm(
        client=client,
        store=PlanStore(),
        notify=lambda message: click.echo(f"⚠️  {message}", err=True),
    )

    if form.view == "plan":
        click.echo("📂 Showing your saved plan (run `fitplan clear` to start over)")
        _print_plan(form.state.plan)
        return

    while True:
        step = STEPS[form.state.current_step - 1]
        click.echo(f"\n[{step['id']}/{STEP_COUNT}] {step['title']} — {step['heading']}")
        for key in fields_for_step(step["id"]):
            meta = FIELD_METADATA[key]
            current = getattr(form.state.profile, key)
            if "choices" in meta:
                value = click.prompt(
                    f"  {meta['label']}",
                    type=click.Choice(meta["choices"]),
                    default=current,
                )
            else:
                value = click.prompt(f"  {meta['label']}", default=current, show_default=bool(current))
            form.field_change(key, value)

        if form.state.current_step < STEP_COUNT:
            form.next()
            continue

        if profile_out:
            form.state.profile.save(profile_out)
            click.echo(f"💾 Profile saved: {profile_out}")

        click.echo("\n⏳ Generating your plan...")
        plan = asyncio.run(form.submit())
        if plan is not None:
            break
        if not click.confirm("Try again?", default=True):
            raise SystemExit(1)

    _print_plan(plan)
    if save and form.save_plan():
        click.echo(f"\n💾 Plan saved to this device: {form.store.path}")


# ── generate ──────────────────────────────────────────────────────

@main.command()
@click.option("--profile", "-p", "profile_path", type=click.Path(exists=True), required=True,
              help="Profile JSON file")
@click.option("--save", is_flag=True, default=False, help="Save the plan to the local slot")
@click.option("--pdf", "pdf_dir", type=click.Path(file_okay=False), default=None,
              help="Also export my-fitness-plan.pdf into this directory")
@click.option("--balanced", is_flag=True, default=False,
              help="Use the nesting-aware JSON scanner")
@click.option("--no-validate", is_flag=True, default=False,
              help="Skip plan structure validation")
def generate(
    profile_path: str,
    save: bool,
    pdf_dir: str | None,
    balanced: bool,
    no_validate: bool,
) -> None:
    """Generate a plan for a profile JSON file.

    \b
    Examples:
      fitplan generate -p profile.json --save
      fitplan generate -p profile.json --pdf output/
    """
    from fitplan.client import PlanRequestClient
    from fitplan.errors import ConfigurationError, FitplanError, UpstreamError
    from fitplan.extract import PlanExtractor
    from fitplan.generator import PlanGenerator
    from fitplan.output import write_plan_pdf
    from fitplan.store import PlanStore

    profile = _load_profile(profile_path)
    click.echo(f"📋 Profile: {profile.display_name} | Goal: {profile.goal}")

    generator = PlanGenerator(
        client=PlanRequestClient(),
        extractor=PlanExtractor(
            strategy="balanced" if balanced else "greedy",
            validate=not no_validate,
        ),
    )

    click.echo("⏳ Generating plan...")
    try:
        plan = asyncio.run(generator.generate(profile))
    except ConfigurationError as e:
        click.echo(f"❌ {e}", err=True)
        raise SystemExit(1)
    except UpstreamError as e:
        logger.debug("upstream detail: %s", e.detail)
        click.echo("❌ Failed to generate plan. Please try again.", err=True)
        raise SystemExit(1)
    except FitplanError as e:
        logger.debug("extraction detail: %s", e)
        click.echo("❌ Failed to generate plan. Please try again.", err=True)
        raise SystemExit(1)

    _print_plan(plan)

    if save:
        store = PlanStore()
        store.save(plan)
        click.echo(f"\n💾 Plan saved: {store.path}")

    if pdf_dir:
        path = write_plan_pdf(plan, profile, pdf_dir)
        click.echo(f"📄 PDF: {path}")


# ── prompt ────────────────────────────────────────────────────────

@main.command()
@click.option("--profile", "-p", "profile_path", type=click.Path(exists=True), default=None,
              help="Profile JSON file (defaults if omitted)")
def prompt(profile_path: str | None) -> None:
    """Print the model prompt for a profile."""
    from fitplan.generator import build_prompt

    profile = _load_profile(profile_path)
    click.echo(build_prompt(profile))


# ── extract ───────────────────────────────────────────────────────

@main.command()
@click.argument("raw_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--balanced", is_flag=True, default=False,
              help="Use the nesting-aware JSON scanner")
@click.option("--save", is_flag=True, default=False, help="Save the plan to the local slot")
def extract(raw_file: str, balanced: bool, save: bool) -> None:
    """Extract a plan from a saved raw model response."""
    from fitplan.errors import ExtractionError
    from fitplan.extract import extract_plan
    from fitplan.store import PlanStore

    try:
        raw_text = Path(raw_file).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        click.echo(f"❌ {raw_file} is not UTF-8 text: {e}", err=True)
        raise SystemExit(1)
    try:
        plan = extract_plan(raw_text, strategy="balanced" if balanced else "greedy")
    except ExtractionError as e:
        click.echo(f"❌ {type(e).__name__}: {e}", err=True)
        raise SystemExit(1)

    click.echo(plan.to_json())
    if save:
        PlanStore().save(plan)


# ── show ──────────────────────────────────────────────────────────

@main.command()
@click.option("--section", type=click.Choice(["workout", "diet"]), default=None,
              help="Print only this section's summary (the read-back text)")
def show(section: str | None) -> None:
    """Print the saved plan."""
    from fitplan.store import PlanStore

    plan = PlanStore().load()
    if plan is None:
        click.echo("❌ No saved plan. Run `fitplan wizard` or `fitplan generate` first.", err=True)
        raise SystemExit(1)

    if section:
        click.echo(plan.section_summary(section))
        return
    _print_plan(plan)


# ── export ────────────────────────────────────────────────────────

@main.command()
@click.option("--output", "-o", type=click.Path(file_okay=False), default=".",
              help="Output directory")
@click.option("--profile", "-p", "profile_path", type=click.Path(exists=True), default=None,
              help="Profile JSON file for the document header")
def export(output: str, profile_path: str | None) -> None:
    """Export the saved plan as my-fitness-plan.pdf."""
    from fitplan.output import write_plan_pdf
    from fitplan.store import PlanStore

    plan = PlanStore().load()
    if plan is None:
        click.echo("❌ No saved plan to export.", err=True)
        raise SystemExit(1)

    profile = _load_profile(profile_path)
    path = write_plan_pdf(plan, profile, output)
    click.echo(f"📄 PDF written: {path}")


# ── clear ─────────────────────────────────────────────────────────

@main.command()
def clear() -> None:
    """Clear the saved plan."""
    from fitplan.store import PlanStore

    PlanStore().clear()
    click.echo("🗑️  Saved plan cleared")


# ── image-url ─────────────────────────────────────────────────────

@main.command("image-url")
@click.argument("label")
def image_url_cmd(label: str) -> None:
    """Print the illustration URL for an exercise or meal option."""
    from fitplan.illustrate import image_url

    click.echo(image_url(label))


# ── helpers ───────────────────────────────────────────────────────

def _print_plan(plan) -> None:
    """Print a plan to the terminal."""
    click.echo(f"\n{'='*60}")
    click.echo("🏋️  Your Personalized Plan")
    click.echo(f"{'='*60}")
    if plan.motivation:
        click.echo(f"  {plan.motivation}")

    click.echo("\n💪 Workout Strategy")
    click.echo(f"  {plan.workout_plan.summary}")
    for day in plan.workout_plan.schedule:
        click.echo(f"\n  {day.day} — {day.focus}")
        for ex in day.exercises:
            click.echo(f"    • {ex.name}: {ex.sets} sets x {ex.reps} (rest {ex.rest})")

    click.echo("\n🥗 Nutrition Strategy")
    click.echo(f"  {plan.diet_plan.summary}")
    for meal in plan.diet_plan.meals:
        click.echo(f"\n  {meal.type}")
        for option in meal.options:
            click.echo(f"    • {option}")

    if plan.tips:
        click.echo("\n💡 Coach Tips")
        for i, tip in enumerate(plan.tips, 1):
            click.echo(f"  {i}. {tip}")


def _load_profile(profile_path: str | None):
    """Profile from a JSON file, or defaults; exits on an unreadable file."""
    from fitplan.schema import ProfileRecord

    if not profile_path:
        return ProfileRecord()
    try:
        return ProfileRecord.from_file(profile_path)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are ValueErrors
        click.echo(f"❌ Cannot read profile {profile_path}: {e}", err=True)
        raise SystemExit(1)
