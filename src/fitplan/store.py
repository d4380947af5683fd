"""
fitplan.store — single-slot plan persistence

One fixed key in a local directory holds the last saved plan as JSON.
Last write wins; unreadable content loads as "no saved plan".
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from fitplan.errors import PersistenceReadError
from fitplan.schema import Plan

logger = logging.getLogger(__name__)

STORE_KEY = "ai-fitness-plan"
HOME_ENV = "FITPLAN_HOME"


def default_store_dir() -> Path:
    """``$FITPLAN_HOME`` or ``~/.fitplan``."""
    return Path(os.environ.get(HOME_ENV) or Path.home() / ".fitplan")


class PlanStore:
    """Durable key/value slot for one plan."""

    def __init__(self, directory: str | Path | None = None, key: str = STORE_KEY):
        self.directory = Path(directory) if directory is not None else default_store_dir()
        self.key = key

    @property
    def path(self) -> Path:
        return self.directory / f"{self.key}.json"

    def save(self, plan: Plan) -> None:
        """Serialize ``plan`` into the slot, replacing what was there."""
        self.directory.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".json.tmp")
        tmp_path.write_text(plan.to_json(), encoding="utf-8")
        tmp_path.replace(self.path)
        logger.info("plan saved: %s", self.path)

    def read(self) -> Plan:
        """
        Load the saved plan.

        Raises:
            PersistenceReadError: slot empty or content unreadable
        """
        if not self.path.exists():
            raise PersistenceReadError(f"no saved plan at {self.path}")
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            raise PersistenceReadError(f"saved plan unreadable: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceReadError("saved plan is not a JSON object")
        return Plan.from_dict(data)

    def load(self) -> Plan | None:
        """Load the saved plan, or None if absent or corrupt."""
        try:
            return self.read()
        except PersistenceReadError as e:
            logger.debug("Failed to load saved plan: %s", e)
            return None

    def clear(self) -> None:
        """Empty the slot."""
        if self.path.exists():
            self.path.unlink()
            logger.info("saved plan cleared: %s", self.path)
