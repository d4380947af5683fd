"""
fitplan.client — generative model request client

Sends one prompt to the Gemini text endpoint and returns the raw text.
No retries; the transport's default timeout applies.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable

from fitplan.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

API_KEY_ENV = "GEMINI_API_KEY"
MODEL_ENV = "GEMINI_MODEL"
DEFAULT_MODEL = "gemini-flash-latest"


def _gemini_model(api_key: str, model_name: str) -> Any:
    """Build a fresh GenerativeModel bound to ``api_key``."""
    import google.generativeai as genai

    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


class PlanRequestClient:
    """
    Single-shot client for the text-completion endpoint.

    Args:
        api_key: credential; read from ``GEMINI_API_KEY`` when omitted
        model_name: model id; ``GEMINI_MODEL`` or ``gemini-flash-latest``
        model_factory: ``(api_key, model_name) -> model`` with an async
            ``generate_content_async(prompt)``; swapped out in tests
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        model_factory: Callable[[str, str], Any] | None = None,
    ):
        self.api_key = api_key if api_key is not None else os.environ.get(API_KEY_ENV, "")
        self.model_name = model_name or os.environ.get(MODEL_ENV, DEFAULT_MODEL)
        self.model_factory = model_factory or _gemini_model

    def check_configured(self) -> None:
        """Raise ConfigurationError if no credential is available."""
        if not self.api_key:
            raise ConfigurationError(f"{API_KEY_ENV} is not defined")

    async def request(self, prompt: str) -> str:
        """
        Send ``prompt`` and return the model's raw text.

        Raises:
            ConfigurationError: no credential (checked before any call)
            UpstreamError: transport/provider failure or empty response
        """
        self.check_configured()

        try:
            model = self.model_factory(self.api_key, self.model_name)
            response = await model.generate_content_async(prompt)
            raw_text = response.text
        except Exception as e:
            logger.error("plan request to %s failed: %s", self.model_name, e)
            raise UpstreamError(str(e)) from e

        if not raw_text:
            logger.error("model %s returned an empty response", self.model_name)
            raise UpstreamError("empty response from model")
        return raw_text
