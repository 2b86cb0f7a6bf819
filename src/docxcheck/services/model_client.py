"""Gemini client used by the analysis orchestrator."""

from __future__ import annotations

import asyncio
import base64
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from google import genai
from google.genai import types

from docxcheck.core.settings import Settings
from docxcheck.services.normalizer import ContentUnit

logger = logging.getLogger(__name__)


class ModelCallError(RuntimeError):
    """Raised when the generative model could not produce a reply."""


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call generation switches."""

    json_output: bool = True
    web_search: bool = False


class ModelClient(ABC):
    """Generates text from an ordered list of content units."""

    @abstractmethod
    async def generate(self, units: list[ContentUnit], options: GenerationOptions) -> str:
        """Return the model's raw text reply.

        Raises:
            ModelCallError: On transport failure, timeout or an empty reply.
        """


def _to_part(unit: ContentUnit) -> types.Part:
    if unit.kind == "blob":
        return types.Part(
            inline_data=types.Blob(
                mime_type=unit.mime_type,
                data=base64.b64decode(unit.data or ""),
            )
        )
    return types.Part(text=unit.text or "")


def _generation_config(options: GenerationOptions) -> types.GenerateContentConfig | None:
    # Gemini rejects JSON response mode when a tool is attached, so the
    # grounded call relies on the prompt for its JSON shape.
    if options.web_search:
        return types.GenerateContentConfig(
            tools=[types.Tool(google_search=types.GoogleSearch())]
        )
    if options.json_output:
        return types.GenerateContentConfig(response_mime_type="application/json")
    return None


def _response_text(response: Any) -> str:
    text = (getattr(response, "text", None) or "").strip()
    if text:
        return text

    for candidate in getattr(response, "candidates", None) or []:
        parts = getattr(getattr(candidate, "content", None), "parts", None) or []
        for part in parts:
            part_text = getattr(part, "text", None)
            if part_text:
                return part_text.strip()
    return ""


class GeminiModelClient(ModelClient):
    """Wraps the ``google-genai`` async client with a timeout and a uniform error type."""

    def __init__(self, api_key: str | None, model_name: str, timeout_seconds: float) -> None:
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self._client: genai.Client | None = None
        if api_key:
            self._client = genai.Client(api_key=api_key)
        else:
            logger.warning("GEMINI_API_KEY is not set; analysis requests will fail")

    async def generate(self, units: list[ContentUnit], options: GenerationOptions) -> str:
        if self._client is None:
            raise ModelCallError("GEMINI_API_KEY is not configured")

        contents = types.Content(role="user", parts=[_to_part(unit) for unit in units])
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self.model_name,
                    contents=contents,
                    config=_generation_config(options),
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as err:
            raise ModelCallError(
                f"{self.model_name} did not answer within {self.timeout_seconds}s"
            ) from err
        except Exception as err:
            raise ModelCallError(f"{self.model_name} call failed: {err}") from err

        text = _response_text(response)
        if not text:
            raise ModelCallError(f"{self.model_name} returned an empty response")
        return text


def build_model_client(settings: Settings) -> ModelClient:
    """Construct the Gemini client from configuration."""
    return GeminiModelClient(
        api_key=settings.gemini_api_key,
        model_name=settings.gemini_model,
        timeout_seconds=settings.model_timeout_seconds,
    )
