"""
Painting descriptions from Gemini with an ordered model fallback.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from google import genai
from google.genai import errors as genai_errors

from museum.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

GENERATE_CONTENT_ACTION = "generateContent"


class GeminiInvalidResponseException(Exception):
    pass


def make_description_prompt(painting_name: str, artist: str) -> str:
    return (
        f'Write 100-150 words about "{painting_name}" by {artist}. '
        "Include history, style, impact."
    )


@dataclass
class GeneratedDescription:
    description: str
    model: str


class DescriptionGenerator:
    """Asks each configured model in turn until one returns text."""

    def __init__(self, client: genai.Client, models: Sequence[str]):
        if not models:
            raise ValueError("At least one Gemini model must be configured")
        self.client = client
        self.models = list(models)

    async def _generate(self, model: str, prompt: str) -> str:
        response = await self.client.aio.models.generate_content(
            model=model,
            contents=prompt,
        )
        if not response.text:
            raise GeminiInvalidResponseException()
        return response.text

    async def generate_description(
        self, painting_name: Optional[str], artist: Optional[str]
    ) -> GeneratedDescription:
        if not painting_name or not artist:
            raise ValidationError("paintingName and artist are required")

        prompt = make_description_prompt(painting_name, artist)
        logger.info("Generating description for %s", painting_name)

        for model in self.models:
            start_time = time.time()
            try:
                logger.info("Trying %s", model)
                text = await self._generate(model, prompt)
            except Exception as e:
                logger.warning("%s failed: %s", model, str(e) or type(e).__name__)
                continue
            logger.info(
                "Description from %s took %.2fs", model, time.time() - start_time
            )
            return GeneratedDescription(description=text, model=model)

        raise UpstreamError("No available model succeeded")

    async def list_available_models(self) -> List[str]:
        """Names of the models that support text generation."""
        names: List[str] = []
        try:
            async for model in await self.client.aio.models.list():
                if GENERATE_CONTENT_ACTION in (model.supported_actions or []):
                    names.append(model.name)
        except genai_errors.APIError as e:
            raise UpstreamError(f"Listing models failed: {e}") from e
        logger.info("Available models: %s", names)
        return names
