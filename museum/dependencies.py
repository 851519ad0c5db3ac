"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from fastapi import Depends
from google import genai

from museum.config import get_settings
from museum.db import DbClient, InMemoryDbClient, SqlDbClient
from museum.errors import UpstreamError
from museum.gemini import DescriptionGenerator
from museum.paintings import PaintingService

_db_client: DbClient | None = None
_description_generator: DescriptionGenerator | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so records persist across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = SqlDbClient(settings.database_url)
    return _db_client


def get_painting_service(db: DbClient = Depends(get_db_client)) -> PaintingService:
    return PaintingService(db)


def get_description_generator() -> DescriptionGenerator:
    global _description_generator
    if _description_generator:
        return _description_generator

    settings = get_settings()
    if not settings.gemini_api_key:
        raise UpstreamError("GEMINI_API_KEY is not configured")
    _description_generator = DescriptionGenerator(
        genai.Client(api_key=settings.gemini_api_key),
        settings.gemini_models,
    )
    return _description_generator
