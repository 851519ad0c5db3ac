"""
HTTP routes for the museum backend API.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query, Request

from museum.analytics import compute_stats
from museum.config import Settings, get_settings
from museum.db import DbClient
from museum.dependencies import (
    get_db_client,
    get_description_generator,
    get_painting_service,
)
from museum.gemini import DescriptionGenerator
from museum.paintings import PaintingService
from museum.schemas import (
    DescriptionRequest,
    DescriptionResponse,
    HealthResponse,
    MessageResponse,
    ModelListResponse,
    PaintingDetail,
    PaintingListResponse,
    PaintingMutationResponse,
    PaintingPayload,
    PaintingSummary,
    ScanCountResponse,
    StatsResponse,
    TrackScanRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/paintings/add", response_model=PaintingMutationResponse)
def add_painting(
    payload: PaintingPayload,
    service: PaintingService = Depends(get_painting_service),
):
    painting = service.add_painting(
        payload.name,
        payload.artist,
        payload.description,
        image=payload.image,
        image_type=payload.imageType,
    )
    return PaintingMutationResponse(
        painting=PaintingDetail(**painting.as_dict()),
        message="Painting added successfully",
    )


@router.get("/paintings/all", response_model=PaintingListResponse)
def list_paintings(service: PaintingService = Depends(get_painting_service)):
    paintings = [PaintingSummary(**p.as_dict()) for p in service.list_paintings()]
    return PaintingListResponse(data=paintings, count=len(paintings))


@router.get("/paintings/search", response_model=PaintingSummary)
def search_painting(
    name: str | None = Query(None),
    service: PaintingService = Depends(get_painting_service),
):
    painting = service.search_painting_by_name(name)
    return PaintingSummary(**painting.as_dict())


@router.get("/paintings/{painting_id}", response_model=PaintingSummary)
def get_painting(
    painting_id: str, service: PaintingService = Depends(get_painting_service)
):
    painting = service.get_painting_by_id(painting_id)
    return PaintingSummary(**painting.as_dict())


@router.put("/paintings/edit/{painting_id}", response_model=PaintingMutationResponse)
def edit_painting(
    painting_id: str,
    payload: PaintingPayload,
    service: PaintingService = Depends(get_painting_service),
):
    painting = service.edit_painting(
        painting_id,
        payload.name,
        payload.artist,
        payload.description,
        image=payload.image,
        image_type=payload.imageType,
    )
    return PaintingMutationResponse(
        painting=PaintingDetail(**painting.as_dict()),
        message="Painting updated successfully",
    )


@router.delete("/paintings/delete/{painting_id}", response_model=MessageResponse)
def delete_painting(
    painting_id: str, service: PaintingService = Depends(get_painting_service)
):
    service.delete_painting(painting_id)
    return MessageResponse(message="Painting deleted successfully")


@router.post("/paintings/{painting_id}/scan", response_model=ScanCountResponse)
def log_scan(
    painting_id: str, service: PaintingService = Depends(get_painting_service)
):
    return ScanCountResponse(scans=service.log_scan(painting_id))


@router.post("/analytics/track-scan", response_model=MessageResponse)
def track_scan(
    payload: TrackScanRequest,
    request: Request,
    service: PaintingService = Depends(get_painting_service),
):
    service.track_scan(
        payload.paintingId,
        payload.scanType,
        payload.viewingTime,
        location=payload.location,
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
    )
    return MessageResponse(message="Scan tracked successfully")


@router.get("/analytics/stats", response_model=StatsResponse)
def analytics_stats(
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
):
    paintings = db.list_paintings()
    scans = db.list_scans()
    logger.info("Found %d paintings and %d scans", len(paintings), len(scans))
    return compute_stats(
        paintings,
        scans,
        now=datetime.now(timezone.utc),
        tz=ZoneInfo(settings.analytics_timezone),
    )


@router.post("/gemini/generate-description", response_model=DescriptionResponse)
async def generate_description(
    payload: DescriptionRequest,
    generator: DescriptionGenerator = Depends(get_description_generator),
):
    result = await generator.generate_description(payload.paintingName, payload.artist)
    return DescriptionResponse(description=result.description, model=result.model)


@router.get("/gemini/list-models", response_model=ModelListResponse)
async def list_models(
    generator: DescriptionGenerator = Depends(get_description_generator),
):
    return ModelListResponse(models=await generator.list_available_models())


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="OK")
