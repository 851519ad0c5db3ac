"""
Pydantic schemas for the museum FastAPI backend.

Request fields are optional at this layer so that missing values are reported
by the services as 400s with a message rather than as 422s.
"""

from __future__ import annotations

from typing import Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class PaintingPayload(BaseModel):
    name: Optional[str] = None
    artist: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    imageType: Optional[str] = None


class PaintingSummary(BaseModel):
    """Fixed projection served to clients that cache the catalogue."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str
    artist: str
    description: str
    qrCode: Optional[str] = None
    image: Optional[str] = None
    imageType: Optional[str] = None
    scans: int = 0


class PaintingDetail(PaintingSummary):
    scannedBy: Optional[str] = None
    lastScannedAt: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class PaintingMutationResponse(BaseModel):
    success: Literal[True] = True
    painting: PaintingDetail
    message: str


class PaintingListResponse(BaseModel):
    data: list[PaintingSummary]
    count: int


class MessageResponse(BaseModel):
    success: Literal[True] = True
    message: str


class ScanCountResponse(BaseModel):
    success: Literal[True] = True
    scans: int


class TrackScanRequest(BaseModel):
    paintingId: Optional[str] = None
    scanType: Optional[str] = None
    viewingTime: Optional[float] = None
    location: Optional[str] = None


class PaintingStats(BaseModel):
    paintingId: str
    name: str
    artist: str
    totalScans: int
    qrScans: int
    imageScans: int
    visionScans: int
    avgViewingTime: int


class StatsResponse(BaseModel):
    stats: list[PaintingStats]
    trafficByHour: Dict[str, int]
    totalScans: int
    totalPaintings: int


class DescriptionRequest(BaseModel):
    paintingName: Optional[str] = None
    artist: Optional[str] = None


class DescriptionResponse(BaseModel):
    success: Literal[True] = True
    description: str
    model: str


class ModelListResponse(BaseModel):
    models: list[str]


class HealthResponse(BaseModel):
    status: str

