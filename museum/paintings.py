"""
Painting catalogue operations and scan ingestion.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from museum.db import DbClient, PaintingRecord, ScanRecord
from museum.errors import ConflictError, NotFoundError, ValidationError
from museum.qr import make_qr_data_uri
from museum.types import ScanType

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> str:
    return value.strip() if value else ""


class PaintingService:
    """CRUD over paintings plus the two scan paths (counter and event log)."""

    def __init__(self, db: DbClient):
        self.db = db

    def add_painting(
        self,
        name: Optional[str],
        artist: Optional[str],
        description: Optional[str],
        image: Optional[str] = None,
        image_type: Optional[str] = None,
    ) -> PaintingRecord:
        name, artist = _clean(name), _clean(artist)
        if not name or not artist or not description:
            raise ValidationError("Name, artist, description required")

        if self.db.get_painting_by_name(name):
            raise ConflictError(f"Painting '{name}' already exists")

        painting = self.db.create_painting(
            PaintingRecord(
                name=name,
                artist=artist,
                description=description,
                qr_code=make_qr_data_uri(name),
                image=image or None,
                image_type=image_type or None,
            )
        )
        logger.info("Painting %s added as %s", painting.name, painting.painting_id)
        return painting

    def list_paintings(self) -> List[PaintingRecord]:
        paintings = self.db.list_paintings()
        logger.info("Found %d paintings", len(paintings))
        return paintings

    def search_painting_by_name(self, query: Optional[str]) -> PaintingRecord:
        query = _clean(query)
        if not query:
            raise ValidationError("Name parameter required")
        painting = self.db.search_painting(query)
        if not painting:
            raise NotFoundError("Painting not found")
        return painting

    def get_painting_by_id(self, painting_id: str) -> PaintingRecord:
        painting = self.db.get_painting(painting_id)
        if not painting:
            raise NotFoundError("Painting not found")
        return painting

    def edit_painting(
        self,
        painting_id: str,
        name: Optional[str],
        artist: Optional[str],
        description: Optional[str],
        image: Optional[str] = None,
        image_type: Optional[str] = None,
    ) -> PaintingRecord:
        name, artist = _clean(name), _clean(artist)
        if not name or not artist or not description:
            raise ValidationError("All fields required")

        # Empty strings leave the stored image untouched, like omitted fields.
        painting = self.db.update_painting(
            painting_id,
            name=name,
            artist=artist,
            description=description,
            qr_code=make_qr_data_uri(name),
            image=image or None,
            image_type=image_type or None,
        )
        if not painting:
            raise NotFoundError("Painting not found")
        logger.info("Painting %s updated", painting_id)
        return painting

    def delete_painting(self, painting_id: str) -> None:
        if not self.db.delete_painting(painting_id):
            raise NotFoundError("Painting not found")
        logger.info("Painting %s deleted", painting_id)

    def log_scan(self, painting_id: str) -> int:
        scans = self.db.increment_scans(painting_id)
        if scans is None:
            raise NotFoundError("Painting not found")
        logger.info("Scan logged for %s, total scans: %d", painting_id, scans)
        return scans

    def track_scan(
        self,
        painting_id: Optional[str],
        scan_type: Optional[str],
        viewing_time: Optional[float] = None,
        *,
        location: Optional[str] = None,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> ScanRecord:
        """Append a scan event.

        `painting_id` may carry either the painting identifier or its exact
        name; the stored event always references the identifier. The painting
        counter updated by `log_scan` is left alone.
        """
        painting_id = _clean(painting_id)
        if not painting_id or not scan_type:
            raise ValidationError("Missing required fields")

        try:
            kind = ScanType(scan_type)
        except ValueError:
            allowed = ", ".join(t.value for t in ScanType)
            raise ValidationError(f"scanType must be one of: {allowed}")

        if viewing_time is not None and viewing_time < 0:
            raise ValidationError("viewingTime must not be negative")

        painting = self.db.get_painting(painting_id) or self.db.get_painting_by_name(
            painting_id
        )
        if not painting:
            raise ValidationError(f"Unknown painting: {painting_id}")

        scan = self.db.save_scan(
            ScanRecord(
                painting_id=painting.painting_id,
                painting_name=painting.name,
                scan_type=kind,
                viewing_time=viewing_time or 0,
                user_agent=user_agent,
                ip_address=ip_address,
                location=location,
            )
        )
        logger.info("Tracked %s scan for %s", kind.value, painting.name)
        return scan
