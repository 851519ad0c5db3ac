"""
Usage statistics recomputed from painting and scan records.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Dict, Iterable, List, Sequence

from museum.db import PaintingRecord, ScanRecord
from museum.types import ScanType

HOURS_IN_WINDOW = 24
HOUR_LABEL_FORMAT = "%I %p"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def painting_stats(painting: PaintingRecord, scans: Sequence[ScanRecord]) -> dict:
    """Aggregate the scans that reference `painting` by identifier."""
    matched = [s for s in scans if s.painting_id == painting.painting_id]
    by_type = Counter(s.scan_type for s in matched)
    avg_viewing_time = (
        sum(s.viewing_time or 0 for s in matched) / len(matched) if matched else 0
    )
    return {
        "paintingId": painting.painting_id,
        "name": painting.name,
        "artist": painting.artist,
        "totalScans": len(matched),
        "qrScans": by_type[ScanType.QR],
        "imageScans": by_type[ScanType.IMAGE],
        "visionScans": by_type[ScanType.VISION],
        "avgViewingTime": _round_half_up(avg_viewing_time),
    }


def _hour_start_utc(local: datetime) -> datetime:
    return local.replace(minute=0, second=0, microsecond=0).astimezone(timezone.utc)


def traffic_by_hour(
    scans: Iterable[ScanRecord], now: datetime, tz: tzinfo
) -> Dict[str, int]:
    """Count scans per calendar hour over the 24 hours ending at `now`.

    Keys are hour labels such as "02 PM", inserted oldest first; a label seen
    twice keeps the later slot's count. Slots are matched on their UTC start,
    so the wall-clock hour repeated at a DST fall-back is two slots under one
    label and the result has 23 entries that day.
    """
    buckets = Counter(_hour_start_utc(datetime.fromtimestamp(s.timestamp, tz=tz)) for s in scans)
    now = now.astimezone(timezone.utc)

    histogram: Dict[str, int] = {}
    for offset in range(HOURS_IN_WINDOW - 1, -1, -1):
        slot = (now - timedelta(hours=offset)).astimezone(tz)
        histogram[slot.strftime(HOUR_LABEL_FORMAT)] = buckets.get(_hour_start_utc(slot), 0)
    return histogram


def compute_stats(
    paintings: Sequence[PaintingRecord],
    scans: Sequence[ScanRecord],
    now: datetime,
    tz: tzinfo,
) -> dict:
    stats: List[dict] = [painting_stats(p, scans) for p in paintings]
    return {
        "stats": stats,
        "trafficByHour": traffic_by_hour(scans, now, tz),
        "totalScans": len(scans),
        "totalPaintings": len(paintings),
    }
