"""
Database abstraction for SQL databases and an in-memory test implementation.
"""

from __future__ import annotations

import threading
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Protocol

from sqlalchemy import Column, Float, Integer, String, Text, create_engine, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from museum.errors import ConflictError, StoreError
from museum.types import ScanType


def _new_id() -> str:
    return uuid.uuid4().hex


def _isoformat(timestamp: Optional[float]) -> Optional[str]:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()


@dataclass
class PaintingRecord:
    name: str
    artist: str
    description: str
    qr_code: Optional[str] = None
    image: Optional[str] = None
    image_type: Optional[str] = None
    scans: int = 0
    scanned_by: Optional[str] = None
    last_scanned_at: Optional[float] = None
    painting_id: str = field(default_factory=_new_id)
    created_at: float = field(default_factory=lambda: time.time())
    updated_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "_id": self.painting_id,
            "name": self.name,
            "artist": self.artist,
            "description": self.description,
            "qrCode": self.qr_code,
            "image": self.image,
            "imageType": self.image_type,
            "scans": self.scans,
            "scannedBy": self.scanned_by,
            "lastScannedAt": _isoformat(self.last_scanned_at),
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }


@dataclass
class ScanRecord:
    painting_id: str
    painting_name: str
    scan_type: ScanType
    viewing_time: float = 0
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    location: Optional[str] = None
    scan_id: str = field(default_factory=_new_id)
    timestamp: float = field(default_factory=lambda: time.time())


class DbClient(Protocol):
    """Interface for database access."""

    def create_painting(self, painting: PaintingRecord) -> PaintingRecord:
        ...

    def get_painting(self, painting_id: str) -> Optional[PaintingRecord]:
        ...

    def get_painting_by_name(self, name: str) -> Optional[PaintingRecord]:
        ...

    def search_painting(self, query: str) -> Optional[PaintingRecord]:
        ...

    def list_paintings(self) -> List[PaintingRecord]:
        ...

    def update_painting(
        self,
        painting_id: str,
        *,
        name: str,
        artist: str,
        description: str,
        qr_code: str,
        image: Optional[str] = None,
        image_type: Optional[str] = None,
    ) -> Optional[PaintingRecord]:
        ...

    def delete_painting(self, painting_id: str) -> bool:
        ...

    def increment_scans(self, painting_id: str) -> Optional[int]:
        ...

    def save_scan(self, scan: ScanRecord) -> ScanRecord:
        ...

    def list_scans(self) -> List[ScanRecord]:
        ...


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        self.paintings: Dict[str, PaintingRecord] = {}
        self.scans: List[ScanRecord] = []
        self._lock = threading.Lock()

    def _name_taken(self, name: str, exclude_id: Optional[str] = None) -> bool:
        return any(
            p.name == name and p.painting_id != exclude_id
            for p in self.paintings.values()
        )

    def create_painting(self, painting: PaintingRecord) -> PaintingRecord:
        with self._lock:
            if self._name_taken(painting.name):
                raise ConflictError(f"Painting '{painting.name}' already exists")
            self.paintings[painting.painting_id] = painting
            return replace(painting)

    def get_painting(self, painting_id: str) -> Optional[PaintingRecord]:
        with self._lock:
            painting = self.paintings.get(painting_id)
            return replace(painting) if painting else None

    def get_painting_by_name(self, name: str) -> Optional[PaintingRecord]:
        with self._lock:
            for painting in self.paintings.values():
                if painting.name == name:
                    return replace(painting)
        return None

    def search_painting(self, query: str) -> Optional[PaintingRecord]:
        needle = query.lower()
        for painting in self.list_paintings():
            if needle in painting.name.lower():
                return painting
        return None

    def list_paintings(self) -> List[PaintingRecord]:
        with self._lock:
            paintings = sorted(self.paintings.values(), key=lambda p: p.created_at)
            return [replace(p) for p in paintings]

    def update_painting(
        self,
        painting_id: str,
        *,
        name: str,
        artist: str,
        description: str,
        qr_code: str,
        image: Optional[str] = None,
        image_type: Optional[str] = None,
    ) -> Optional[PaintingRecord]:
        with self._lock:
            painting = self.paintings.get(painting_id)
            if not painting:
                return None
            if self._name_taken(name, exclude_id=painting_id):
                raise ConflictError(f"Painting '{name}' already exists")
            painting.name = name
            painting.artist = artist
            painting.description = description
            painting.qr_code = qr_code
            if image is not None:
                painting.image = image
            if image_type is not None:
                painting.image_type = image_type
            painting.updated_at = time.time()
            return replace(painting)

    def delete_painting(self, painting_id: str) -> bool:
        with self._lock:
            return self.paintings.pop(painting_id, None) is not None

    def increment_scans(self, painting_id: str) -> Optional[int]:
        with self._lock:
            painting = self.paintings.get(painting_id)
            if not painting:
                return None
            painting.scans += 1
            painting.last_scanned_at = time.time()
            return painting.scans

    def save_scan(self, scan: ScanRecord) -> ScanRecord:
        with self._lock:
            self.scans.append(scan)
        return scan

    def list_scans(self) -> List[ScanRecord]:
        with self._lock:
            return list(self.scans)


class SqlDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        try:
            with self.Session() as session:
                yield session
        except IntegrityError as exc:
            raise ConflictError("A painting with this name already exists") from exc
        except SQLAlchemyError as exc:
            raise StoreError(f"Database error: {exc}") from exc

    def _to_painting_record(self, row: "PaintingRow") -> PaintingRecord:
        return PaintingRecord(
            painting_id=row.id,
            name=row.name,
            artist=row.artist,
            description=row.description,
            qr_code=row.qr_code,
            image=row.image,
            image_type=row.image_type,
            scans=row.scans,
            scanned_by=row.scanned_by,
            last_scanned_at=row.last_scanned_at,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _to_scan_record(self, row: "ScanRow") -> ScanRecord:
        return ScanRecord(
            scan_id=row.id,
            painting_id=row.painting_id,
            painting_name=row.painting_name,
            scan_type=ScanType(row.scan_type),
            viewing_time=row.viewing_time,
            user_agent=row.user_agent,
            ip_address=row.ip_address,
            location=row.location,
            timestamp=row.timestamp,
        )

    def create_painting(self, painting: PaintingRecord) -> PaintingRecord:
        with self._session() as session:
            row = PaintingRow(
                id=painting.painting_id,
                name=painting.name,
                artist=painting.artist,
                description=painting.description,
                qr_code=painting.qr_code,
                image=painting.image,
                image_type=painting.image_type,
                scans=painting.scans,
                scanned_by=painting.scanned_by,
                last_scanned_at=painting.last_scanned_at,
                created_at=painting.created_at,
                updated_at=painting.updated_at,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_painting_record(row)

    def get_painting(self, painting_id: str) -> Optional[PaintingRecord]:
        with self._session() as session:
            row = session.get(PaintingRow, painting_id)
            if not row:
                return None
            return self._to_painting_record(row)

    def get_painting_by_name(self, name: str) -> Optional[PaintingRecord]:
        with self._session() as session:
            stmt = select(PaintingRow).where(PaintingRow.name == name)
            row = session.execute(stmt).scalar_one_or_none()
            return self._to_painting_record(row) if row else None

    def search_painting(self, query: str) -> Optional[PaintingRecord]:
        with self._session() as session:
            stmt = (
                select(PaintingRow)
                .where(func.lower(PaintingRow.name).contains(query.lower(), autoescape=True))
                .order_by(PaintingRow.created_at.asc())
                .limit(1)
            )
            row = session.execute(stmt).scalars().first()
            return self._to_painting_record(row) if row else None

    def list_paintings(self) -> List[PaintingRecord]:
        with self._session() as session:
            rows = session.execute(
                select(PaintingRow).order_by(PaintingRow.created_at.asc())
            ).scalars()
            return [self._to_painting_record(row) for row in rows]

    def update_painting(
        self,
        painting_id: str,
        *,
        name: str,
        artist: str,
        description: str,
        qr_code: str,
        image: Optional[str] = None,
        image_type: Optional[str] = None,
    ) -> Optional[PaintingRecord]:
        with self._session() as session:
            row = session.get(PaintingRow, painting_id)
            if not row:
                return None
            row.name = name
            row.artist = artist
            row.description = description
            row.qr_code = qr_code
            if image is not None:
                row.image = image
            if image_type is not None:
                row.image_type = image_type
            row.updated_at = time.time()
            session.commit()
            session.refresh(row)
            return self._to_painting_record(row)

    def delete_painting(self, painting_id: str) -> bool:
        with self._session() as session:
            row = session.get(PaintingRow, painting_id)
            if not row:
                return False
            session.delete(row)
            session.commit()
            return True

    def increment_scans(self, painting_id: str) -> Optional[int]:
        with self._session() as session:
            result = session.execute(
                update(PaintingRow)
                .where(PaintingRow.id == painting_id)
                .values(scans=PaintingRow.scans + 1, last_scanned_at=time.time())
            )
            if not result.rowcount:
                session.rollback()
                return None
            scans = session.execute(
                select(PaintingRow.scans).where(PaintingRow.id == painting_id)
            ).scalar_one()
            session.commit()
            return scans

    def save_scan(self, scan: ScanRecord) -> ScanRecord:
        with self._session() as session:
            session.add(
                ScanRow(
                    id=scan.scan_id,
                    painting_id=scan.painting_id,
                    painting_name=scan.painting_name,
                    scan_type=scan.scan_type.value,
                    viewing_time=scan.viewing_time,
                    user_agent=scan.user_agent,
                    ip_address=scan.ip_address,
                    location=scan.location,
                    timestamp=scan.timestamp,
                )
            )
            session.commit()
            return scan

    def list_scans(self) -> List[ScanRecord]:
        with self._session() as session:
            rows = session.execute(
                select(ScanRow).order_by(ScanRow.timestamp.asc())
            ).scalars()
            return [self._to_scan_record(row) for row in rows]


Base = declarative_base()


class PaintingRow(Base):
    __tablename__ = "paintings"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    artist = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    qr_code = Column(Text, nullable=True)
    image = Column(Text, nullable=True)
    image_type = Column(String, nullable=True)
    scans = Column(Integer, nullable=False, default=0)
    scanned_by = Column(String, nullable=True)
    last_scanned_at = Column(Float, nullable=True)
    created_at = Column(Float, nullable=False)
    updated_at = Column(Float, nullable=False)


class ScanRow(Base):
    __tablename__ = "scans"

    id = Column(String, primary_key=True)
    painting_id = Column(String, nullable=False, index=True)
    painting_name = Column(String, nullable=False)
    scan_type = Column(String, nullable=False)
    user_agent = Column(String, nullable=True)
    timestamp = Column(Float, nullable=False, index=True)
    viewing_time = Column(Float, nullable=False, default=0)
    ip_address = Column(String, nullable=True)
    location = Column(String, nullable=True)
