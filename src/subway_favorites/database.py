"""SQLite persistence for favorite paths."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, Column, Integer, String, DateTime, Float, Text
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import DB_PATH
from .favorites import FavoritePath
from .routing import PathType, ResolvedPath
from .stations import Station

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class FavoritePathRecord(Base):
    """Favorite paths table."""
    __tablename__ = "favorite_paths"

    id = Column(Integer, primary_key=True, autoincrement=False)
    member_id = Column(String(100), nullable=False, index=True)  # JSON-encoded, keeps int/str ids apart
    source_id = Column(Integer, nullable=False)
    source_name = Column(String(100), nullable=False)
    target_id = Column(Integer, nullable=False)
    target_name = Column(String(100), nullable=False)
    path_type = Column(String(20), nullable=False)
    station_ids = Column(Text, nullable=False)  # JSON list
    distance = Column(Float, nullable=False)
    duration = Column(Float, nullable=False)
    transfer_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=_utcnow)


class Database:
    """Database manager for favorite paths."""

    def __init__(self, db_path: Optional[Path] = None):
        self.db_path = Path(db_path or DB_PATH)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(f"sqlite:///{self.db_path}")
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine)

    def add_favorite(self, favorite: FavoritePath):
        """Persist a registered favorite."""
        session = self.Session()
        try:
            session.add(FavoritePathRecord(
                id=favorite.id,
                member_id=json.dumps(favorite.member_id),
                source_id=favorite.source.id,
                source_name=favorite.source.name,
                target_id=favorite.target.id,
                target_name=favorite.target.name,
                path_type=favorite.path.path_type.value,
                station_ids=json.dumps(list(favorite.path.station_ids)),
                distance=favorite.path.distance,
                duration=favorite.path.duration,
                transfer_count=favorite.path.transfer_count,
                created_at=favorite.created_at or _utcnow(),
            ))
            session.commit()
        finally:
            session.close()

    def delete_favorite(self, favorite_id: int) -> bool:
        """Delete a favorite. Returns False if it was not stored."""
        session = self.Session()
        try:
            deleted = session.query(FavoritePathRecord).filter_by(id=favorite_id).delete()
            session.commit()
            return deleted > 0
        finally:
            session.close()

    def load_favorites(self) -> list[FavoritePath]:
        """All stored favorites in registration order."""
        session = self.Session()
        try:
            records = session.query(FavoritePathRecord).order_by(FavoritePathRecord.id).all()
            return [self._to_favorite(r) for r in records]
        finally:
            session.close()

    def close(self):
        self.engine.dispose()

    @staticmethod
    def _to_favorite(record: FavoritePathRecord) -> FavoritePath:
        created_at = record.created_at
        if created_at is not None and created_at.tzinfo is None:
            # SQLite drops the offset
            created_at = created_at.replace(tzinfo=timezone.utc)
        return FavoritePath(
            id=record.id,
            member_id=json.loads(record.member_id),
            source=Station(record.source_id, record.source_name),
            target=Station(record.target_id, record.target_name),
            path=ResolvedPath(
                station_ids=tuple(json.loads(record.station_ids)),
                distance=record.distance,
                duration=record.duration,
                transfer_count=record.transfer_count,
                path_type=PathType(record.path_type),
            ),
            created_at=created_at,
        )
