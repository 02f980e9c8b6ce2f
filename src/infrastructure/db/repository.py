# Copyright (c) 2025 Trae AI. All rights reserved.

import sqlite3
import logging
from typing import Optional
from pydantic import ValidationError
from src.core.models import MediaType, RatingRecord
from .database import Database

logger = logging.getLogger(__name__)


class RatingRepository:
    """
    Category-scoped rating cache. Lookups by identity hash or by file name
    hash; both return None when the cache is unavailable.
    """

    def __init__(self, db: Database, media_type: MediaType):
        self.db = db
        self.media_type = media_type

    @property
    def available(self) -> bool:
        return self.db.available

    def save(self, record: RatingRecord) -> bool:
        """
        Inserts or replaces the record by primary key. Returns False if not persisted.
        """
        if not self.available:
            logger.debug(f"{self.media_type.value} cache unavailable, not saving {record.title}")
            return False

        try:
            with self.db.get_connection() as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO ratings
                    (primary_key, base_name_hash, title, year, episode_title, season, episode_nr,
                     imdb_rating, rt_rating, mc_rating, is_tv)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.primary_key,
                        record.base_name_hash,
                        record.title,
                        record.year,
                        record.episode_title,
                        record.season,
                        record.episode_nr,
                        record.imdb_rating,
                        record.rt_rating,
                        record.mc_rating,
                        int(record.is_tv),
                    ),
                )
        except sqlite3.Error as e:
            logger.warning(f"Unable to cache {record.title}: {e}")
            return False
        return True

    def get_by_primary_key(self, primary_key: bytes) -> Optional[RatingRecord]:
        return self._get_one("SELECT * FROM ratings WHERE primary_key = ?", primary_key)

    def get_by_base_name_hash(self, base_name_hash: bytes) -> Optional[RatingRecord]:
        return self._get_one(
            "SELECT * FROM ratings WHERE base_name_hash = ? ORDER BY rowid LIMIT 1",
            base_name_hash,
        )

    def _get_one(self, query: str, key: bytes) -> Optional[RatingRecord]:
        if not self.available:
            return None
        try:
            with self.db.get_connection() as conn:
                row = conn.execute(query, (key,)).fetchone()
            return self._to_record(row) if row else None
        except (sqlite3.Error, ValidationError) as e:
            logger.debug(f"{self.media_type.value} cache lookup failed: {e}")
            return None

    @staticmethod
    def _to_record(row: sqlite3.Row) -> RatingRecord:
        return RatingRecord(
            primary_key=bytes(row["primary_key"]),
            base_name_hash=bytes(row["base_name_hash"]),
            title=row["title"],
            year=row["year"] or "",
            episode_title=row["episode_title"] or "",
            season=row["season"] or "",
            episode_nr=row["episode_nr"] or "",
            imdb_rating=row["imdb_rating"],
            rt_rating=row["rt_rating"],
            mc_rating=row["mc_rating"],
            is_tv=bool(row["is_tv"]),
        )

    def close(self):
        self.db.close()
