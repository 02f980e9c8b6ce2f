# Copyright (c) 2025 Trae AI. All rights reserved.

import sqlite3
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

CACHE_PERM = 0o700


class Database:
    """
    One SQLite cache file. If the file cannot be opened the database stays
    unavailable and callers degrade to running without a cache.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.available = False
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()
        try:
            self._init_db()
            self.available = True
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Unable to open cache {db_path}, continuing without it: {e}")
            self.close()

    def _init_db(self):
        # Allow using :memory: for testing, which is not a path
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True, mode=CACHE_PERM)

        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row

        with self._conn:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS ratings (
                    primary_key BLOB PRIMARY KEY,
                    base_name_hash BLOB NOT NULL,
                    title TEXT NOT NULL,
                    year TEXT,
                    episode_title TEXT,
                    season TEXT,
                    episode_nr TEXT,
                    imdb_rating TEXT,
                    rt_rating TEXT,
                    mc_rating TEXT,
                    is_tv INTEGER NOT NULL DEFAULT 0,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
            # Secondary, non-unique index
            self._conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_ratings_base_name_hash ON ratings (base_name_hash)"
            )

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        """
        Yields the shared connection inside a transaction, one caller at a time.
        """
        with self._lock:
            if self._conn is None:
                raise sqlite3.ProgrammingError("Cache database is not open")
            with self._conn:
                yield self._conn

    def close(self):
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
            self.available = False
