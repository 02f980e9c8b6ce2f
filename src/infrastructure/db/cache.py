# Copyright (c) 2025 Trae AI. All rights reserved.

import os
import sys
import shutil
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from src.core.models import MediaType
from .database import Database
from .repository import RatingRepository

logger = logging.getLogger(__name__)

CACHE_FOLDER = "MediaScore"
MOVIE_CACHE_NAME = "movie.db"
TV_CACHE_NAME = "tv.db"


def user_cache_dir() -> Path:
    """
    Platform user cache directory (XDG on Linux).
    """
    if sys.platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data)
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"

    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache and os.path.isabs(xdg_cache):
        return Path(xdg_cache)
    return Path.home() / ".cache"


def cache_root(base_dir: Optional[Path] = None) -> Path:
    return Path(base_dir or user_cache_dir()) / CACHE_FOLDER


@dataclass
class CacheStores:
    movie: RatingRepository
    tv: RatingRepository

    def for_tv(self, is_tv: bool) -> RatingRepository:
        return self.tv if is_tv else self.movie

    def close(self):
        self.tv.close()
        self.movie.close()


def open_cache(root: Path) -> CacheStores:
    """
    Opens the movie and TV stores under root. Stores that fail to open are
    returned in unavailable mode.
    """
    return CacheStores(
        movie=RatingRepository(Database(root / MOVIE_CACHE_NAME), MediaType.MOVIE),
        tv=RatingRepository(Database(root / TV_CACHE_NAME), MediaType.TV_SHOW),
    )


def clean_cache(root: Path) -> bool:
    """
    Deletes the whole cache directory. Must run before any store is opened.
    """
    if not root.exists():
        return True
    try:
        shutil.rmtree(root)
    except OSError as e:
        logger.warning(f"Unable to clean cache folder {root}: {e}")
        return False
    return True
