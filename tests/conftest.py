# Copyright (c) 2025 Trae AI. All rights reserved.

import pytest
from pathlib import Path
from unittest.mock import MagicMock
from bs4 import BeautifulSoup
from src.core.config import Config
from src.core.hasher import cache_key, movie_key, tv_key
from src.core.models import RatingRecord
from src.infrastructure.db.cache import cache_root, open_cache


@pytest.fixture
def cache_dir(tmp_path):
    return cache_root(tmp_path)


@pytest.fixture
def stores(cache_dir):
    stores = open_cache(cache_dir)
    yield stores
    stores.close()


@pytest.fixture
def movie_record():
    return RatingRecord(
        primary_key=movie_key("The Matrix", "1999"),
        base_name_hash=cache_key("The.Matrix.1999.1080p.mkv"),
        title="The Matrix",
        year="1999",
        imdb_rating="8.7",
        rt_rating="85",
        mc_rating="73",
    )


@pytest.fixture
def tv_record():
    return RatingRecord(
        primary_key=tv_key("Show Name", "2019", "2", "5"),
        base_name_hash=cache_key("Show.Name.S02E05.720p.mkv"),
        title="Show Name",
        year="2019",
        episode_title="The Fifth One",
        season="2",
        episode_nr="5",
        imdb_rating="8.1",
        rt_rating="N/A",
        mc_rating="N/A",
        is_tv=True,
    )


@pytest.fixture
def mock_config(tmp_path):
    return Config(
        omdb_api_key="fake_key",
        cache_dir=tmp_path,
        workers=2,
        queue_size=4,
    )


@pytest.fixture
def html_doc():
    def make(markup: str) -> BeautifulSoup:
        return BeautifulSoup(markup, "html.parser")

    return make


@pytest.fixture
def mock_fetcher():
    return MagicMock()


@pytest.fixture
def make_file():
    def make(path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        return path

    return make
