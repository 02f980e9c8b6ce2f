# Copyright (c) 2025 Trae AI. All rights reserved.

import threading
from pathlib import Path
from src.core.hasher import cache_key, movie_key
from src.core.models import MediaType, RatingRecord
from src.infrastructure.db.cache import (
    CACHE_FOLDER,
    MOVIE_CACHE_NAME,
    TV_CACHE_NAME,
    cache_root,
    clean_cache,
    open_cache,
)
from src.infrastructure.db.database import Database
from src.infrastructure.db.repository import RatingRepository


def test_round_trip_by_primary_key_and_base_name(stores, movie_record):
    assert stores.movie.save(movie_record)

    assert stores.movie.get_by_primary_key(movie_record.primary_key) == movie_record
    assert stores.movie.get_by_base_name_hash(movie_record.base_name_hash) == movie_record


def test_tv_round_trip(stores, tv_record):
    assert stores.tv.save(tv_record)

    found = stores.tv.get_by_base_name_hash(tv_record.base_name_hash)
    assert found == tv_record
    assert found.is_tv
    assert found.season == "2"
    assert found.episode_nr == "5"


def test_categories_are_independent(stores, movie_record, tv_record):
    stores.movie.save(movie_record)
    stores.tv.save(tv_record)

    assert stores.tv.get_by_primary_key(movie_record.primary_key) is None
    assert stores.movie.get_by_base_name_hash(tv_record.base_name_hash) is None
    assert stores.for_tv(True) is stores.tv
    assert stores.for_tv(False) is stores.movie


def test_missing_keys_return_none(stores):
    assert stores.movie.get_by_primary_key(b"nope") is None
    assert stores.movie.get_by_base_name_hash(b"nope") is None


def test_save_replaces_by_primary_key(stores, movie_record):
    stores.movie.save(movie_record)
    renamed = movie_record.model_copy(update={"base_name_hash": cache_key("matrix.mkv")})
    stores.movie.save(renamed)

    assert stores.movie.get_by_primary_key(movie_record.primary_key) == renamed
    # The index follows the replaced row
    assert stores.movie.get_by_base_name_hash(movie_record.base_name_hash) is None
    assert stores.movie.get_by_base_name_hash(renamed.base_name_hash) == renamed


def test_secondary_index_returns_first_match(stores):
    shared = cache_key("shared.mkv")
    first = RatingRecord(primary_key=movie_key("A", "2000"), base_name_hash=shared, title="A", year="2000")
    second = RatingRecord(primary_key=movie_key("B", "2001"), base_name_hash=shared, title="B", year="2001")
    stores.movie.save(first)
    stores.movie.save(second)

    assert stores.movie.get_by_base_name_hash(shared) == first


def test_persisted_across_reopen(cache_dir, movie_record):
    stores = open_cache(cache_dir)
    stores.movie.save(movie_record)
    stores.close()

    assert (cache_dir / MOVIE_CACHE_NAME).exists()
    assert (cache_dir / TV_CACHE_NAME).exists()

    reopened = open_cache(cache_dir)
    try:
        assert reopened.movie.get_by_primary_key(movie_record.primary_key) == movie_record
    finally:
        reopened.close()


def test_unavailable_store_degrades(tmp_path, movie_record):
    # A file where the cache directory should be makes the open fail
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory")

    stores = open_cache(blocker)

    assert not stores.movie.available
    assert not stores.tv.available
    assert stores.movie.save(movie_record) is False
    assert stores.movie.get_by_primary_key(movie_record.primary_key) is None
    assert stores.tv.get_by_base_name_hash(movie_record.base_name_hash) is None
    stores.close()
    stores.close()


def test_operations_after_close_are_noops(cache_dir, movie_record):
    stores = open_cache(cache_dir)
    stores.close()

    assert stores.movie.save(movie_record) is False
    assert stores.movie.get_by_primary_key(movie_record.primary_key) is None


def test_memory_database(movie_record):
    repo = RatingRepository(Database(Path(":memory:")), MediaType.MOVIE)
    repo.save(movie_record)
    assert repo.get_by_primary_key(movie_record.primary_key) == movie_record
    repo.close()


def test_concurrent_reads_during_writes(stores, movie_record):
    errors = []

    def reader():
        try:
            for _ in range(50):
                stores.movie.get_by_base_name_hash(movie_record.base_name_hash)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    for i in range(20):
        stores.movie.save(movie_record.model_copy(update={"imdb_rating": str(i)}))
    for t in threads:
        t.join()

    assert errors == []
    assert stores.movie.get_by_primary_key(movie_record.primary_key).imdb_rating == "19"


def test_clean_cache_removes_folder(tmp_path, movie_record):
    root = cache_root(tmp_path)
    stores = open_cache(root)
    stores.movie.save(movie_record)
    stores.close()
    assert root.name == CACHE_FOLDER

    assert clean_cache(root)
    assert not root.exists()
    # Cleaning twice is fine
    assert clean_cache(root)


def test_malformed_row_is_a_miss(stores, tv_record):
    with stores.tv.db.get_connection() as conn:
        conn.execute(
            "INSERT INTO ratings (primary_key, base_name_hash, title, season, episode_nr, is_tv)"
            " VALUES (?, ?, ?, '', '', 1)",
            (tv_record.primary_key, tv_record.base_name_hash, tv_record.title),
        )

    assert stores.tv.get_by_primary_key(tv_record.primary_key) is None
    assert stores.tv.get_by_base_name_hash(tv_record.base_name_hash) is None
