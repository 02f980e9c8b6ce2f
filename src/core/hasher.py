# Copyright (c) 2025 Trae AI. All rights reserved.

import hashlib


def cache_key(*parts: str) -> bytes:
    """
    SHA-256 digest of the parts concatenated in order, without separator.
    Used for both the identity key and the file name index, so it must stay
    stable across runs.
    """
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part.encode("utf-8"))
    return digest.digest()


def movie_key(title: str, year: str) -> bytes:
    return cache_key(title, year)


def tv_key(title: str, year: str, season: str, episode: str) -> bytes:
    return cache_key(title, year, season, episode)
