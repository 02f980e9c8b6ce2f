# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
from typing import Optional
from src.core.channel import CancelToken
from src.core.errors import ProviderError, ResolutionError
from src.core.hasher import cache_key, movie_key, tv_key
from src.core.models import MediaIdentity, OmdbResult, RatingRecord, ResolvedRating, NOT_AVAILABLE
from src.core.scores import zero_string
from src.infrastructure.db.cache import CacheStores
from src.infrastructure.providers.metacritic import MetacriticClient
from src.infrastructure.providers.omdb import OmdbClient
from src.infrastructure.providers.rottentomatoes import RottenTomatoesClient

logger = logging.getLogger(__name__)


class RatingService:
    """
    Resolves the ratings for one media file.

    Order of attempts, first hit wins:
      1. file name hash in the TV cache, then the movie cache
      2. OMDb by title, then by IMDb id (failure here drops the file)
      3. identity hash in the cache of the detected category
      4. Rotten Tomatoes (only when OMDb has no audience score) and Metacritic,
         each degrading to N/A on failure
    """

    def __init__(
        self,
        stores: CacheStores,
        omdb: OmdbClient,
        rotten_tomatoes: RottenTomatoesClient,
        metacritic: MetacriticClient,
    ):
        self.stores = stores
        self.omdb = omdb
        self.rotten_tomatoes = rotten_tomatoes
        self.metacritic = metacritic

    @staticmethod
    def primary_key(identity: MediaIdentity, year: str) -> bytes:
        if identity.is_tv:
            return tv_key(identity.title, year, zero_string(identity.season), zero_string(identity.episode))
        return movie_key(identity.title, year)

    def resolve(
        self, base_name: str, identity: MediaIdentity, token: Optional[CancelToken] = None
    ) -> ResolvedRating:
        # 1. File name cache: not yet known whether this is TV or a movie
        base_name_hash = cache_key(base_name)
        for store in (self.stores.tv, self.stores.movie):
            cached = store.get_by_base_name_hash(base_name_hash)
            if cached is not None:
                return ResolvedRating(record=cached, cached=True)
            logger.debug(
                f"{store.media_type.value} file {base_name} (decoded: {identity.title}/{identity.year}/"
                f"{identity.season}/{identity.episode}) not found in cache"
            )

        is_tv = identity.is_tv
        store = self.stores.for_tv(is_tv)

        # 2. OMDb
        try:
            omdb = self.omdb.fetch(identity, token)
        except ProviderError as e:
            raise ResolutionError(f"Could not find media {identity.title!r}: {e}") from e

        # 3. Identity cache, same media reached through a different file name
        primary_key = self.primary_key(identity, omdb.year)
        cached = store.get_by_primary_key(primary_key)
        if cached is not None:
            return ResolvedRating(record=cached, cached=True)
        logger.debug(f"{store.media_type.value} {identity.title}/{omdb.year} not found in cache")

        # 4. Gap-fill
        rt_rating = omdb.tomato_rating
        if rt_rating == NOT_AVAILABLE:
            rt_rating = self._rotten_tomatoes_rating(identity, omdb, token)
        mc_rating = self._metacritic_rating(identity, omdb, token)

        # 5. Assembly
        record = RatingRecord(
            primary_key=primary_key,
            base_name_hash=base_name_hash,
            title=identity.title,
            year=omdb.year,
            episode_title=omdb.title if is_tv else "",
            season=zero_string(identity.season) if is_tv else "",
            episode_nr=zero_string(identity.episode) if is_tv else "",
            imdb_rating=omdb.imdb_rating,
            rt_rating=rt_rating,
            mc_rating=mc_rating,
            is_tv=is_tv,
        )
        return ResolvedRating(record=record, cached=False)

    def _rotten_tomatoes_rating(
        self, identity: MediaIdentity, omdb: OmdbResult, token: Optional[CancelToken]
    ) -> str:
        try:
            return self.rotten_tomatoes.fetch(identity, omdb, token)
        except ProviderError as e:
            logger.debug(f"Could not get RottenTomatoes rating for media {identity.title!r}: {e}")
            return NOT_AVAILABLE

    def _metacritic_rating(
        self, identity: MediaIdentity, omdb: OmdbResult, token: Optional[CancelToken]
    ) -> str:
        try:
            return self.metacritic.fetch(identity, omdb.title, token)
        except ProviderError as e:
            logger.debug(f"Could not get Metacritic rating for media {identity.title!r}: {e}")
            return NOT_AVAILABLE
