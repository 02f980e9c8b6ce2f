# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
from typing import Dict, Optional
from src.core.channel import CancelToken
from src.core.errors import NotFoundError, ProviderError
from src.core.models import MediaIdentity, OmdbResult, NOT_AVAILABLE
from src.core.scores import zero_string
from src.infrastructure.http.fetcher import DocumentFetcher
from .imdb import ImdbLookup

logger = logging.getLogger(__name__)

OMDB_URL = "https://www.omdbapi.com/"


class OmdbClient:
    """
    Queries OMDb for the canonical title, year, IMDb rating and Rotten Tomatoes data.

    A title lookup that misses is retried once by IMDb id, found through the
    companion ImdbLookup.
    """

    def __init__(self, api_key: str, fetcher: DocumentFetcher, lookup: ImdbLookup):
        self.api_key = api_key
        self.fetcher = fetcher
        self.lookup = lookup

    def _base_params(self, identity: MediaIdentity) -> Dict[str, str]:
        params = {"apikey": self.api_key, "r": "json", "tomatoes": "true"}
        if identity.is_tv:
            params["type"] = "episode"
            params["Season"] = zero_string(identity.season)
            params["Episode"] = zero_string(identity.episode)
        else:
            params["type"] = "movie"
        return params

    def _query(self, params: Dict[str, str], token: Optional[CancelToken]) -> OmdbResult:
        data = self.fetcher.fetch_json(OMDB_URL, params, token)
        if str(data.get("Response", "")).lower() != "true":
            raise NotFoundError(data.get("Error") or "Media not found in OMDb")

        return OmdbResult(
            title=data.get("Title") or "",
            year=data.get("Year") or "",
            imdb_rating=data.get("imdbRating") or NOT_AVAILABLE,
            tomato_rating=data.get("tomatoRating") or NOT_AVAILABLE,
            tomato_url=data.get("tomatoURL") or "",
        )

    def by_title(self, identity: MediaIdentity, token: Optional[CancelToken] = None) -> OmdbResult:
        params = self._base_params(identity)
        params["t"] = identity.title
        if identity.year:
            params["y"] = str(identity.year)
        return self._query(params, token)

    def by_imdb_id(
        self, imdb_id: str, identity: MediaIdentity, token: Optional[CancelToken] = None
    ) -> OmdbResult:
        params = self._base_params(identity)
        params["i"] = imdb_id
        return self._query(params, token)

    def fetch(self, identity: MediaIdentity, token: Optional[CancelToken] = None) -> OmdbResult:
        """
        Title lookup first, then IMDb id lookup. Raises ProviderError if both fail.
        """
        try:
            return self.by_title(identity, token)
        except ProviderError as e:
            logger.debug(f"Could not find media {identity.title!r} in OMDb, will retry with IMDB lookup: {e}")

        imdb_id = self.lookup.find_id(identity.title, identity.year, token)
        return self.by_imdb_id(imdb_id, identity, token)
