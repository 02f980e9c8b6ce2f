# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
from typing import Optional
from src.core.channel import CancelToken
from src.core.models import MediaIdentity, OmdbResult, NOT_AVAILABLE
from src.core.scores import clean_percentage
from src.infrastructure.http.fetcher import DocumentFetcher

logger = logging.getLogger(__name__)

RT_BASE_URL = "https://www.rottentomatoes.com"
TV_SCORE_SELECTOR = ".superPageFontColor.meter-align"
MOVIE_SCORE_SELECTOR = "span.mop-ratings-wrap__percentage.mop-ratings-wrap__percentage--audience"


def rt_slug(title: str) -> str:
    """
    Rotten Tomatoes path name: spaces become underscores, colons are dropped.
    """
    return title.replace(" ", "_").replace(":", "")


class RottenTomatoesClient:
    """
    Scrapes the Rotten Tomatoes audience score when OMDb has none.
    """

    def __init__(self, fetcher: DocumentFetcher):
        self.fetcher = fetcher

    def media_url(self, identity: MediaIdentity, omdb: OmdbResult) -> str:
        if omdb.tomato_url and omdb.tomato_url != NOT_AVAILABLE:
            return omdb.tomato_url
        if identity.is_tv:
            return f"{RT_BASE_URL}/tv/{rt_slug(identity.title)}/s{identity.season}"
        return f"{RT_BASE_URL}/m/{rt_slug(omdb.title)}"

    def fetch(self, identity: MediaIdentity, omdb: OmdbResult, token: Optional[CancelToken] = None) -> str:
        url = self.media_url(identity, omdb)
        doc = self.fetcher.fetch(url, RT_BASE_URL, token)

        selector = TV_SCORE_SELECTOR if identity.is_tv else MOVIE_SCORE_SELECTOR
        node = doc.select_one(selector)
        rating = clean_percentage(node.get_text() if node else "")
        if rating == NOT_AVAILABLE:
            logger.debug(f"No Rotten Tomatoes score on {url}")
        return rating
