# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
from typing import Optional
from urllib.parse import quote, urljoin
from src.core.channel import CancelToken
from src.core.models import MediaIdentity, NOT_AVAILABLE
from src.core.scores import is_int, scale_user_score
from src.infrastructure.http.fetcher import DocumentFetcher

logger = logging.getLogger(__name__)

MC_BASE_URL = "https://www.metacritic.com"
MC_REFERER = "http://www.metacritic.com/advanced-search"
RESULT_LINK_SELECTOR = ".result a[href]"
METASCORE_SELECTOR = ".phead_summary .metascore_w"
USERSCORE_SELECTOR = ".metascore_w.user"


def year_range(year: int) -> str:
    # Searches [year, year + 1]
    return (
        f"/results?date_range_from=01-01-{year}&date_range_to=30-12-{year + 1}"
        "&search_type=advanced"
    )


def season_suffix(season: int) -> str:
    return f"/season-{season}"


class MetacriticClient:
    """
    Scrapes the Metacritic metascore, falling back to the user score scaled to 0-100.
    """

    def __init__(self, fetcher: DocumentFetcher):
        self.fetcher = fetcher

    def search_url(self, identity: MediaIdentity, omdb_title: str) -> str:
        if identity.is_tv:
            kind, title = "tv", identity.title
        else:
            kind, title = "movie", omdb_title
        return f"{MC_BASE_URL}/search/{kind}/{quote(title, safe='')}{year_range(identity.year)}"

    def fetch(self, identity: MediaIdentity, omdb_title: str, token: Optional[CancelToken] = None) -> str:
        search_url = self.search_url(identity, omdb_title)
        doc = self.fetcher.fetch(search_url, MC_REFERER, token)

        # Take the first result, no re-ranking
        link = doc.select_one(RESULT_LINK_SELECTOR)
        if link is None:
            logger.debug(f"Unable to find Metacritic media page, used search query: {search_url}")
            return NOT_AVAILABLE

        media_url = urljoin(MC_BASE_URL, link["href"])
        if identity.is_tv:
            media_url += season_suffix(identity.season)

        doc = self.fetcher.fetch(media_url, MC_REFERER, token)

        metascore = doc.select_one(METASCORE_SELECTOR)
        rating = metascore.get_text().strip() if metascore else ""
        if is_int(rating):
            return rating

        user_score = doc.select_one(USERSCORE_SELECTOR)
        user_rating = user_score.get_text().strip() if user_score else ""
        if user_rating:
            return scale_user_score(user_rating)

        logger.debug(f"Unable to find Metacritic score (metascore or userscore), used media page: {media_url}")
        return NOT_AVAILABLE
