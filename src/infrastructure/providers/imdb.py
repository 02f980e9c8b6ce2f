# Copyright (c) 2025 Trae AI. All rights reserved.

import re
import logging
from typing import Optional
from urllib.parse import quote
from src.core.channel import CancelToken
from src.core.errors import NotFoundError
from src.infrastructure.http.fetcher import DocumentFetcher

logger = logging.getLogger(__name__)

SUGGESTION_URL = "https://v2.sg.media-imdb.com/suggestion/{initial}/{query}.json"


class ImdbLookup:
    """
    Finds an IMDb identifier for a title/year through the IMDb suggestion service.
    """

    def __init__(self, fetcher: DocumentFetcher):
        self.fetcher = fetcher

    def suggestion_url(self, title: str) -> str:
        query = title.strip().lower()
        initial_match = re.search(r"[a-z0-9]", query)
        initial = initial_match.group(0) if initial_match else "x"
        return SUGGESTION_URL.format(initial=initial, query=quote(query, safe=""))

    def find_id(self, title: str, year: int = 0, token: Optional[CancelToken] = None) -> str:
        """
        Returns the first tt-identifier matching the year (any year when year is 0).
        """
        data = self.fetcher.fetch_json(self.suggestion_url(title), {}, token)
        for entry in data.get("d") or []:
            imdb_id = str(entry.get("id") or "")
            if not imdb_id.startswith("tt"):
                continue
            if year and entry.get("y") != year:
                continue
            logger.debug(f"IMDb lookup for {title!r} ({year}) -> {imdb_id}")
            return imdb_id

        raise NotFoundError(f"No IMDb match for {title!r} ({year})")
