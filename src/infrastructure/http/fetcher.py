# Copyright (c) 2025 Trae AI. All rights reserved.

import json
import threading
import requests
from typing import Callable, Dict, Optional
from bs4 import BeautifulSoup
from src.core.channel import CancelToken
from src.core.errors import FetchError

DEFAULT_HTTP_TIMEOUT = 6.0  # seconds, applied to connect and read
CHUNK_SIZE = 16 * 1024
USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/126.0.0.0 Safari/537.36"
)


class DocumentFetcher:
    """
    GETs HTML documents and JSON payloads with a fixed timeout.

    One requests.Session per thread. The body is streamed so the cancel
    token can be checked between chunks.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.timeout = timeout
        self.session_factory = session_factory
        self._local = threading.local()

    def _session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self.session_factory()
            session.headers.update({"User-Agent": USER_AGENT})
            self._local.session = session
        return session

    def close(self):
        """
        Closes the session of the calling thread, if it opened one.
        """
        session = getattr(self._local, "session", None)
        if session is not None:
            self._local.session = None
            session.close()

    def _get(
        self,
        url: str,
        token: Optional[CancelToken] = None,
        params: Optional[Dict] = None,
        headers: Optional[Dict] = None,
    ) -> bytes:
        if token is not None:
            token.raise_if_cancelled()

        try:
            response = self._session().get(
                url, params=params, headers=headers, timeout=self.timeout, stream=True
            )
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Request failed for URL {url}: {e}") from e

        try:
            if response.status_code != 200:
                raise FetchError(
                    f"HTTP error {response.status_code} for URL: {response.url}",
                    status_code=response.status_code,
                )
            chunks = []
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if token is not None:
                    token.raise_if_cancelled()
                chunks.append(chunk)
            return b"".join(chunks)
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Reading {url} failed: {e}") from e
        finally:
            response.close()

    def fetch(self, url: str, referer: str, token: Optional[CancelToken] = None) -> BeautifulSoup:
        """
        Returns the parsed HTML document at url. Non-200 responses raise FetchError.
        """
        body = self._get(url, token, headers={"Referer": referer})
        return BeautifulSoup(body, "html.parser")

    def fetch_json(self, url: str, params: Dict, token: Optional[CancelToken] = None) -> Dict:
        body = self._get(url, token, params=params)
        try:
            data = json.loads(body)
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {url}: {e}") from e
        if not isinstance(data, dict):
            raise FetchError(f"Unexpected JSON payload from {url}")
        return data
