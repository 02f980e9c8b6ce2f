# Copyright (c) 2025 Trae AI. All rights reserved.

import os
from typing import Any
from guessit import guessit
from .errors import ParseError
from .models import MediaIdentity


class FilenameParser:
    """
    Extracts title, year, season and episode from a media file name using guessit.
    """

    def parse(self, base_name: str) -> MediaIdentity:
        partial = MediaIdentity(title=os.path.splitext(base_name)[0].strip("."))
        try:
            result = guessit(base_name)
        except Exception as e:
            raise ParseError(f"Not able to parse: {base_name}: {e}", partial=partial) from e

        # guessit leaves stray dots on some titles
        title = str(result.get("title") or "").strip(".").strip()
        if not title:
            raise ParseError(f"No title found in: {base_name}", partial=partial)

        return MediaIdentity(
            title=title,
            year=self._first_int(result.get("year")),
            season=self._first_int(result.get("season")),
            episode=self._first_int(result.get("episode")),
        )

    @staticmethod
    def _first_int(value: Any) -> int:
        # Multi-episode files come back as lists, use the first one
        if isinstance(value, list):
            value = value[0] if value else 0
        try:
            return int(value or 0)
        except (TypeError, ValueError):
            return 0
