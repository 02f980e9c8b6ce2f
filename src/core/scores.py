# Copyright (c) 2025 Trae AI. All rights reserved.

import re
from .models import NOT_AVAILABLE

_INT_RE = re.compile(r"^[+-]?\d+$")


def is_int(value: str) -> bool:
    return bool(_INT_RE.match(value or ""))


def zero_string(value: int) -> str:
    """
    Integer as string, except zero which means "not applicable" and becomes "".
    """
    return "" if value == 0 else str(value)


def clean_percentage(text: str) -> str:
    """
    Reduces scraped text like "\\n  87%\\n  Audience Score" to "87", or N/A.
    """
    token = (text or "").strip().split(" ")[0]
    rating = token.strip("\n").strip("%")
    if not is_int(rating):
        return NOT_AVAILABLE
    return rating


def scale_user_score(text: str) -> str:
    """
    Converts a 0-10 user score to the 0-100 range used by critic scores.
    """
    try:
        return str(int(round(float(text.strip()) * 10, 3)))
    except (ValueError, OverflowError):
        return NOT_AVAILABLE
