# Copyright (c) 2025 Trae AI. All rights reserved.

from typing import Optional


class MediaScoreError(Exception):
    """
    Base class for all errors raised by MediaScore.
    """


class ConfigError(MediaScoreError):
    pass


class ScanError(MediaScoreError):
    pass


class ParseError(MediaScoreError):
    """
    Raised when a file name cannot be turned into a media identity.
    `partial` holds a best-effort identity the caller may still use.
    """

    def __init__(self, message: str, partial=None):
        super().__init__(message)
        self.partial = partial


class ProviderError(MediaScoreError):
    pass


class FetchError(ProviderError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(ProviderError):
    pass


class ResolutionError(MediaScoreError):
    pass


class CancelledError(MediaScoreError):
    pass


class QueueClosed(MediaScoreError):
    pass
