# Copyright (c) 2025 Trae AI. All rights reserved.

import logging
from typing import Optional, Protocol
from .channel import BoundedQueue, CancelToken
from .errors import CancelledError
from .models import ResolvedRating, ScoreReport

logger = logging.getLogger(__name__)


class ReportRenderer(Protocol):
    def render(self, report: ScoreReport) -> None: ...


class Aggregator:
    """
    Single consumer of resolved ratings. Splits them into movie and TV rows,
    caches freshly resolved records and renders once the queue is closed.
    """

    def __init__(self, stores, renderer: Optional[ReportRenderer] = None):
        self.stores = stores
        self.renderer = renderer
        self.report = ScoreReport()
        self.completed = False
        self.failure: Optional[BaseException] = None

    def add(self, resolved: ResolvedRating):
        record = resolved.record
        if record.is_tv:
            self.report.tv.append(record)
        else:
            self.report.movies.append(record)

        if not resolved.cached:
            if self.stores.for_tv(record.is_tv).save(record):
                self.report.persisted += 1

    def run(self, output: BoundedQueue, token: Optional[CancelToken] = None):
        try:
            for resolved in output.drain(token):
                self.add(resolved)
            # The queue is also closed on cancellation
            if token is not None:
                token.raise_if_cancelled()
            if self.renderer is not None:
                self.renderer.render(self.report)
            self.completed = True
        except CancelledError:
            logger.debug("Aggregation cancelled, discarding tables")
        except Exception as e:
            logger.error(f"Aggregation failed: {e}")
            self.failure = e
            # Stops the workers feeding the output queue
            if token is not None:
                token.cancel()
