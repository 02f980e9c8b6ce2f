# Copyright (c) 2025 Trae AI. All rights reserved.

import os
import logging
import threading
from pathlib import Path
from typing import Iterable, Optional
from src.core.aggregator import Aggregator, ReportRenderer
from src.core.channel import BoundedQueue, CancelToken, join_all
from src.core.config import Config
from src.core.errors import CancelledError, ParseError, ResolutionError
from src.core.models import ResolvedRating, ScoreReport
from src.core.parser import FilenameParser
from src.core.scanner import Scanner
from src.infrastructure.db.cache import CacheStores
from src.infrastructure.http.fetcher import DocumentFetcher
from .rating_service import RatingService

logger = logging.getLogger(__name__)


class ScoreService:
    """
    Runs the scoring pipeline: directory walk -> bounded path queue -> worker
    threads -> bounded output queue -> single Aggregator thread.
    """

    def __init__(
        self,
        config: Config,
        stores: CacheStores,
        rating_service: RatingService,
        parser: Optional[FilenameParser] = None,
        scanner: Optional[Scanner] = None,
        renderer: Optional[ReportRenderer] = None,
        fetcher: Optional[DocumentFetcher] = None,
    ):
        self.config = config
        self.stores = stores
        self.rating_service = rating_service
        self.parser = parser or FilenameParser()
        self.scanner = scanner or Scanner(config.video_extensions)
        self.renderer = renderer
        self.fetcher = fetcher

    def score(self, roots: Iterable[Path], token: Optional[CancelToken] = None) -> ScoreReport:
        """
        Scores every video file under each root, roots processed one after another.
        Raises CancelledError if the token fires; tables are then not rendered.
        An aggregator failure cancels the run and is re-raised here.
        """
        token = token or CancelToken()
        scope = token.child()
        output = BoundedQueue(self.config.queue_size)
        aggregator = Aggregator(self.stores, self.renderer)
        consumer = threading.Thread(
            target=aggregator.run, args=(output, scope), name="aggregator", daemon=True
        )
        consumer.start()

        try:
            for root in roots:
                self.process_directory(Path(root), output, scope)
        except CancelledError:
            scope.cancel()
            if aggregator.failure is None:
                raise
        except BaseException:
            scope.cancel()
            raise
        finally:
            output.close()
            join_all([consumer], scope)

        if aggregator.failure is not None:
            raise aggregator.failure
        token.raise_if_cancelled()
        return aggregator.report

    def process_directory(self, root: Path, output: BoundedQueue, token: CancelToken):
        paths = BoundedQueue(self.config.queue_size)
        workers = [
            threading.Thread(
                target=self._worker, args=(paths, output, token), name=f"scorer-{i}", daemon=True
            )
            for i in range(self.config.worker_count())
        ]
        for worker in workers:
            worker.start()

        logger.debug(f"Scanning {root} with {len(workers)} workers")
        try:
            for path in self.scanner.walk(root):
                paths.put(path, token)
        finally:
            paths.close()
            join_all(workers, token)

    def _worker(self, paths: BoundedQueue, output: BoundedQueue, token: CancelToken):
        try:
            for path in paths.drain(token):
                resolved = self.score_file(path, token)
                if resolved is not None:
                    output.put(resolved, token)
        except CancelledError:
            logger.debug(f"{threading.current_thread().name} cancelled")
        finally:
            if self.fetcher is not None:
                self.fetcher.close()

    def score_file(self, path: str, token: Optional[CancelToken] = None) -> Optional[ResolvedRating]:
        """
        Parses and resolves one file. Returns None when the file is dropped.
        """
        base_name = os.path.basename(path)
        try:
            identity = self.parser.parse(base_name)
        except ParseError as e:
            logger.warning(f"Not able to parse: {base_name}")
            identity = e.partial

        try:
            return self.rating_service.resolve(base_name, identity, token)
        except ResolutionError as e:
            logger.debug(f"Unable to get ratings for {base_name}: {e}")
        except CancelledError:
            raise
        except Exception as e:
            # Continue with the next file instead of losing the worker
            logger.error(f"Failed to score {base_name}: {e}")
        return None
