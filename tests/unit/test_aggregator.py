# Copyright (c) 2025 Trae AI. All rights reserved.

import io
from unittest.mock import MagicMock
from rich.console import Console
from src.cli.render import TableRenderer
from src.core.aggregator import Aggregator
from src.core.channel import BoundedQueue, CancelToken
from src.core.models import ResolvedRating, ScoreReport


def test_add_splits_and_persists_fresh_records(stores, movie_record, tv_record):
    aggregator = Aggregator(stores)

    aggregator.add(ResolvedRating(record=movie_record, cached=False))
    aggregator.add(ResolvedRating(record=tv_record, cached=False))

    assert aggregator.report.movies == [movie_record]
    assert aggregator.report.tv == [tv_record]
    assert aggregator.report.persisted == 2
    assert stores.movie.get_by_primary_key(movie_record.primary_key) == movie_record
    assert stores.tv.get_by_primary_key(tv_record.primary_key) == tv_record


def test_cached_records_are_not_rewritten(movie_record):
    stores = MagicMock()
    aggregator = Aggregator(stores)

    aggregator.add(ResolvedRating(record=movie_record, cached=True))

    assert aggregator.report.movies == [movie_record]
    assert aggregator.report.persisted == 0
    stores.for_tv.assert_not_called()


def test_failed_save_still_reported(movie_record):
    stores = MagicMock()
    stores.for_tv.return_value.save.return_value = False
    aggregator = Aggregator(stores)

    aggregator.add(ResolvedRating(record=movie_record))

    assert aggregator.report.movies == [movie_record]
    assert aggregator.report.persisted == 0


def test_run_renders_once_queue_closes(stores, movie_record):
    renderer = MagicMock()
    output = BoundedQueue(4)
    output.put(ResolvedRating(record=movie_record))
    output.close()
    aggregator = Aggregator(stores, renderer)

    aggregator.run(output, CancelToken())

    assert aggregator.completed
    renderer.render.assert_called_once_with(aggregator.report)


def test_run_cancelled_skips_render(stores, movie_record):
    renderer = MagicMock()
    output = BoundedQueue(4)
    output.put(ResolvedRating(record=movie_record))
    output.close()
    token = CancelToken()
    token.cancel()
    aggregator = Aggregator(stores, renderer)

    aggregator.run(output, token)

    assert not aggregator.completed
    assert aggregator.failure is None
    renderer.render.assert_not_called()


def test_run_records_failure(stores, movie_record):
    renderer = MagicMock()
    renderer.render.side_effect = RuntimeError("terminal gone")
    output = BoundedQueue(4)
    output.close()
    aggregator = Aggregator(stores, renderer)

    aggregator.run(output)

    assert isinstance(aggregator.failure, RuntimeError)


def test_failed_save_cancels_scope(movie_record):
    stores = MagicMock()
    stores.for_tv.return_value.save.side_effect = RuntimeError("disk full")
    output = BoundedQueue(4)
    output.put(ResolvedRating(record=movie_record))
    output.close()
    token = CancelToken()
    aggregator = Aggregator(stores, MagicMock())

    aggregator.run(output, token)

    assert isinstance(aggregator.failure, RuntimeError)
    assert token.cancelled
    aggregator.renderer.render.assert_not_called()


def render(report: ScoreReport) -> str:
    buffer = io.StringIO()
    TableRenderer(Console(file=buffer, width=200)).render(report)
    return buffer.getvalue()


def test_render_movies_before_tv(movie_record, tv_record):
    output = render(ScoreReport(movies=[movie_record], tv=[tv_record]))

    assert output.index("Movie Ratings") < output.index("TV Series Ratings")
    assert "Metacritic rating" in output
    assert "Episode Title" in output
    assert "The Fifth One" in output


def test_render_skips_empty_tables(movie_record, tv_record):
    movies_only = render(ScoreReport(movies=[movie_record]))
    assert "Movie Ratings" in movies_only
    assert "TV Series Ratings" not in movies_only

    tv_only = render(ScoreReport(tv=[tv_record]))
    assert "Movie Ratings" not in tv_only
    assert "TV Series Ratings" in tv_only

    assert render(ScoreReport()) == ""


def test_render_keeps_brackets(movie_record):
    record = movie_record.model_copy(update={"title": "[REC]"})
    assert "[REC]" in render(ScoreReport(movies=[record]))
