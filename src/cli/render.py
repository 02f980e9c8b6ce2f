# Copyright (c) 2025 Trae AI. All rights reserved.

from typing import List
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from ..core.models import RatingRecord, ScoreReport

MOVIE_HEADER = ["Title", "Year", "IMDB rating", "RT rating", "Metacritic rating"]
TV_HEADER = [
    "Title",
    "Year",
    "Episode Title",
    "Season",
    "Episode Nr",
    "IMDB rating",
    "RT rating",
    "Metacritic rating",
]


def _cells(*values: str) -> List[str]:
    # Titles may contain square brackets
    return [escape(v) for v in values]


class TableRenderer:
    """
    Prints the movie table, then the TV table, skipping empty ones.
    """

    def __init__(self, console: Console):
        self.console = console

    def movie_table(self, records: List[RatingRecord]) -> Table:
        table = Table(caption="Movie Ratings")
        for column in MOVIE_HEADER:
            table.add_column(column)
        for r in records:
            table.add_row(*_cells(r.title, r.year, r.imdb_rating, r.rt_rating, r.mc_rating))
        return table

    def tv_table(self, records: List[RatingRecord]) -> Table:
        table = Table(caption="TV Series Ratings")
        for column in TV_HEADER:
            table.add_column(column)
        for r in records:
            table.add_row(*_cells(
                r.title, r.year, r.episode_title, r.season, r.episode_nr,
                r.imdb_rating, r.rt_rating, r.mc_rating,
            ))
        return table

    def render(self, report: ScoreReport):
        if report.movies:
            self.console.print(self.movie_table(report.movies))
            if report.tv:
                self.console.print()
        if report.tv:
            self.console.print(self.tv_table(report.tv))
