# Copyright (c) 2025 Trae AI. All rights reserved.

import pytest
from unittest.mock import patch
from src.core.errors import ParseError
from src.core.models import MediaIdentity
from src.core.parser import FilenameParser


@pytest.fixture
def parser():
    return FilenameParser()


def test_parse_movie(parser):
    identity = parser.parse("The.Matrix.1999.1080p.mkv")
    assert identity == MediaIdentity(title="The Matrix", year=1999, season=0, episode=0)
    assert not identity.is_tv


def test_parse_episode(parser):
    identity = parser.parse("Show.Name.S02E05.720p.mkv")
    assert identity.title == "Show Name"
    assert identity.season == 2
    assert identity.episode == 5
    assert identity.is_tv


def test_parse_trims_dots(parser):
    with patch("src.core.parser.guessit", return_value={"title": ".Heat.", "year": 1995}):
        identity = parser.parse("Heat.1995.mkv")
    assert identity.title == "Heat"
    assert identity.year == 1995


def test_parse_multi_episode_takes_first(parser):
    with patch("src.core.parser.guessit", return_value={"title": "Show", "season": 1, "episode": [3, 4]}):
        identity = parser.parse("Show.S01E03E04.mkv")
    assert identity.episode == 3


def test_parse_without_title_gives_partial(parser):
    with patch("src.core.parser.guessit", return_value={"year": 2001}):
        with pytest.raises(ParseError) as excinfo:
            parser.parse("2001.mkv")
    assert excinfo.value.partial == MediaIdentity(title="2001")


def test_parse_failure_gives_partial(parser):
    with patch("src.core.parser.guessit", side_effect=RuntimeError("boom")):
        with pytest.raises(ParseError) as excinfo:
            parser.parse(".Weird.Name.mkv")
    assert excinfo.value.partial.title == "Weird.Name"
