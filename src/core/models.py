# Copyright (c) 2025 Trae AI. All rights reserved.

from enum import Enum
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

NOT_AVAILABLE = "N/A"


class MediaType(Enum):
    MOVIE = "Movie"
    TV_SHOW = "TV Show"


class MediaIdentity(BaseModel):
    """
    Canonical identity parsed from a file name. Zero means unknown year
    or, for season/episode, not a series.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    year: int = 0
    season: int = 0
    episode: int = 0

    @property
    def is_tv(self) -> bool:
        return self.season > 0 and self.episode > 0


class OmdbResult(BaseModel):
    """
    Fields returned by OMDb for a single title or episode.
    """

    title: str = ""
    year: str = ""
    imdb_rating: str = NOT_AVAILABLE
    tomato_rating: str = NOT_AVAILABLE
    tomato_url: str = ""


class RatingRecord(BaseModel):
    """
    A resolved (or cached) rating entry. `primary_key` is the identity hash,
    `base_name_hash` indexes the file name the entry was first resolved from.
    """

    model_config = ConfigDict(frozen=True)

    primary_key: bytes
    base_name_hash: bytes
    title: str
    year: str = ""
    episode_title: str = ""
    season: str = ""
    episode_nr: str = ""
    imdb_rating: str = NOT_AVAILABLE
    rt_rating: str = NOT_AVAILABLE
    mc_rating: str = NOT_AVAILABLE
    is_tv: bool = False

    @field_validator("imdb_rating", "rt_rating", "mc_rating", mode="before")
    @classmethod
    def _blank_rating(cls, value):
        if value is None or str(value).strip() == "":
            return NOT_AVAILABLE
        return value

    @model_validator(mode="after")
    def _check_episode_fields(self):
        if self.is_tv and (not self.season or not self.episode_nr):
            raise ValueError("TV records need both season and episode")
        if not self.is_tv and (self.season or self.episode_nr):
            raise ValueError("Movie records cannot carry season or episode")
        return self


class ResolvedRating(BaseModel):
    record: RatingRecord
    cached: bool = False


class ScoreReport(BaseModel):
    movies: List[RatingRecord] = Field(default_factory=list)
    tv: List[RatingRecord] = Field(default_factory=list)
    persisted: int = 0
