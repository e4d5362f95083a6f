#!/usr/bin/env python
"""
Pydantic DTOs describing the request bodies and query strings the API accepts.

Routes validate with these before calling a service, so services only ever
see well-typed, in-range values.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from musiclib.utils.constants import (
    DEFAULT_OFFSET,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SEMANTIC_RESULTS,
    MAX_AI_SONGS,
    MAX_ALBUM_LENGTH,
    MAX_ARTIST_LENGTH,
    MAX_GENRE_LENGTH,
    MAX_IMAGE_URL_LENGTH,
    MAX_PAGE_SIZE,
    MAX_PLAYLIST_NAME_LENGTH,
    MAX_RECOMMENDATIONS,
    MAX_SEARCH_QUERY_LENGTH,
    MAX_SEMANTIC_RESULTS,
    MAX_SONG_ORDERS,
    MAX_TAGS,
    MAX_TITLE_LENGTH,
    MAX_YEAR,
    MIN_YEAR,
)
from musiclib.utils.helpers import normalize_uuid

_URL_ADAPTER = TypeAdapter(AnyUrl)


def _check_uuid(value: str) -> str:
    try:
        return normalize_uuid(value)
    except ValueError:
        raise ValueError('must be a valid UUID')


UUIDStr = Annotated[str, AfterValidator(_check_uuid)]


def _whole_number(value: Any) -> Any:
    # 180.0 counts as an integer, 180.5 does not
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# Strings, bools and fractional numbers are still rejected by the strict int check
WholeInt = Annotated[int, BeforeValidator(_whole_number)]


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError('cannot be null')
    return value


class _Payload(BaseModel):
    # Unknown keys are dropped rather than rejected
    model_config = ConfigDict(extra='ignore')


# --- Songs ---
class SongCreate(_Payload):
    title: str = Field(min_length=1, max_length=MAX_TITLE_LENGTH)
    artist: str = Field(min_length=1, max_length=MAX_ARTIST_LENGTH)
    album: Optional[str] = Field(None, max_length=MAX_ALBUM_LENGTH)
    genre: Optional[str] = Field(None, max_length=MAX_GENRE_LENGTH)
    year: Optional[WholeInt] = Field(None, ge=MIN_YEAR, le=MAX_YEAR, strict=True)
    duration: WholeInt = Field(gt=0, strict=True)
    lyrics: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=MAX_IMAGE_URL_LENGTH)

    @field_validator('image_url')
    @classmethod
    def check_image_url(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return value
        try:
            _URL_ADAPTER.validate_python(value)
        except PydanticValidationError:
            raise ValueError('Image URL must be a valid URL')
        return value


class SongUpdate(SongCreate):
    title: Optional[str] = Field(None, min_length=1, max_length=MAX_TITLE_LENGTH)
    artist: Optional[str] = Field(None, min_length=1, max_length=MAX_ARTIST_LENGTH)
    duration: Optional[WholeInt] = Field(None, gt=0, strict=True)

    @field_validator('title', 'artist', 'duration', mode='before')
    @classmethod
    def check_not_null(cls, value: Any) -> Any:
        return _reject_null(value)


class SongQuery(_Payload):
    genre: Optional[str] = None
    artist: Optional[str] = None
    year: Optional[int] = None
    search: Optional[str] = None
    limit: int = Field(DEFAULT_PAGE_SIZE, gt=0, le=MAX_PAGE_SIZE)
    offset: int = Field(DEFAULT_OFFSET, ge=0)


# --- Playlists ---
class PlaylistCreate(_Payload):
    name: str = Field(min_length=1, max_length=MAX_PLAYLIST_NAME_LENGTH)
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS)


class PlaylistUpdate(_Payload):
    name: Optional[str] = Field(None, min_length=1, max_length=MAX_PLAYLIST_NAME_LENGTH)
    description: Optional[str] = None
    tags: Optional[List[str]] = Field(None, max_length=MAX_TAGS)

    @field_validator('name', 'tags', mode='before')
    @classmethod
    def check_not_null(cls, value: Any) -> Any:
        return _reject_null(value)


class AddSongToPlaylist(_Payload):
    song_id: UUIDStr
    position: Optional[WholeInt] = Field(None, ge=0, strict=True)


class SongOrder(_Payload):
    song_id: UUIDStr
    position: WholeInt = Field(ge=0, strict=True)


class ReorderPlaylistSongs(_Payload):
    song_orders: List[SongOrder] = Field(min_length=1, max_length=MAX_SONG_ORDERS)


# --- AI proxy ---
class PlaylistNameStyle(str, Enum):
    CREATIVE = 'creative'
    DESCRIPTIVE = 'descriptive'
    FUN = 'fun'


class AISong(_Payload):
    """A song as the AI service expects it: the serialized library record."""

    id: UUIDStr
    title: str
    artist: str
    album: Optional[str] = None
    genre: Optional[str] = None
    year: Optional[WholeInt] = Field(None, strict=True)
    duration: WholeInt = Field(strict=True)
    lyrics: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


AISongList = Annotated[List[AISong], Field(min_length=1, max_length=MAX_AI_SONGS)]


def songs_payload(songs: List[AISong]) -> List[Dict[str, Any]]:
    return [song.model_dump(exclude_unset=True) for song in songs]


class DescribePlaylistRequest(_Payload):
    songs: AISongList


class RecommendSongsRequest(_Payload):
    current_songs: AISongList
    number_of_recommendations: WholeInt = Field(gt=0, le=MAX_RECOMMENDATIONS, strict=True)


class GeneratePlaylistNameRequest(_Payload):
    songs: AISongList
    style: PlaylistNameStyle


class AnalyzeMoodRequest(_Payload):
    songs: AISongList


class SemanticSearchRequest(_Payload):
    query: str = Field(min_length=1, max_length=MAX_SEARCH_QUERY_LENGTH)
    limit: WholeInt = Field(DEFAULT_SEMANTIC_RESULTS, gt=0, le=MAX_SEMANTIC_RESULTS, strict=True)


__all__ = [
    'SongCreate',
    'SongUpdate',
    'SongQuery',
    'PlaylistCreate',
    'PlaylistUpdate',
    'AddSongToPlaylist',
    'SongOrder',
    'ReorderPlaylistSongs',
    'PlaylistNameStyle',
    'AISong',
    'songs_payload',
    'DescribePlaylistRequest',
    'RecommendSongsRequest',
    'GeneratePlaylistNameRequest',
    'AnalyzeMoodRequest',
    'SemanticSearchRequest',
]
