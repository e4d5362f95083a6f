"""Factory Boy factories for database models used in tests."""

from datetime import datetime, timedelta

import factory
from factory.alchemy import SQLAlchemyModelFactory

from musiclib.database.db_manager import Playlist, PlaylistSong, Song

_EPOCH = datetime(2024, 1, 1, 12, 0, 0)


class _BaseFactory(SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session = None
        # Services read through their own sessions, so rows must be committed
        sqlalchemy_session_persistence = "commit"


class SongFactory(_BaseFactory):
    class Meta:
        model = Song

    title = factory.Sequence(lambda n: f"Song {n}")
    artist = factory.Sequence(lambda n: f"Artist {n}")
    album = "Album"
    genre = "Rock"
    year = 2001
    duration = 180
    # Strictly increasing so creation order is deterministic
    created_at = factory.Sequence(lambda n: _EPOCH + timedelta(seconds=n))
    updated_at = factory.LazyAttribute(lambda obj: obj.created_at)


class PlaylistFactory(_BaseFactory):
    class Meta:
        model = Playlist

    name = factory.Sequence(lambda n: f"Playlist {n}")
    description = None
    tags = factory.LazyFunction(list)
    created_at = factory.Sequence(lambda n: _EPOCH + timedelta(seconds=n))
    updated_at = factory.LazyAttribute(lambda obj: obj.created_at)


class PlaylistSongFactory(_BaseFactory):
    class Meta:
        model = PlaylistSong

    playlist = factory.SubFactory(PlaylistFactory)
    song = factory.SubFactory(SongFactory)
    position = factory.Sequence(lambda n: n)
    added_at = factory.Sequence(lambda n: _EPOCH + timedelta(seconds=n))


_FACTORIES = [SongFactory, PlaylistFactory, PlaylistSongFactory]


def set_session(session):
    for factory_cls in _FACTORIES:
        factory_cls._meta.sqlalchemy_session = session


def reset_session():
    for factory_cls in _FACTORIES:
        factory_cls._meta.sqlalchemy_session = None


__all__ = [
    "SongFactory",
    "PlaylistFactory",
    "PlaylistSongFactory",
    "set_session",
    "reset_session",
]
