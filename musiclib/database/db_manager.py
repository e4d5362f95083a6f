# musiclib/database/db_manager.py
import logging
import os
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, Optional
from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()


def _new_id() -> str:
    return str(uuid4())


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# --- Models ---
class Song(Base):
    __tablename__ = 'songs'

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    artist = Column(String(255), nullable=False, index=True)  # Free text; artists are derived by grouping
    album = Column(String(255), nullable=True)
    genre = Column(String(100), nullable=True, index=True)
    year = Column(Integer, nullable=True)
    duration = Column(Integer, nullable=False)  # Whole seconds
    lyrics = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    memberships = relationship(
        'PlaylistSong',
        back_populates='song',
        cascade='all, delete-orphan',
    )

    __table_args__ = (
        CheckConstraint('duration > 0', name='ck_songs_duration_positive'),
    )

    def __repr__(self):
        return f'<Song {self.title} by {self.artist}>'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'artist': self.artist,
            'album': self.album,
            'genre': self.genre,
            'year': self.year,
            'duration': self.duration,
            'lyrics': self.lyrics,
            'image_url': self.image_url,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Playlist(Base):
    __tablename__ = 'playlists'

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)  # list[str], order preserved
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    entries = relationship(
        'PlaylistSong',
        back_populates='playlist',
        order_by=lambda: [PlaylistSong.position, PlaylistSong.added_at],
        cascade='all, delete-orphan',
    )

    def __repr__(self):
        return f'<Playlist {self.name}>'

    def to_dict(self, *, total_songs: Optional[int] = None) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'tags': list(self.tags or []),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
            'total_songs': total_songs if total_songs is not None else len(self.entries or []),
        }


class PlaylistSong(Base):
    __tablename__ = 'playlist_songs'

    playlist_id = Column(
        String(36),
        ForeignKey('playlists.id', ondelete='CASCADE'),
        primary_key=True,
    )
    song_id = Column(
        String(36),
        ForeignKey('songs.id', ondelete='CASCADE'),
        primary_key=True,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)
    added_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    playlist = relationship('Playlist', back_populates='entries')
    song = relationship('Song', back_populates='memberships')

    __table_args__ = (
        CheckConstraint('position >= 0', name='ck_playlist_songs_position'),
    )

    def to_dict(self) -> dict:
        return {
            'playlist_id': self.playlist_id,
            'song_id': self.song_id,
            'position': self.position,
            'added_at': _iso(self.added_at),
        }


# --- Data-access handle ---
class Database:
    """Owns the engine, its connection pool and the session factory.

    Built once by the app factory and handed to each service.
    """

    def __init__(self, url: str, *, pool_size: int = 10, echo: bool = False) -> None:
        self.url = make_url(url)
        engine_kwargs = {'echo': echo, 'pool_pre_ping': True}

        if self.is_sqlite:
            engine_kwargs['connect_args'] = {'check_same_thread': False}
            if self.is_memory:
                # One shared connection, otherwise every checkout sees an empty database
                engine_kwargs['poolclass'] = StaticPool
        else:
            engine_kwargs.update({'pool_size': pool_size, 'max_overflow': 0})

        self.engine = create_engine(url, **engine_kwargs)
        if self.is_sqlite:
            self._enable_sqlite_foreign_keys()

        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    @property
    def is_sqlite(self) -> bool:
        return self.url.get_backend_name() == 'sqlite'

    @property
    def is_memory(self) -> bool:
        return self.is_sqlite and self.url.database in (None, '', ':memory:')

    def _enable_sqlite_foreign_keys(self) -> None:
        @event.listens_for(self.engine, 'connect')
        def _set_sqlite_pragma(dbapi_conn, _connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

    def new_session(self) -> Session:
        """A bare session; the caller owns commit and close."""
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Transactional scope: commit on success, rollback on any error."""
        session = self.new_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(self.engine)

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text('SELECT 1'))

    def dispose(self) -> None:
        self.engine.dispose()


def _ensure_sqlite_directory(database: Database) -> None:
    if not database.is_sqlite or database.is_memory:
        return
    db_dir = os.path.dirname(database.url.database)
    if db_dir and not os.path.exists(db_dir):
        os.makedirs(db_dir, exist_ok=True)
        logger.info("Created SQLite DB directory: %s", db_dir)


def initialize_database(app) -> Database:
    """
    Builds the Database handle from the app config, creates all tables if
    they don't already exist and exposes the handle on app.extensions.
    """
    database = Database(
        app.config['DATABASE_URL'],
        pool_size=int(app.config.get('DB_POOL_SIZE', 10)),
        echo=bool(app.config.get('DB_ECHO', False)),
    )

    try:
        _ensure_sqlite_directory(database)
    except OSError as e:
        # Don't block app startup on path issues; create_all will surface real problems
        logger.warning("Could not ensure SQLite directory exists: %s", e)

    database.create_all()
    logger.info("Database tables created or already exist.")
    app.extensions['database'] = database
    return database
