import logging
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import or_, select, update

from musiclib.database.db_manager import Database, Song
from musiclib.domain.errors import NotFoundError, ValidationError
from musiclib.utils.constants import DEFAULT_OFFSET, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from musiclib.utils.helpers import blank_to_none, escape_like

logger = logging.getLogger(__name__)

# Columns a caller may write; anything else in a payload is ignored.
SONG_FIELDS = ('title', 'artist', 'album', 'genre', 'year', 'duration', 'lyrics', 'image_url')
NULLABLE_TEXT_FIELDS = frozenset({'album', 'genre', 'lyrics', 'image_url'})


def _song_values(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Pick the recognised song fields, turning '' into NULL for optional text."""
    values = {}
    for name in SONG_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name in NULLABLE_TEXT_FIELDS:
            value = blank_to_none(value)
        values[name] = value
    return values


class SongService:
    """Song catalog: filtered listing and CRUD."""

    def __init__(self, database: Database):
        self._db = database

    def list(
        self,
        *,
        genre: Optional[str] = None,
        artist: Optional[str] = None,
        year: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = DEFAULT_OFFSET,
    ) -> List[dict]:
        limit = max(1, min(int(limit), MAX_PAGE_SIZE))
        offset = max(0, int(offset))

        stmt = select(Song)
        if genre:
            stmt = stmt.where(Song.genre == genre)
        if artist:
            stmt = stmt.where(Song.artist == artist)
        if year is not None:
            stmt = stmt.where(Song.year == year)
        if search:
            pattern = f"%{escape_like(search)}%"
            stmt = stmt.where(
                or_(
                    Song.title.ilike(pattern, escape='\\'),
                    Song.artist.ilike(pattern, escape='\\'),
                    Song.album.ilike(pattern, escape='\\'),
                )
            )
        stmt = stmt.order_by(Song.created_at.asc()).limit(limit).offset(offset)

        with self._db.session_scope() as session:
            return [song.to_dict() for song in session.scalars(stmt)]

    def get_by_id(self, song_id: str) -> dict:
        with self._db.session_scope() as session:
            song = session.get(Song, song_id)
            if song is None:
                raise NotFoundError('Song')
            return song.to_dict()

    def create(self, fields: Mapping[str, Any]) -> dict:
        values = _song_values(fields)
        for required in ('title', 'artist', 'duration'):
            if values.get(required) in (None, ''):
                raise ValidationError(f"{required}: Field required")

        with self._db.session_scope() as session:
            song = Song(**values)
            session.add(song)
            session.flush()
            logger.info("Created song %s (%s - %s)", song.id, song.artist, song.title)
            return song.to_dict()

    def update(self, song_id: str, fields: Mapping[str, Any]) -> dict:
        with self._db.session_scope() as session:
            song = session.get(Song, song_id)
            if song is None:
                raise NotFoundError('Song')

            values = _song_values(fields)
            if not values:
                raise ValidationError('No valid fields to update')

            session.execute(
                update(Song).where(Song.id == song_id).values(**values),
                execution_options={'synchronize_session': False},
            )
            session.refresh(song)
            return song.to_dict()

    def delete(self, song_id: str) -> None:
        """Delete a song; its playlist memberships go with it. Missing ids are ignored."""
        with self._db.session_scope() as session:
            song = session.get(Song, song_id)
            if song is None:
                return
            session.delete(song)
            logger.info("Deleted song %s", song_id)
