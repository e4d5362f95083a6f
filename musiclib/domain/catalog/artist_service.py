from collections import defaultdict
from typing import Dict, List, Set

from sqlalchemy import desc, func, select

from musiclib.database.db_manager import Database, Song
from musiclib.domain.errors import NotFoundError


class ArtistService:
    """Artists exist only as the distinct ``Song.artist`` values."""

    def __init__(self, database: Database):
        self._db = database

    def list_all(self) -> List[dict]:
        counts_stmt = (
            select(Song.artist, func.count(Song.id).label('total_songs'))
            .group_by(Song.artist)
            .order_by(desc('total_songs'), Song.artist.asc())
        )
        genres_stmt = (
            select(Song.artist, Song.genre)
            .where(Song.genre.isnot(None))
            .distinct()
        )

        with self._db.session_scope() as session:
            counts = session.execute(counts_stmt).all()
            genres_by_artist: Dict[str, Set[str]] = defaultdict(set)
            for artist, genre in session.execute(genres_stmt):
                genres_by_artist[artist].add(genre)

        return [
            {
                'name': artist,
                'total_songs': total,
                'genres': sorted(genres_by_artist.get(artist, ())),
            }
            for artist, total in counts
        ]

    def get_by_name(self, name: str) -> dict:
        stmt = (
            select(Song)
            .where(Song.artist == name)
            # year DESC with undated songs last, on every backend
            .order_by(Song.year.is_(None), Song.year.desc(), Song.title.asc())
        )
        with self._db.session_scope() as session:
            songs = [song.to_dict() for song in session.scalars(stmt)]

        if not songs:
            raise NotFoundError('Artist')

        return {
            'artist': name,
            'total_songs': len(songs),
            'songs': songs,
        }
