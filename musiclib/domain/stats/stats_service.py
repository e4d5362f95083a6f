import logging
from collections import Counter

from sqlalchemy import desc, distinct, func, select

from musiclib.database.db_manager import Database, Playlist, Song
from musiclib.observability import record_stats_fallback
from musiclib.utils.helpers import get_decade

logger = logging.getLogger(__name__)


def empty_stats() -> dict:
    return {
        'total_songs': 0,
        'total_playlists': 0,
        'unique_genres': 0,
        'unique_artists': 0,
        'songs_by_genre': [],
        'songs_by_decade': [],
    }


class StatsService:
    def __init__(self, database: Database):
        self._db = database

    def get_dashboard_stats(self) -> dict:
        """Library-wide counts for the dashboard.

        Best effort: if anything goes wrong the caller still gets the full
        shape, zero-filled, and the failure is only logged.
        """
        try:
            with self._db.session_scope() as session:
                total_songs = session.scalar(select(func.count()).select_from(Song))
                total_playlists = session.scalar(select(func.count()).select_from(Playlist))
                unique_genres = session.scalar(
                    select(func.count(distinct(Song.genre))).where(Song.genre.isnot(None))
                )
                unique_artists = session.scalar(select(func.count(distinct(Song.artist))))
                genre_rows = session.execute(
                    select(Song.genre, func.count().label('count'))
                    .where(Song.genre.isnot(None))
                    .group_by(Song.genre)
                    .order_by(desc('count'), Song.genre.asc())
                ).all()
                years = session.scalars(select(Song.year).where(Song.year.isnot(None))).all()
        except Exception:
            logger.exception("Error fetching dashboard stats; returning defaults")
            record_stats_fallback()
            return empty_stats()

        decades = Counter(get_decade(year) for year in years)
        return {
            'total_songs': total_songs or 0,
            'total_playlists': total_playlists or 0,
            'unique_genres': unique_genres or 0,
            'unique_artists': unique_artists or 0,
            'songs_by_genre': [
                {'genre': genre or '', 'count': count or 0} for genre, count in genre_rows
            ],
            'songs_by_decade': [
                {'decade': decade, 'count': count} for decade, count in sorted(decades.items())
            ],
        }
