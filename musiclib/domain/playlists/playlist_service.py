"""Playlists and their ordered song membership."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from musiclib.database.db_manager import Database, Playlist, PlaylistSong, Song
from musiclib.domain.errors import ConflictError, NotFoundError, ValidationError
from musiclib.utils.helpers import blank_to_none, calculate_total_duration

logger = logging.getLogger(__name__)

PLAYLIST_FIELDS = ('name', 'description', 'tags')


def _playlist_values(fields: Mapping[str, Any]) -> Dict[str, Any]:
    values = {}
    for name in PLAYLIST_FIELDS:
        if name not in fields:
            continue
        value = fields[name]
        if name == 'description':
            value = blank_to_none(value)
        elif name == 'tags':
            value = list(value or [])
        values[name] = value
    return values


def _songs_for_playlist(session: Session, playlist_id: str) -> List[dict]:
    stmt = (
        select(Song)
        .join(PlaylistSong, PlaylistSong.song_id == Song.id)
        .where(PlaylistSong.playlist_id == playlist_id)
        .order_by(PlaylistSong.position.asc(), PlaylistSong.added_at.asc())
    )
    return [song.to_dict() for song in session.scalars(stmt)]


def _with_songs(session: Session, playlist: Playlist) -> dict:
    songs = _songs_for_playlist(session, playlist.id)
    data = playlist.to_dict(total_songs=len(songs))
    data['songs'] = songs
    data['total_duration'] = calculate_total_duration(songs)
    return data


def _require_playlist(session: Session, playlist_id: str) -> Playlist:
    playlist = session.get(Playlist, playlist_id)
    if playlist is None:
        raise NotFoundError('Playlist')
    return playlist


class PlaylistService:
    def __init__(self, database: Database):
        self._db = database

    def list(self, include_songs: bool = False) -> List[dict]:
        stmt = (
            select(Playlist, func.count(PlaylistSong.song_id).label('total_songs'))
            .outerjoin(PlaylistSong, PlaylistSong.playlist_id == Playlist.id)
            .group_by(Playlist.id)
            .order_by(Playlist.created_at.desc())
        )
        with self._db.session_scope() as session:
            results = []
            for playlist, total_songs in session.execute(stmt):
                if include_songs:
                    results.append(_with_songs(session, playlist))
                else:
                    results.append(playlist.to_dict(total_songs=total_songs))
            return results

    def get_by_id(self, playlist_id: str) -> dict:
        with self._db.session_scope() as session:
            return _with_songs(session, _require_playlist(session, playlist_id))

    def create(self, fields: Mapping[str, Any]) -> dict:
        values = _playlist_values(fields)
        if not values.get('name'):
            raise ValidationError('name: Field required')
        values.setdefault('tags', [])

        with self._db.session_scope() as session:
            playlist = Playlist(**values)
            session.add(playlist)
            session.flush()
            logger.info("Created playlist %s (%s)", playlist.id, playlist.name)
            return playlist.to_dict(total_songs=0)

    def update(self, playlist_id: str, fields: Mapping[str, Any]) -> dict:
        with self._db.session_scope() as session:
            playlist = _require_playlist(session, playlist_id)

            values = _playlist_values(fields)
            if not values:
                raise ValidationError('No valid fields to update')

            session.execute(
                update(Playlist).where(Playlist.id == playlist_id).values(**values),
                execution_options={'synchronize_session': False},
            )
            session.refresh(playlist)
            return playlist.to_dict()

    def delete(self, playlist_id: str) -> None:
        with self._db.session_scope() as session:
            playlist = _require_playlist(session, playlist_id)
            session.delete(playlist)
            logger.info("Deleted playlist %s", playlist_id)

    def add_song(self, playlist_id: str, song_id: str, position: Optional[int] = None) -> dict:
        if position is not None and position < 0:
            raise ValidationError('position: Position must be at least 0')

        with self._db.session_scope() as session:
            _require_playlist(session, playlist_id)
            if session.get(Song, song_id) is None:
                raise NotFoundError('Song')
            if session.get(PlaylistSong, (playlist_id, song_id)) is not None:
                raise ConflictError('Song is already in the playlist')

            if position is None:
                current_max = session.scalar(
                    select(func.coalesce(func.max(PlaylistSong.position), -1))
                    .where(PlaylistSong.playlist_id == playlist_id)
                )
                position = int(current_max) + 1

            session.add(PlaylistSong(playlist_id=playlist_id, song_id=song_id, position=position))
            try:
                session.flush()
            except IntegrityError as exc:
                # Either a concurrent add of the same pair or a concurrent delete
                # of one side; look again to tell them apart
                session.rollback()
                _require_playlist(session, playlist_id)
                if session.get(Song, song_id) is None:
                    raise NotFoundError('Song') from exc
                raise ConflictError('Song is already in the playlist') from exc

        return self.get_by_id(playlist_id)

    def remove_song(self, playlist_id: str, song_id: str) -> None:
        """Remove a member song. A song that isn't a member is not an error."""
        with self._db.session_scope() as session:
            _require_playlist(session, playlist_id)
            session.execute(
                delete(PlaylistSong).where(
                    PlaylistSong.playlist_id == playlist_id,
                    PlaylistSong.song_id == song_id,
                )
            )

    def reorder_songs(self, playlist_id: str, song_orders: Iterable[Mapping[str, Any]]) -> dict:
        """Apply every ``{song_id, position}`` in one transaction, or none of them."""
        orders = [(order['song_id'], int(order['position'])) for order in song_orders]

        with self._db.session_scope() as session:
            _require_playlist(session, playlist_id)
            member_ids = set(
                session.scalars(
                    select(PlaylistSong.song_id).where(PlaylistSong.playlist_id == playlist_id)
                )
            )
            for song_id, _ in orders:
                if song_id not in member_ids:
                    raise NotFoundError(f"Song {song_id} in playlist")

            for song_id, position in orders:
                session.execute(
                    update(PlaylistSong)
                    .where(
                        PlaylistSong.playlist_id == playlist_id,
                        PlaylistSong.song_id == song_id,
                    )
                    .values(position=position)
                )

        return self.get_by_id(playlist_id)
