"""Playlist CRUD and membership routes.

Registered twice: under ``/api/v1/playlists`` and the singular
``/api/v1/playlist`` alias older clients still call.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from musiclib.domain.playlists import PlaylistService
from musiclib.interfaces.http.errors import require_uuid, validate_payload
from musiclib.models.dto import (
    AddSongToPlaylist,
    PlaylistCreate,
    PlaylistUpdate,
    ReorderPlaylistSongs,
)


playlists_bp = Blueprint('playlists_bp', __name__, url_prefix='/api/v1/playlists')

_TRUTHY = {'1', 'true', 'yes', 'on'}


def _playlists() -> PlaylistService:
    return current_app.extensions['playlist_service']


def _flag(name: str) -> bool:
    return (request.args.get(name) or '').strip().lower() in _TRUTHY


@playlists_bp.route('', methods=['GET'])
def list_playlists():
    return jsonify(_playlists().list(include_songs=_flag('include_songs')))


@playlists_bp.route('', methods=['POST'])
@playlists_bp.route('/new', methods=['POST'])
def create_playlist():
    payload = validate_payload(PlaylistCreate, request.get_json(silent=True))
    playlist = _playlists().create(payload.model_dump())
    return jsonify(playlist), 201


@playlists_bp.route('/<playlist_id>', methods=['GET'])
def get_playlist(playlist_id):
    return jsonify(_playlists().get_by_id(require_uuid(playlist_id)))


@playlists_bp.route('/<playlist_id>', methods=['PUT'])
def update_playlist(playlist_id):
    playlist_id = require_uuid(playlist_id)
    payload = validate_payload(PlaylistUpdate, request.get_json(silent=True))
    playlist = _playlists().update(playlist_id, payload.model_dump(exclude_unset=True))
    return jsonify(playlist)


@playlists_bp.route('/<playlist_id>', methods=['DELETE'])
def delete_playlist(playlist_id):
    _playlists().delete(require_uuid(playlist_id))
    return jsonify({'message': 'Playlist deleted successfully'})


@playlists_bp.route('/<playlist_id>/songs', methods=['POST'])
def add_song_to_playlist(playlist_id):
    playlist_id = require_uuid(playlist_id)
    payload = validate_payload(AddSongToPlaylist, request.get_json(silent=True))
    playlist = _playlists().add_song(playlist_id, payload.song_id, payload.position)
    return jsonify(playlist)


@playlists_bp.route('/<playlist_id>/songs/<song_id>', methods=['DELETE'])
def remove_song_from_playlist(playlist_id, song_id):
    _playlists().remove_song(require_uuid(playlist_id), require_uuid(song_id))
    return jsonify({'message': 'Song removed from playlist successfully'})


@playlists_bp.route('/<playlist_id>/songs/reorder', methods=['PUT'])
def reorder_playlist_songs(playlist_id):
    playlist_id = require_uuid(playlist_id)
    payload = validate_payload(ReorderPlaylistSongs, request.get_json(silent=True))
    orders = [order.model_dump() for order in payload.song_orders]
    return jsonify(_playlists().reorder_songs(playlist_id, orders))
