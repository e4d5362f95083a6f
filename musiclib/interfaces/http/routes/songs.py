"""Song catalog routes."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from musiclib.domain.catalog import SongService
from musiclib.interfaces.http.errors import require_uuid, validate_payload
from musiclib.models.dto import SongCreate, SongQuery, SongUpdate


songs_bp = Blueprint('songs_bp', __name__, url_prefix='/api/v1/songs')


def _songs() -> SongService:
    return current_app.extensions['song_service']


@songs_bp.route('', methods=['GET'])
def list_songs():
    query = validate_payload(SongQuery, request.args.to_dict())
    songs = _songs().list(**query.model_dump())
    return jsonify(songs)


@songs_bp.route('/<song_id>', methods=['GET'])
def get_song(song_id):
    return jsonify(_songs().get_by_id(require_uuid(song_id)))


@songs_bp.route('', methods=['POST'])
def create_song():
    payload = validate_payload(SongCreate, request.get_json(silent=True))
    song = _songs().create(payload.model_dump(exclude_unset=True))
    return jsonify(song), 201


@songs_bp.route('/<song_id>', methods=['PUT'])
def update_song(song_id):
    song_id = require_uuid(song_id)
    payload = validate_payload(SongUpdate, request.get_json(silent=True))
    song = _songs().update(song_id, payload.model_dump(exclude_unset=True))
    return jsonify(song)


@songs_bp.route('/<song_id>', methods=['DELETE'])
def delete_song(song_id):
    _songs().delete(require_uuid(song_id))
    return jsonify({'message': 'Song deleted successfully'})
