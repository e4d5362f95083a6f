"""Proxy routes for the external AI service.

Bodies are validated here so malformed requests never reach the upstream;
whatever the upstream returns on success is passed through untouched.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from musiclib.domain.ai import AIService
from musiclib.interfaces.http.errors import validate_payload
from musiclib.models.dto import (
    AnalyzeMoodRequest,
    DescribePlaylistRequest,
    GeneratePlaylistNameRequest,
    RecommendSongsRequest,
    SemanticSearchRequest,
    songs_payload,
)


ai_bp = Blueprint('ai_bp', __name__, url_prefix='/api/v1/ai')


def _ai() -> AIService:
    return current_app.extensions['ai_service']


@ai_bp.route('/describe-playlist', methods=['POST'])
def describe_playlist():
    payload = validate_payload(DescribePlaylistRequest, request.get_json(silent=True))
    return jsonify(_ai().describe_playlist(songs_payload(payload.songs)))


@ai_bp.route('/recommend-songs', methods=['POST'])
def recommend_songs():
    payload = validate_payload(RecommendSongsRequest, request.get_json(silent=True))
    result = _ai().recommend_songs(
        songs_payload(payload.current_songs),
        payload.number_of_recommendations,
    )
    return jsonify(result)


@ai_bp.route('/generate-playlist-name', methods=['POST'])
def generate_playlist_name():
    payload = validate_payload(GeneratePlaylistNameRequest, request.get_json(silent=True))
    result = _ai().generate_playlist_name(songs_payload(payload.songs), payload.style.value)
    return jsonify(result)


@ai_bp.route('/analyze-mood', methods=['POST'])
def analyze_mood():
    payload = validate_payload(AnalyzeMoodRequest, request.get_json(silent=True))
    return jsonify(_ai().analyze_mood(songs_payload(payload.songs)))


@ai_bp.route('/semantic-search', methods=['POST'])
def semantic_search():
    payload = validate_payload(SemanticSearchRequest, request.get_json(silent=True))
    return jsonify(_ai().semantic_search(payload.query, payload.limit))
