from __future__ import annotations

from urllib.parse import unquote

from flask import Blueprint, current_app, jsonify

from musiclib.domain.catalog import ArtistService


artists_bp = Blueprint('artists_bp', __name__, url_prefix='/api/v1/artists')


def _artists() -> ArtistService:
    return current_app.extensions['artist_service']


@artists_bp.route('', methods=['GET'])
def list_artists():
    return jsonify(_artists().list_all())


@artists_bp.route('/<path:name>', methods=['GET'])
def get_artist(name):
    # Clients may percent-encode the name a second time
    return jsonify(_artists().get_by_name(unquote(name)))
