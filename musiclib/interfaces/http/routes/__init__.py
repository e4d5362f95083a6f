"""Route blueprints exposed via Flask."""

from .songs import songs_bp
from .artists import artists_bp
from .playlists import playlists_bp
from .stats import stats_bp
from .ai import ai_bp
from .health import health_bp

__all__ = [
    "songs_bp",
    "artists_bp",
    "playlists_bp",
    "stats_bp",
    "ai_bp",
    "health_bp",
]
