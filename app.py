import os
import logging
from datetime import datetime

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Flask specific imports ---
from flask import Flask
from flask_cors import CORS

# --- Import our configuration and the domain services ---
from config import Config
from musiclib.database.db_manager import initialize_database
from musiclib.domain.ai import AIService
from musiclib.domain.catalog import ArtistService, SongService
from musiclib.domain.playlists import PlaylistService
from musiclib.domain.stats import StatsService
from musiclib.interfaces.http.errors import register_error_handlers
from musiclib.interfaces.http.routes import (
    songs_bp,
    artists_bp,
    playlists_bp,
    stats_bp,
    ai_bp,
    health_bp,
)
from musiclib.observability import (
    configure_structured_logging,
    init_request_context,
    init_request_metrics,
    init_tracing,
    metrics_blueprint,
)


logger = logging.getLogger(__name__)


def configure_logging(log_dir: str) -> str:
    """
    Configure root logging with:
      - FileHandler (INFO+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to console when ENABLE_CONSOLE_LOGS is set
      - Werkzeug/Flask loggers routed to root

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_path = os.path.join(log_dir, f"log-{timestamp}")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    # Preserve structured handlers; remove existing FileHandlers to avoid duplicates
    root.handlers = [h for h in root.handlers if not isinstance(h, logging.FileHandler)]

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    for name in ("werkzeug", "flask.app"):
        _l = logging.getLogger(name)
        _l.setLevel(logging.INFO)
        _l.handlers = []
        _l.propagate = True

    return log_path


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    configure_structured_logging(app)
    init_request_context(app)
    init_request_metrics(app)
    init_tracing(app)

    allowed_origins = sorted({
        origin.strip()
        for origin in app.config['ALLOWED_ORIGINS']
        if origin and origin.strip() and origin.strip() != "*"
    })
    CORS(
        app,
        resources={r"/api/*": {"origins": allowed_origins}},
        supports_credentials=True,
    )

    # One database handle per app, shared by every service
    database = initialize_database(app)

    app.extensions['song_service'] = SongService(database)
    app.extensions['artist_service'] = ArtistService(database)
    app.extensions['playlist_service'] = PlaylistService(database)
    app.extensions['stats_service'] = StatsService(database)
    app.extensions['ai_service'] = AIService(
        app.config['AI_API_URL'],
        timeout=app.config['AI_API_TIMEOUT_SECONDS'],
    )

    # --- Register Blueprints ---
    app.register_blueprint(songs_bp)
    app.register_blueprint(artists_bp)
    app.register_blueprint(playlists_bp)
    # Singular alias kept for older clients
    app.register_blueprint(playlists_bp, url_prefix='/api/v1/playlist', name='playlist_alias_bp')
    app.register_blueprint(stats_bp)
    app.register_blueprint(ai_bp)
    app.register_blueprint(metrics_blueprint)
    app.register_blueprint(health_bp)

    register_error_handlers(app)

    return app


if __name__ == '__main__':
    # Configure logging:
    # - In debug with reloader: only in the child process to avoid duplicate files
    # - In non-debug: always configure here
    debug_mode = bool(Config.DEBUG)
    log_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'log')
    if debug_mode:
        if os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
            log_file_path = configure_logging(log_dir)
            logger.info("File logging initialized at %s", log_file_path)
    else:
        log_file_path = configure_logging(log_dir)
        logger.info("File logging initialized at %s", log_file_path)

    app = create_app()
    logger.info("Music library API listening on port %s (AI service at %s)", Config.PORT, Config.AI_API_URL)
    app.run(host='0.0.0.0', port=Config.PORT, debug=debug_mode)
