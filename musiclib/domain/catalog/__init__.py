from .artist_service import ArtistService
from .song_service import SongService

__all__ = ["ArtistService", "SongService"]
