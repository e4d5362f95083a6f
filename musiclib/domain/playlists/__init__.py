from .playlist_service import PlaylistService

__all__ = ["PlaylistService"]
