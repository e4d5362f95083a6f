"""Shared bounds for pagination and field validation."""

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000
DEFAULT_OFFSET = 0

MIN_YEAR = 1900
MAX_YEAR = 2100

MAX_TITLE_LENGTH = 255
MAX_ARTIST_LENGTH = 255
MAX_ALBUM_LENGTH = 255
MAX_GENRE_LENGTH = 100
MAX_IMAGE_URL_LENGTH = 500

MAX_PLAYLIST_NAME_LENGTH = 255
MAX_TAGS = 50
MAX_SONG_ORDERS = 1000

MAX_AI_SONGS = 500
MAX_RECOMMENDATIONS = 50
MAX_SEARCH_QUERY_LENGTH = 500
MAX_SEMANTIC_RESULTS = 100
DEFAULT_SEMANTIC_RESULTS = 10
