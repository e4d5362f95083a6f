import pytest

from musiclib.domain.stats import empty_stats


@pytest.mark.unit
def test_empty_library_returns_zeroes(stats_service):
    assert stats_service.get_dashboard_stats() == empty_stats()


@pytest.mark.unit
def test_dashboard_counts_and_histograms(stats_service, factories):
    factories.SongFactory(artist="A", genre="Rock", year=1994)
    factories.SongFactory(artist="A", genre="Rock", year=1999)
    factories.SongFactory(artist="B", genre="Jazz", year=1961)
    factories.SongFactory(artist="C", genre="Blues", year=None)
    factories.SongFactory(artist="C", genre=None, year=2003)
    factories.PlaylistFactory()

    stats = stats_service.get_dashboard_stats()

    assert stats["total_songs"] == 5
    assert stats["total_playlists"] == 1
    assert stats["unique_genres"] == 3
    assert stats["unique_artists"] == 3
    assert stats["songs_by_genre"] == [
        {"genre": "Rock", "count": 2},
        {"genre": "Blues", "count": 1},
        {"genre": "Jazz", "count": 1},
    ]
    assert stats["songs_by_decade"] == [
        {"decade": "1960s", "count": 1},
        {"decade": "1990s", "count": 2},
        {"decade": "2000s", "count": 1},
    ]


@pytest.mark.unit
def test_database_failure_falls_back_to_defaults(stats_service, database, caplog):
    database.drop_all()

    with caplog.at_level("ERROR"):
        stats = stats_service.get_dashboard_stats()

    assert stats == empty_stats()
    assert "dashboard stats" in caplog.text
