import pytest

from musiclib.domain.errors import NotFoundError


@pytest.mark.unit
def test_list_all_groups_by_artist(artist_service, factories):
    factories.SongFactory(artist="Björk", genre="Electronic")
    factories.SongFactory(artist="Björk", genre="Pop")
    factories.SongFactory(artist="Björk", genre=None)
    factories.SongFactory(artist="Air", genre="Electronic")
    factories.SongFactory(artist="Zola", genre="Pop")

    artists = artist_service.list_all()

    assert artists[0] == {"name": "Björk", "total_songs": 3, "genres": ["Electronic", "Pop"]}
    # Ties on count fall back to name order
    assert [a["name"] for a in artists[1:]] == ["Air", "Zola"]


@pytest.mark.unit
def test_list_all_empty_library(artist_service):
    assert artist_service.list_all() == []


@pytest.mark.unit
def test_get_by_name_orders_by_year_desc_nulls_last_then_title(artist_service, factories):
    factories.SongFactory(artist="Prince", title="B", year=1984)
    factories.SongFactory(artist="Prince", title="Undated", year=None)
    factories.SongFactory(artist="Prince", title="A", year=1984)
    factories.SongFactory(artist="Prince", title="Later", year=1991)
    factories.SongFactory(artist="Someone Else")

    result = artist_service.get_by_name("Prince")

    assert result["artist"] == "Prince"
    assert result["total_songs"] == 4
    assert [s["title"] for s in result["songs"]] == ["Later", "A", "B", "Undated"]


@pytest.mark.unit
def test_get_by_name_unknown_artist_is_not_found(artist_service, factories):
    factories.SongFactory(artist="Known")
    with pytest.raises(NotFoundError) as excinfo:
        artist_service.get_by_name("Unknown")
    assert excinfo.value.message == "Artist not found"
