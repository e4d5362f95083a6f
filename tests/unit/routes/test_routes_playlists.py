import uuid

import pytest


@pytest.mark.unit
@pytest.mark.parametrize("path", ['/api/v1/playlists', '/api/v1/playlists/new', '/api/v1/playlist/new'])
def test_create_playlist_paths(client, path):
    r = client.post(path, json={"name": "Chill", "tags": ["calm"]})
    assert r.status_code == 201
    body = r.get_json()
    assert body["name"] == "Chill"
    assert body["tags"] == ["calm"]
    assert body["total_songs"] == 0


@pytest.mark.unit
def test_create_playlist_validation(client):
    r = client.post('/api/v1/playlists', json={"name": "", "tags": ["t"] * 51})
    assert r.status_code == 400
    error = r.get_json()["error"]
    assert "name: " in error
    assert "tags: " in error


@pytest.mark.unit
def test_list_playlists_include_songs_flag(client, factories):
    entry = factories.PlaylistSongFactory()

    plain = client.get('/api/v1/playlists').get_json()
    assert "songs" not in plain[0]
    assert plain[0]["total_songs"] == 1

    detailed = client.get('/api/v1/playlists?include_songs=true').get_json()
    assert detailed[0]["songs"][0]["id"] == entry.song.id

    alias = client.get('/api/v1/playlist?include_songs=1').get_json()
    assert alias == detailed


@pytest.mark.unit
def test_get_update_delete_playlist(client, factories):
    playlist = factories.PlaylistFactory()

    r = client.get(f'/api/v1/playlists/{playlist.id}')
    assert r.status_code == 200
    assert r.get_json()["songs"] == []

    r = client.put(f'/api/v1/playlists/{playlist.id}', json={"description": "Late nights"})
    assert r.status_code == 200
    assert r.get_json()["description"] == "Late nights"

    r = client.delete(f'/api/v1/playlists/{playlist.id}')
    assert r.get_json() == {"message": "Playlist deleted successfully"}
    assert client.delete(f'/api/v1/playlists/{playlist.id}').status_code == 404


@pytest.mark.unit
def test_add_song_then_duplicate_conflicts(client, factories):
    playlist = factories.PlaylistFactory()
    song = factories.SongFactory()

    r = client.post(f'/api/v1/playlists/{playlist.id}/songs', json={"song_id": song.id})
    assert r.status_code == 200
    assert [s["id"] for s in r.get_json()["songs"]] == [song.id]

    r = client.post(f'/api/v1/playlists/{playlist.id}/songs', json={"song_id": song.id})
    assert r.status_code == 409
    assert r.get_json() == {"success": False, "error": "Song is already in the playlist"}


@pytest.mark.unit
def test_add_song_validates_body(client, factories):
    playlist = factories.PlaylistFactory()

    r = client.post(f'/api/v1/playlists/{playlist.id}/songs', json={"song_id": "nope"})
    assert r.status_code == 400
    assert r.get_json()["error"].startswith("song_id: ")

    r = client.post(
        f'/api/v1/playlists/{playlist.id}/songs',
        json={"song_id": str(uuid.uuid4()), "position": -1},
    )
    assert r.status_code == 400


@pytest.mark.unit
def test_add_unknown_song_is_not_found(client, factories):
    playlist = factories.PlaylistFactory()

    r = client.post(f'/api/v1/playlists/{playlist.id}/songs', json={"song_id": str(uuid.uuid4())})
    assert r.status_code == 404
    assert r.get_json()["error"] == "Song not found"


@pytest.mark.unit
def test_remove_song_from_playlist(client, factories):
    entry = factories.PlaylistSongFactory()
    url = f'/api/v1/playlists/{entry.playlist.id}/songs/{entry.song.id}'

    r = client.delete(url)
    assert r.status_code == 200
    assert r.get_json() == {"message": "Song removed from playlist successfully"}
    # Second removal is still a success
    assert client.delete(url).status_code == 200


@pytest.mark.unit
def test_reorder_playlist_songs(client, factories):
    playlist = factories.PlaylistFactory()
    s1 = factories.PlaylistSongFactory(playlist=playlist, position=0).song
    s2 = factories.PlaylistSongFactory(playlist=playlist, position=1).song

    r = client.put(
        f'/api/v1/playlists/{playlist.id}/songs/reorder',
        json={"song_orders": [{"song_id": s1.id, "position": 2}, {"song_id": s2.id, "position": 1}]},
    )
    assert r.status_code == 200
    assert [s["id"] for s in r.get_json()["songs"]] == [s2.id, s1.id]


@pytest.mark.unit
def test_reorder_with_stranger_is_not_found(client, factories):
    playlist = factories.PlaylistFactory()
    factories.PlaylistSongFactory(playlist=playlist, position=0)
    stranger = str(uuid.uuid4())

    r = client.put(
        f'/api/v1/playlists/{playlist.id}/songs/reorder',
        json={"song_orders": [{"song_id": stranger, "position": 0}]},
    )
    assert r.status_code == 404
    assert r.get_json()["error"] == f"Song {stranger} in playlist not found"


@pytest.mark.unit
def test_reorder_requires_orders(client, factories):
    playlist = factories.PlaylistFactory()

    r = client.put(f'/api/v1/playlists/{playlist.id}/songs/reorder', json={"song_orders": []})
    assert r.status_code == 400
    assert r.get_json()["error"].startswith("song_orders: ")


@pytest.mark.unit
def test_add_song_with_uppercase_ids(client, factories):
    playlist = factories.PlaylistFactory()
    song = factories.SongFactory()

    r = client.post(
        f'/api/v1/playlists/{playlist.id.upper()}/songs',
        json={"song_id": song.id.upper(), "position": 2.0},
    )

    assert r.status_code == 200
    assert [s["id"] for s in r.get_json()["songs"]] == [song.id]
