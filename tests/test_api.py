import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from fastapi.testclient import TestClient

from backend.app.main import app

client = TestClient(app)


def _track(track_id, duration=180.0):
    return {"id": str(track_id), "title": f"Track {track_id}", "duration": duration, "artist_id": "a1"}


def _create_playlist(name="Test"):
    resp = client.post("/api/playlists", json={"name": name})
    assert resp.status_code == 200
    data = resp.json()
    assert data["track_count"] == 0
    assert data["tracks"] == []
    return data["id"]


def _add(playlist_id, tracks, to_index):
    return client.post(
        f"/api/playlists/{playlist_id}/tracks",
        json={"tracks": tracks, "to_index": to_index},
    )


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


def test_add_tracks_to_new_playlist():
    playlist_id = _create_playlist()

    resp = _add(playlist_id, [_track(1, 200.0), _track(2, 100.5)], 0)
    assert resp.status_code == 200
    data = resp.json()
    assert [(t["index"], t["track_id"]) for t in data["added"]] == [(0, "1"), (1, "2")]
    assert all(t["id"] for t in data["added"])
    assert data["playlist"]["track_count"] == 2
    assert data["playlist"]["duration"] == 300.5
    assert data["playlist"]["last_updated"] is not None


def test_insert_in_middle_then_fetch_ordered():
    playlist_id = _create_playlist()
    _add(playlist_id, [_track("a"), _track("b"), _track("c")], 0)

    resp = _add(playlist_id, [_track("x")], 1)
    assert resp.status_code == 200

    resp = client.get(f"/api/playlists/{playlist_id}")
    assert resp.status_code == 200
    tracks = resp.json()["tracks"]
    assert [t["track_id"] for t in tracks] == ["a", "x", "b", "c"]
    assert [t["index"] for t in tracks] == [0, 1, 2, 3]


def test_remove_tracks_reindexes():
    playlist_id = _create_playlist()
    _add(playlist_id, [_track(i, 60.0) for i in range(4)], 0)

    resp = client.post(f"/api/playlists/{playlist_id}/remove_tracks", json={"indices": [0, 2]})
    assert resp.status_code == 200
    data = resp.json()
    assert sorted(t["track_id"] for t in data["removed"]) == ["0", "2"]
    assert data["playlist"]["track_count"] == 2
    assert data["playlist"]["duration"] == 120.0

    tracks = client.get(f"/api/playlists/{playlist_id}").json()["tracks"]
    assert [(t["index"], t["track_id"]) for t in tracks] == [(0, "1"), (1, "3")]


def test_unknown_playlist_is_404():
    fake_id = "00000000-0000-0000-0000-000000000000"

    resp = client.get(f"/api/playlists/{fake_id}")
    assert resp.status_code == 404

    resp = _add(fake_id, [_track(1)], 0)
    assert resp.status_code == 404

    resp = client.post(f"/api/playlists/{fake_id}/remove_tracks", json={"indices": [0]})
    assert resp.status_code == 404


def test_invalid_index_is_400_with_message():
    playlist_id = _create_playlist()
    _add(playlist_id, [_track(1), _track(2), _track(3)], 0)

    resp = _add(playlist_id, [_track(9)], 5)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "5 in not valid index in a playlist of 3 tracks."


def test_capacity_is_400_with_message():
    playlist_id = _create_playlist()
    resp = _add(playlist_id, [_track(i, 1.0) for i in range(500)], 0)
    assert resp.status_code == 200

    resp = _add(playlist_id, [_track("one-too-many")], 0)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Playlist cannot have more than 500 tracks"


def test_generic_error_is_500_without_cause(monkeypatch):
    from backend.app import main

    def broken(playlist_id):
        raise RuntimeError("secret internals")

    playlist_id = _create_playlist()
    monkeypatch.setattr(main.STORAGE, "get_playlist_by_id", broken)

    resp = _add(playlist_id, [_track(1)], 0)
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Generic error"}


def test_invalid_payloads_are_422():
    playlist_id = _create_playlist()

    resp = _add(playlist_id, [{"id": "1", "duration": -5}], 0)
    assert resp.status_code == 422

    resp = client.post(f"/api/playlists/{playlist_id}/tracks", json={"tracks": [_track(1)]})
    assert resp.status_code == 422

    resp = client.post(f"/api/playlists/{playlist_id}/remove_tracks", json={"indices": ["x"]})
    assert resp.status_code == 422


def test_save_failure_is_500_without_cause(monkeypatch):
    from backend.app import main

    def broken(playlist):
        raise RuntimeError("disk full")

    playlist_id = _create_playlist()
    monkeypatch.setattr(main.STORAGE, "save_playlist", broken)

    resp = _add(playlist_id, [_track(1)], 0)
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Generic error"}

    resp = client.post(f"/api/playlists/{playlist_id}/remove_tracks", json={"indices": [0]})
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Generic error"}
