"""
Tests for the Spotify track-id mapping service.
"""

import json

import pytest
import requests
from unittest.mock import MagicMock

from config import SpotifySettings
from services.spotify_mapping import SpotifyCatalogMapper, SpotifyClient


class TestSpotifyClient:

    def setup_method(self):
        self.session = MagicMock()
        self.client = SpotifyClient("id", "secret", SpotifySettings(), session=self.session)

    def test_authenticate_uses_client_credentials(self):
        self.session.post.return_value.json.return_value = {"access_token": "tok"}

        assert self.client.authenticate() == "tok"

        kwargs = self.session.post.call_args.kwargs
        assert kwargs["data"] == {"grant_type": "client_credentials"}
        assert kwargs["headers"]["Authorization"] == "Basic aWQ6c2VjcmV0"

    def test_search_track_returns_first_id(self):
        self.session.post.return_value.json.return_value = {"access_token": "tok"}
        self.session.get.return_value.json.return_value = {
            "tracks": {"items": [{"id": "track-1"}, {"id": "track-2"}]}
        }

        assert self.client.search_track("Queen", "Bohemian Rhapsody") == "track-1"

        kwargs = self.session.get.call_args.kwargs
        assert kwargs["params"]["q"] == "track:Bohemian Rhapsody artist:Queen"
        assert kwargs["params"]["limit"] == 1
        assert kwargs["headers"]["Authorization"] == "Bearer tok"

    def test_search_track_not_found(self):
        self.session.post.return_value.json.return_value = {"access_token": "tok"}
        self.session.get.return_value.json.return_value = {"tracks": {"items": []}}

        assert self.client.search_track("Nobody", "Nothing") is None


class TestSpotifyCatalogMapper:

    def setup_method(self):
        self.client = MagicMock()
        self.sleep = MagicMock()
        self.mapper = SpotifyCatalogMapper(self.client, delay=0.1, sleep=self.sleep)

    def test_map_file_updates_records(self, tmp_path):
        path = tmp_path / "songs-easy.json"
        path.write_text(json.dumps([
            {"artist": "Queen", "track": "Bohemian Rhapsody", "year": 1975},
            {"artist": "Nobody", "track": "Nothing", "year": 2001},
        ]), encoding="utf-8")
        self.client.search_track.side_effect = ["track-1", None]

        report = self.mapper.map_file(path)

        assert (report.found, report.not_found, report.total) == (1, 1, 2)
        songs = json.loads(path.read_text(encoding="utf-8"))
        assert songs[0]["spotify_track_id"] == "track-1"
        assert "spotify_track_id" not in songs[1]
        assert self.sleep.call_count == 2

    def test_failed_write_keeps_original_file(self, tmp_path):
        path = tmp_path / "songs-easy.json"
        original = json.dumps([
            {"artist": "Queen", "track": "Bohemian Rhapsody", "year": 1975},
            {"artist": "ABBA", "track": "Waterloo", "year": 1974},
        ])
        path.write_text(original, encoding="utf-8")
        # Second id cannot be serialized, so json.dump fails partway through
        self.client.search_track.side_effect = ["track-1", object()]

        with pytest.raises(TypeError):
            self.mapper.map_file(path)

        assert path.read_text(encoding="utf-8") == original
        assert list(tmp_path.iterdir()) == [path]

    def test_request_errors_count_as_not_found(self):
        songs = [{"artist": "Queen", "track": "Bohemian Rhapsody", "year": 1975}]
        self.client.search_track.side_effect = requests.HTTPError("429")

        assert self.mapper.map_songs(songs) == (0, 1)

    def test_progress_callback(self):
        songs = [{"artist": "Queen", "track": "Bohemian Rhapsody", "year": 1975}]
        self.client.search_track.return_value = "track-1"
        progress = MagicMock()

        self.mapper.map_songs(songs, on_progress=progress)

        progress.assert_called_once_with(0, songs[0], "track-1")
