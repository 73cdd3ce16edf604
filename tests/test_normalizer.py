"""Tests for resolver output normalization"""

import json

import pytest

from melody_fetcher.core.normalizer import normalize_metadata, normalize_search_results
from melody_fetcher.exceptions import MalformedOutputError


class TestNormalizeMetadata:
    def test_maps_known_fields_and_leaves_rest_unset(self):
        meta = normalize_metadata('{"title":"X","artist":"Y","duration":120}')
        assert meta.song_name == "X"
        assert meta.artist == "Y"
        assert meta.duration == 120
        assert meta.album is None
        assert meta.cover_url is None
        assert meta.public_time is None
        assert meta.is_trial is None
        assert meta.resource_type is None
        assert meta.audios is None
        assert meta.source is None
        assert meta.resource_forbidden is None
        assert meta.from_music_platform is None

    def test_renames_snake_case_fields(self):
        payload = {
            "title": "Song",
            "album": "Album",
            "cover_url": "https://img/1.jpg",
            "public_time": "2020-01-01",
            "is_trial": False,
            "resource_type": "audio",
            "audios": [{"url": "https://a/1.mp3", "bitrate": 320}],
            "source": "netease",
            "resource_forbidden": True,
            "from_music_platform": "qq",
            "unexpected": "ignored",
        }
        meta = normalize_metadata(json.dumps(payload))
        assert meta.cover_url == "https://img/1.jpg"
        assert meta.public_time == "2020-01-01"
        assert meta.is_trial is False
        assert meta.resource_type == "audio"
        assert meta.audios == [{"url": "https://a/1.mp3", "bitrate": 320}]
        assert meta.source == "netease"
        assert meta.resource_forbidden is True
        assert meta.from_music_platform == "qq"
        assert not hasattr(meta, "unexpected")

    def test_keeps_loosely_typed_fields_as_printed(self):
        meta = normalize_metadata(
            '{"title":"X","duration":"3:45","is_trial":"no","audios":{"a":1}}'
        )
        assert meta.song_name == "X"
        assert meta.duration == "3:45"
        assert meta.is_trial == "no"
        assert meta.audios == {"a": 1}

    @pytest.mark.parametrize("output", ["", "not json", "{", "[1, 2]", '"text"'])
    def test_rejects_non_object_output(self, output):
        with pytest.raises(MalformedOutputError) as exc_info:
            normalize_metadata(output)
        assert exc_info.value.output == output


class TestNormalizeSearchResults:
    def test_preserves_order_and_count(self):
        output = json.dumps(
            [
                {"Name": "B", "Score": 10, "Source": "qq"},
                {"Name": "A", "Score": 99, "Source": "netease"},
            ]
        )
        results = normalize_search_results(output)
        assert [r.song_name for r in results] == ["B", "A"]
        assert [r.score for r in results] == [10, 99]

    def test_maps_pascal_case_fields(self):
        output = json.dumps(
            [
                {
                    "Name": "A",
                    "Artist": "B",
                    "Album": "C",
                    "Duration": 201,
                    "Url": "https://music/1",
                    "ResourceForbidden": False,
                    "Source": "s1",
                    "FromMusicPlatform": "p1",
                    "Score": 0.8,
                    "Extra": 1,
                }
            ]
        )
        (result,) = normalize_search_results(output)
        assert result.song_name == "A"
        assert result.artist == "B"
        assert result.album == "C"
        assert result.duration == 201
        assert result.url == "https://music/1"
        assert result.resource_forbidden is False
        assert result.source == "s1"
        assert result.from_music_platform == "p1"
        assert result.score == 0.8

    def test_keeps_loosely_typed_fields_as_printed(self):
        results = normalize_search_results(
            '[{"Name":"A","Duration":"3:45","Score":"high"},{"Name":"B"}]'
        )
        assert [r.song_name for r in results] == ["A", "B"]
        assert results[0].duration == "3:45"
        assert results[0].score == "high"

    def test_empty_array(self):
        assert normalize_search_results("[]") == []

    @pytest.mark.parametrize("output", ["", "oops", '{"Name": "A"}', "[1]"])
    def test_rejects_malformed_output(self, output):
        with pytest.raises(MalformedOutputError):
            normalize_search_results(output)
