import os

import pytest

from broadcast_core.assets import build_audio_playlist, concat_record, resolve_visuals_asset
from broadcast_core.errors import VisualsResolutionError


class TestResolveVisualsAsset:
    def test_single_file_is_returned(self, media):
        target = media / "visual" / "loop.mp4"
        target.write_bytes(b"x")
        asset = resolve_visuals_asset(str(media / "visual"))
        assert asset.path == str(target)

    def test_hidden_files_and_subdirectories_are_ignored(self, media):
        visual = media / "visual"
        (visual / ".DS_Store").write_bytes(b"")
        (visual / "backup").mkdir()
        (visual / "backup" / "old.png").write_bytes(b"")
        (visual / "bg.png").write_bytes(b"x")
        assert resolve_visuals_asset(str(visual)).path == str(visual / "bg.png")

    def test_empty_directory_fails(self, media):
        with pytest.raises(VisualsResolutionError) as exc:
            resolve_visuals_asset(str(media / "visual"))
        assert exc.value.candidates == []
        assert "No files found" in str(exc.value)

    def test_missing_directory_fails(self, media):
        with pytest.raises(VisualsResolutionError):
            resolve_visuals_asset(str(media / "nope"))

    def test_multiple_files_lists_every_candidate(self, media):
        visual = media / "visual"
        (visual / "a.png").write_bytes(b"a")
        (visual / "b.png").write_bytes(b"b")
        with pytest.raises(VisualsResolutionError) as exc:
            resolve_visuals_asset(str(visual))
        assert exc.value.candidates == [str(visual / "a.png"), str(visual / "b.png")]
        assert "a.png" in str(exc.value)
        assert "b.png" in str(exc.value)

    def test_asset_is_rescanned_each_call(self, media):
        visual = media / "visual"
        (visual / "first.png").write_bytes(b"1")
        assert resolve_visuals_asset(str(visual)).path.endswith("first.png")
        (visual / "first.png").unlink()
        (visual / "second.png").write_bytes(b"2")
        assert resolve_visuals_asset(str(visual)).path.endswith("second.png")


class TestBuildAudioPlaylist:
    def test_records_in_order(self, media):
        audio = media / "audio"
        (audio / "one.mp3").write_bytes(b"")
        (audio / "two.mp3").write_bytes(b"")
        list_file = media / "audio_list.txt"

        playlist = build_audio_playlist(str(audio), str(list_file))

        assert playlist.entries == [str(audio / "one.mp3"), str(audio / "two.mp3")]
        assert list_file.read_text(encoding="utf-8").splitlines() == [
            f"file '{audio / 'one.mp3'}'",
            f"file '{audio / 'two.mp3'}'",
        ]

    def test_only_top_level_mp3_files(self, media):
        audio = media / "audio"
        (audio / "song.mp3").write_bytes(b"")
        (audio / "cover.jpg").write_bytes(b"")
        (audio / ".hidden.mp3").write_bytes(b"")
        (audio / "nested").mkdir()
        (audio / "nested" / "deep.mp3").write_bytes(b"")

        playlist = build_audio_playlist(str(audio), str(media / "list.txt"))

        assert playlist.entries == [str(audio / "song.mp3")]

    def test_entries_are_absolute(self, media, monkeypatch):
        (media / "audio" / "song.mp3").write_bytes(b"")
        monkeypatch.chdir(media)
        playlist = build_audio_playlist("audio", str(media / "list.txt"))
        assert all(os.path.isabs(p) for p in playlist.entries)

    def test_empty_directory_gives_empty_list_file(self, media):
        list_file = media / "audio_list.txt"
        playlist = build_audio_playlist(str(media / "audio"), str(list_file))
        assert len(playlist) == 0
        assert list_file.exists()
        assert list_file.read_text(encoding="utf-8") == ""

    def test_stale_list_is_replaced(self, media):
        list_file = media / "audio_list.txt"
        list_file.write_text("file '/gone/old.mp3'\n", encoding="utf-8")
        (media / "audio" / "new.mp3").write_bytes(b"")

        build_audio_playlist(str(media / "audio"), str(list_file))

        content = list_file.read_text(encoding="utf-8")
        assert "old.mp3" not in content
        assert "new.mp3" in content


def test_concat_record_escapes_single_quotes():
    assert concat_record("/music/it's.mp3") == "file '/music/it'\\''s.mp3'"
