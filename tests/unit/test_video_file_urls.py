"""
Unit tests for video file URL resolution.

Uses transient Video / VideoStreamingPlaylist / VideoFile objects with
explicit ids, so no database is involved.
"""

import pytest

from videofiles.core.constants import VideoPrivacy, VideoStorage
from videofiles.models import Video, VideoFile, VideoStreamingPlaylist
from videofiles.services.video_file_urls import (
    InvalidOperationError,
    build_remote_video_base_url,
    get_file_download_url,
    get_file_static_path,
    get_file_url,
    get_remote_torrent_url,
    get_torrent_download_url,
    get_torrent_static_path,
    get_torrent_url,
)

VIDEO_UUID = "0b5a4d3c-7e1f-4c6a-9d2b-8f7e6a5b4c3d"


def make_video(privacy=VideoPrivacy.PUBLIC, remote=False, host=None) -> Video:
    return Video(id=1, uuid=VIDEO_UUID, name="video", privacy=privacy, remote=remote, host=host)


def make_playlist(video: Video) -> VideoStreamingPlaylist:
    return VideoStreamingPlaylist(id=5, video_id=video.id, video=video)


def make_web_file(**overrides) -> VideoFile:
    fields = {
        "resolution": 720,
        "fps": 30,
        "size": 1024,
        "extname": ".mp4",
        "filename": "abc-720.mp4",
        "torrent_filename": "abc-720.torrent",
        "video_id": 1,
    }
    fields.update(overrides)
    return VideoFile(**fields)


def make_hls_file(**overrides) -> VideoFile:
    fields = {
        "resolution": 720,
        "fps": 30,
        "size": 1024,
        "extname": ".mp4",
        "filename": "abc-720-fragmented.mp4",
        "torrent_filename": "abc-720-hls.torrent",
        "video_streaming_playlist_id": 5,
    }
    fields.update(overrides)
    return VideoFile(**fields)


class TestFileUrlFilesystem:
    """Tests for files of local videos stored on the filesystem."""

    def test_public_web_video(self, test_settings):
        video = make_video()

        url = get_file_url(make_web_file(), video, test_settings)

        assert url == "https://videos.local.test/static/webseed/abc-720.mp4"

    def test_public_hls(self, test_settings):
        video = make_video()

        url = get_file_url(make_hls_file(), make_playlist(video), test_settings)

        assert url == f"https://videos.local.test/static/streaming-playlists/hls/{VIDEO_UUID}/abc-720-fragmented.mp4"

    @pytest.mark.parametrize(
        "privacy",
        [VideoPrivacy.PRIVATE, VideoPrivacy.INTERNAL, VideoPrivacy.PASSWORD_PROTECTED],
    )
    def test_private_web_video(self, test_settings, privacy):
        video = make_video(privacy=privacy)

        url = get_file_url(make_web_file(), video, test_settings)

        assert url == "https://videos.local.test/static/webseed/private/abc-720.mp4"

    def test_private_hls(self, test_settings):
        video = make_video(privacy=VideoPrivacy.PRIVATE)

        url = get_file_url(make_hls_file(), make_playlist(video), test_settings)

        assert url == (
            "https://videos.local.test/static/streaming-playlists/hls/private/"
            f"{VIDEO_UUID}/abc-720-fragmented.mp4"
        )

    def test_unlisted_uses_public_path(self, test_settings):
        video = make_video(privacy=VideoPrivacy.UNLISTED)

        assert get_file_static_path(make_web_file(), video) == "/static/webseed/abc-720.mp4"

    def test_static_path_through_playlist(self):
        video = make_video()

        path = get_file_static_path(make_hls_file(), make_playlist(video))

        assert path == f"/static/streaming-playlists/hls/{VIDEO_UUID}/abc-720-fragmented.mp4"


class TestFileUrlObjectStorage:
    """Tests for files of local videos stored in object storage."""

    BUCKET_URL = "https://bucket.s3.example.com/videos/abc-720.mp4"
    HLS_BUCKET_URL = "https://bucket.s3.example.com/hls/abc-720-fragmented.mp4"

    def test_public_without_base_url(self, test_settings):
        video_file = make_web_file(storage=VideoStorage.OBJECT_STORAGE, file_url=self.BUCKET_URL)

        assert get_file_url(video_file, make_video(), test_settings) == self.BUCKET_URL

    def test_public_with_base_url(self, cdn_settings):
        video_file = make_web_file(storage=VideoStorage.OBJECT_STORAGE, file_url=self.BUCKET_URL)

        url = get_file_url(video_file, make_video(), cdn_settings)

        assert url == "https://cdn.local.test/videos/videos/abc-720.mp4"

    def test_public_hls_with_base_url(self, cdn_settings):
        video = make_video()
        video_file = make_hls_file(storage=VideoStorage.OBJECT_STORAGE, file_url=self.HLS_BUCKET_URL)

        url = get_file_url(video_file, make_playlist(video), cdn_settings)

        assert url == "https://cdn.local.test/hls/hls/abc-720-fragmented.mp4"

    def test_private_web_video_is_proxied(self, cdn_settings):
        video = make_video(privacy=VideoPrivacy.PRIVATE)
        video_file = make_web_file(storage=VideoStorage.OBJECT_STORAGE, file_url=self.BUCKET_URL)

        url = get_file_url(video_file, video, cdn_settings)

        assert url == "https://videos.local.test/object-storage-proxy/webseed/private/abc-720.mp4"

    def test_private_hls_is_proxied(self, test_settings):
        video = make_video(privacy=VideoPrivacy.INTERNAL)
        video_file = make_hls_file(storage=VideoStorage.OBJECT_STORAGE, file_url=self.HLS_BUCKET_URL)

        url = get_file_url(video_file, make_playlist(video), test_settings)

        assert url == (
            "https://videos.local.test/object-storage-proxy/streaming-playlists/hls/private/"
            f"{VIDEO_UUID}/abc-720-fragmented.mp4"
        )


class TestFileUrlRemote:
    """Tests for files of videos mirrored from another instance."""

    def test_remote_returns_advertised_url(self, test_settings):
        video = make_video(remote=True, host="peer.example.com")
        video_file = make_web_file(file_url="https://peer.example.com/static/webseed/abc-720.mp4")

        assert get_file_url(video_file, video, test_settings) == "https://peer.example.com/static/webseed/abc-720.mp4"

    def test_remote_ignores_storage_and_privacy(self, cdn_settings):
        video = make_video(privacy=VideoPrivacy.PRIVATE, remote=True, host="peer.example.com")
        video_file = make_web_file(storage=VideoStorage.OBJECT_STORAGE, file_url="https://peer.example.com/f.mp4")

        assert get_file_url(video_file, video, cdn_settings) == "https://peer.example.com/f.mp4"

    def test_remote_without_advertised_url(self, test_settings):
        video = make_video(remote=True, host="peer.example.com")

        assert get_file_url(make_web_file(), video, test_settings) is None


class TestDownloadUrl:
    """Tests for download URLs."""

    def test_local_web_video(self, test_settings):
        url = get_file_download_url(make_web_file(), make_video(), test_settings)

        assert url == f"https://videos.local.test/download/videos/{VIDEO_UUID}-720.mp4"

    def test_local_hls_is_fragmented(self, test_settings):
        video = make_video()

        url = get_file_download_url(make_hls_file(), make_playlist(video), test_settings)

        assert url == f"https://videos.local.test/download/streaming-playlists/hls/videos/{VIDEO_UUID}-720-fragmented.mp4"

    def test_remote_uses_declared_host(self, test_settings):
        video = make_video(remote=True, host="peer.example.com")

        url = get_file_download_url(make_web_file(), video, test_settings)

        assert url == f"https://peer.example.com/download/videos/{VIDEO_UUID}-720.mp4"

    def test_build_remote_video_base_url(self, test_settings):
        video = make_video(remote=True, host="peer.example.com")

        assert build_remote_video_base_url(video, "/x", test_settings) == "https://peer.example.com/x"

    def test_remote_without_host(self, test_settings):
        video = make_video(remote=True, host=None)

        with pytest.raises(InvalidOperationError, match="no origin host"):
            get_file_download_url(make_web_file(), video, test_settings)


class TestTorrentUrls:
    """Tests for torrent URLs, always served by this instance."""

    def test_torrent_url(self, test_settings):
        assert get_torrent_url(make_web_file(), test_settings) == (
            "https://videos.local.test/lazy-static/torrents/abc-720.torrent"
        )

    def test_torrent_static_path(self):
        assert get_torrent_static_path(make_web_file()) == "/lazy-static/torrents/abc-720.torrent"

    def test_torrent_download_url(self, test_settings):
        assert get_torrent_download_url(make_web_file(), test_settings) == (
            "https://videos.local.test/download/torrents/abc-720.torrent"
        )

    def test_no_torrent(self, test_settings):
        video_file = make_web_file(torrent_filename=None)

        assert get_torrent_url(video_file, test_settings) is None
        assert get_torrent_static_path(video_file) is None
        assert get_torrent_download_url(video_file, test_settings) is None

    def test_remote_torrent_url(self):
        video = make_video(remote=True, host="peer.example.com")
        video_file = make_web_file(torrent_url="https://peer.example.com/lazy-static/torrents/abc-720.torrent")

        assert get_remote_torrent_url(video_file, video) == "https://peer.example.com/lazy-static/torrents/abc-720.torrent"

    def test_remote_torrent_url_of_owned_video(self):
        with pytest.raises(InvalidOperationError):
            get_remote_torrent_url(make_web_file(), make_video())
