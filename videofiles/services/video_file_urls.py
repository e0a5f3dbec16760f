"""
Video file URL resolution for videofiles.

Maps a video file and its container to the URLs and static paths clients use
to fetch it. The container may be the owning Video or the owning
VideoStreamingPlaylist; both resolve through the video for ownership,
privacy and uuid.

Resolution rules:
- Remote videos: the URL advertised by the origin instance, verbatim
- Local videos in object storage: bucket URL (public) or proxied URL (private)
- Local videos on the filesystem: this instance's static paths
- Torrents: always served by this instance, whoever owns the video

Records are validated on assignment, so nothing here re-validates.

Usage:
    url = get_file_url(video_file, playlist)
    torrent_url = get_torrent_url(video_file)  # None without torrent
"""

import posixpath
from typing import Optional

from videofiles.core.config import Settings, get_settings
from videofiles.core.constants import VideoStorage, is_video_in_private_directory
from videofiles.core.object_storage import (
    get_hls_private_file_url,
    get_hls_public_file_url,
    get_web_video_private_file_url,
    get_web_video_public_file_url,
)
from videofiles.core.paths import LAZY_STATIC_PATHS, STATIC_DOWNLOAD_PATHS, STATIC_PATHS
from videofiles.models.streaming_playlist import VideoContainer, get_video
from videofiles.models.video import Video
from videofiles.models.video_file import VideoFile


class InvalidOperationError(Exception):
    """Raised when an accessor is used on a video it does not apply to."""

    pass


# -----------------------------------------------------------------------------
# File URLs
# -----------------------------------------------------------------------------


def get_file_url(
    video_file: VideoFile,
    container: VideoContainer,
    settings: Optional[Settings] = None,
) -> Optional[str]:
    """
    Get the URL a client should use to fetch a video file.

    Args:
        video_file: The video file to locate
        container: Its owning Video or VideoStreamingPlaylist
        settings: Optional settings override

    Returns:
        The fetch URL. For remote videos this is the stored file_url, which
        may be None if the origin did not advertise one.
    """
    settings = settings or get_settings()
    video = get_video(container)

    if not video.is_owned():
        return video_file.file_url

    if video_file.storage == VideoStorage.OBJECT_STORAGE:
        return get_object_storage_url(video_file, video, settings)

    return settings.webserver_url + get_file_static_path(video_file, video)


def get_object_storage_url(
    video_file: VideoFile,
    container: VideoContainer,
    settings: Optional[Settings] = None,
) -> Optional[str]:
    """
    Get the object storage URL of a local video file.

    Private videos go through the object storage proxy of this instance so
    access can be checked. Public videos are served from the bucket, behind
    the configured base URL if any.
    """
    video = get_video(container)

    if video.has_private_static_path():
        if video_file.is_hls():
            return get_hls_private_file_url(video.uuid, video_file.filename, settings)

        return get_web_video_private_file_url(video_file.filename, settings)

    if video_file.is_hls():
        return get_hls_public_file_url(video_file.file_url, settings)

    return get_web_video_public_file_url(video_file.file_url, settings)


def get_file_static_path(video_file: VideoFile, container: VideoContainer) -> str:
    """
    Get the static path of a filesystem stored video file.

    Example:
        >>> get_file_static_path(hls_file, video)
        '/static/streaming-playlists/hls/<video uuid>/<filename>'
    """
    video = get_video(container)

    if video_file.is_hls():
        return _get_hls_file_static_path(video_file, video)

    return _get_web_video_file_static_path(video_file, video)


def _get_web_video_file_static_path(video_file: VideoFile, video: Video) -> str:
    if is_video_in_private_directory(video.privacy):
        return posixpath.join(STATIC_PATHS.PRIVATE_WEBSEED, video_file.filename)

    return posixpath.join(STATIC_PATHS.WEBSEED, video_file.filename)


def _get_hls_file_static_path(video_file: VideoFile, video: Video) -> str:
    if is_video_in_private_directory(video.privacy):
        return posixpath.join(STATIC_PATHS.STREAMING_PLAYLISTS.PRIVATE_HLS, video.uuid, video_file.filename)

    return posixpath.join(STATIC_PATHS.STREAMING_PLAYLISTS.HLS, video.uuid, video_file.filename)


# -----------------------------------------------------------------------------
# Download URLs
# -----------------------------------------------------------------------------


def get_file_download_url(
    video_file: VideoFile,
    container: VideoContainer,
    settings: Optional[Settings] = None,
) -> str:
    """
    Get the download URL of a video file.

    The download filename is <uuid>-<resolution><extname>, with a
    "-fragmented" qualifier for HLS files.

    For remote videos the URL is built from the host the video declares.
    This is a guess: the origin instance may use a different layout, and the
    result is not guaranteed to resolve.

    Raises:
        InvalidOperationError: If a remote video does not declare its host
    """
    settings = settings or get_settings()
    video = get_video(container)

    if video_file.is_hls():
        path = posixpath.join(
            STATIC_DOWNLOAD_PATHS.HLS_VIDEOS,
            f"{video.uuid}-{video_file.resolution}-fragmented{video_file.extname}",
        )
    else:
        path = posixpath.join(
            STATIC_DOWNLOAD_PATHS.VIDEOS,
            f"{video.uuid}-{video_file.resolution}{video_file.extname}",
        )

    if video.is_owned():
        return settings.webserver_url + path

    # TODO: use the download URL advertised by the origin once federation carries it
    return build_remote_video_base_url(video, path, settings)


def build_remote_video_base_url(video: Video, path: str, settings: Optional[Settings] = None) -> str:
    """
    Build a URL on the origin instance of a remote video.

    Raises:
        InvalidOperationError: If the video does not declare its origin host
    """
    if not video.host:
        raise InvalidOperationError(f"Remote video {video.uuid} has no origin host")

    settings = settings or get_settings()
    return f"{settings.remote_scheme}://{video.host}{path}"


# -----------------------------------------------------------------------------
# Torrents
# -----------------------------------------------------------------------------


def get_remote_torrent_url(video_file: VideoFile, container: VideoContainer) -> Optional[str]:
    """
    Get the torrent URL advertised by the origin of a remote video.

    Raises:
        InvalidOperationError: If the video is owned by this instance
    """
    video = get_video(container)
    if video.is_owned():
        raise InvalidOperationError(f"Video {video.uuid} is not a remote video")

    return video_file.torrent_url


# Torrent requests are proxied, so every torrent URL is local
def get_torrent_url(video_file: VideoFile, settings: Optional[Settings] = None) -> Optional[str]:
    if not video_file.torrent_filename:
        return None

    settings = settings or get_settings()
    return settings.webserver_url + get_torrent_static_path(video_file)


def get_torrent_static_path(video_file: VideoFile) -> Optional[str]:
    if not video_file.torrent_filename:
        return None

    return posixpath.join(LAZY_STATIC_PATHS.TORRENTS, video_file.torrent_filename)


def get_torrent_download_url(video_file: VideoFile, settings: Optional[Settings] = None) -> Optional[str]:
    if not video_file.torrent_filename:
        return None

    settings = settings or get_settings()
    return settings.webserver_url + posixpath.join(STATIC_DOWNLOAD_PATHS.TORRENTS, video_file.torrent_filename)
