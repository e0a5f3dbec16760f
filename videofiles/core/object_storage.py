"""
Object Storage URLs

Builds client facing URLs for files stored in object storage.

Public files are served straight from the bucket, optionally through a CDN
configured as a base URL. Private files are never exposed with a bucket URL:
they go through this instance's object storage proxy, which checks access
before streaming the object.
"""

from typing import Optional
from urllib.parse import urlsplit

from .config import Settings, get_settings
from .paths import OBJECT_STORAGE_PROXY_PATHS


def replace_by_base_url(file_url: Optional[str], base_url: Optional[str]) -> Optional[str]:
    """
    Swap the origin of a bucket URL for a configured base URL.

    Example:
        >>> replace_by_base_url("https://bucket.s3.example.com/videos/a.mp4", "https://cdn.example.com")
        'https://cdn.example.com/videos/a.mp4'
    """
    if not file_url or not base_url:
        return file_url

    parts = urlsplit(file_url)
    url = base_url.rstrip("/") + parts.path
    if parts.query:
        url += "?" + parts.query

    return url


def get_web_video_public_file_url(file_url: Optional[str], settings: Optional[Settings] = None) -> Optional[str]:
    settings = settings or get_settings()
    return replace_by_base_url(file_url, settings.object_storage_videos_base_url)


def get_hls_public_file_url(file_url: Optional[str], settings: Optional[Settings] = None) -> Optional[str]:
    settings = settings or get_settings()
    return replace_by_base_url(file_url, settings.object_storage_streaming_playlists_base_url)


def get_web_video_private_file_url(filename: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return settings.webserver_url + OBJECT_STORAGE_PROXY_PATHS.PRIVATE_WEBSEED + filename


def get_hls_private_file_url(video_uuid: str, filename: str, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    return (
        settings.webserver_url
        + OBJECT_STORAGE_PROXY_PATHS.STREAMING_PLAYLISTS.PRIVATE_HLS
        + video_uuid
        + "/"
        + filename
    )
