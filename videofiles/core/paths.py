"""
Static Paths & Filesystem Locations

URL namespaces under which video files and torrents are served, and the
filesystem locations backing them:
- Webseed (single file videos) and HLS (streaming playlists) namespaces
- Private variants of both, used for private/internal/password videos
- Download namespaces
- Torrent file location on disk
"""

from pathlib import Path
from typing import Optional

from .config import Settings, get_settings


# Served by the static file handlers
class STATIC_PATHS:
    WEBSEED = "/static/webseed/"
    PRIVATE_WEBSEED = "/static/webseed/private/"

    class STREAMING_PLAYLISTS:
        HLS = "/static/streaming-playlists/hls/"
        PRIVATE_HLS = "/static/streaming-playlists/hls/private/"


# Torrents are generated on demand
class LAZY_STATIC_PATHS:
    TORRENTS = "/lazy-static/torrents/"


# Served with a Content-Disposition: attachment header
class STATIC_DOWNLOAD_PATHS:
    TORRENTS = "/download/torrents/"
    VIDEOS = "/download/videos/"
    HLS_VIDEOS = "/download/streaming-playlists/hls/videos/"


# Private object storage files are proxied through this instance
class OBJECT_STORAGE_PROXY_PATHS:
    PRIVATE_WEBSEED = "/object-storage-proxy/webseed/private/"

    class STREAMING_PLAYLISTS:
        PRIVATE_HLS = "/object-storage-proxy/streaming-playlists/hls/private/"


def get_torrents_dir(settings: Optional[Settings] = None) -> Path:
    """
    Get the directory holding torrent files.

    Returns:
        Path: Resolved torrents directory
    """
    settings = settings or get_settings()
    return settings.torrents_dir.resolve()


def get_fs_torrent_file_path(torrent_filename: str, settings: Optional[Settings] = None) -> Path:
    """
    Get the filesystem path of a torrent file.

    Args:
        torrent_filename: Stored torrent filename
        settings: Optional settings override

    Returns:
        Path: Absolute path of the torrent file

    Raises:
        ValueError: If the filename would escape the torrents directory

    Example:
        >>> get_fs_torrent_file_path("3f2a-720.torrent")
        PosixPath('/data/torrents/3f2a-720.torrent')
    """
    torrents_dir = get_torrents_dir(settings)
    path = (torrents_dir / torrent_filename).resolve()

    if path.parent != torrents_dir:
        raise ValueError("Path traversal detected: path escapes torrents directory")

    return path
