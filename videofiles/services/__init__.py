# Services for videofiles
from .info_hash_cache import InfoHashExistenceCache, build_info_hash_cache
from .storage_stats import get_local_video_files_size, get_stats
from .torrent_sidecar import remove_torrent
from .video_file_repository import VideoFileRepository
from .video_file_upsert import (
    MUTABLE_VIDEO_FILE_FIELDS,
    VideoFileConflictError,
    VideoFileOwnerKind,
    upsert_video_file,
)
from .video_file_urls import (
    InvalidOperationError,
    get_file_download_url,
    get_file_static_path,
    get_file_url,
    get_object_storage_url,
    get_remote_torrent_url,
    get_torrent_download_url,
    get_torrent_static_path,
    get_torrent_url,
)

__all__ = [
    "InfoHashExistenceCache",
    "build_info_hash_cache",
    "get_local_video_files_size",
    "get_stats",
    "remove_torrent",
    "VideoFileRepository",
    "MUTABLE_VIDEO_FILE_FIELDS",
    "VideoFileConflictError",
    "VideoFileOwnerKind",
    "upsert_video_file",
    "InvalidOperationError",
    "get_file_download_url",
    "get_file_static_path",
    "get_file_url",
    "get_object_storage_url",
    "get_remote_torrent_url",
    "get_torrent_download_url",
    "get_torrent_static_path",
    "get_torrent_url",
]
