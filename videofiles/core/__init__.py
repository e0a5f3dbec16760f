# Core modules for videofiles
from .config import Settings, get_settings
from .constants import (
    VideoPrivacy,
    VideoResolution,
    VideoStorage,
    VideoStreamingPlaylistType,
    is_video_in_private_directory,
)
from .database import (
    AsyncSessionLocal,
    Base,
    async_engine,
    create_all_tables,
    drop_all_tables,
    get_async_session,
)
from .validators import (
    ALLOWED_VIDEO_EXTENSIONS,
    InvalidVideoFileValue,
    is_video_file_extname_valid,
    is_video_file_info_hash_valid,
    is_video_file_resolution_valid,
    is_video_file_size_valid,
    is_video_fps_valid,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Constants
    "VideoPrivacy",
    "VideoResolution",
    "VideoStorage",
    "VideoStreamingPlaylistType",
    "is_video_in_private_directory",
    # Database
    "AsyncSessionLocal",
    "Base",
    "async_engine",
    "create_all_tables",
    "drop_all_tables",
    "get_async_session",
    # Validation
    "ALLOWED_VIDEO_EXTENSIONS",
    "InvalidVideoFileValue",
    "is_video_file_extname_valid",
    "is_video_file_info_hash_valid",
    "is_video_file_resolution_valid",
    "is_video_file_size_valid",
    "is_video_fps_valid",
]
