"""
SQLAlchemy models for videofiles.

This module exports all database models for convenient importing:

    from videofiles.models import Video, VideoStreamingPlaylist, VideoFile, VideoRedundancy
"""

from .video import Video
from .streaming_playlist import VideoContainer, VideoStreamingPlaylist, get_video, is_streaming_playlist
from .video_file import StreamingPlaylistOwner, VideoFile, VideoFileOwner, VideoOwner
from .redundancy import VideoRedundancy

__all__ = [
    "Video",
    "VideoStreamingPlaylist",
    "VideoContainer",
    "get_video",
    "is_streaming_playlist",
    "VideoFile",
    "VideoFileOwner",
    "VideoOwner",
    "StreamingPlaylistOwner",
    "VideoRedundancy",
]
