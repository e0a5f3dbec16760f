"""
VideoStreamingPlaylist model for videofiles.

The segment-set container of video files (HLS).
"""

from typing import TYPE_CHECKING, List, Optional, Union

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from videofiles.core.constants import VideoStreamingPlaylistType
from videofiles.core.database import Base

from .video import Video

if TYPE_CHECKING:
    from .video_file import VideoFile


class VideoStreamingPlaylist(Base):
    """Streaming playlist of a video. Its files are served as HLS segments."""

    __tablename__ = "video_streaming_playlists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    video_id: Mapped[int] = mapped_column(
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Foreign key to the owning video"
    )
    type: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=VideoStreamingPlaylistType.HLS,
    )
    playlist_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)

    # Relationships
    video: Mapped["Video"] = relationship("Video", back_populates="streaming_playlists")
    video_files: Mapped[List["VideoFile"]] = relationship(
        "VideoFile",
        back_populates="video_streaming_playlist",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<VideoStreamingPlaylist(id={self.id!r}, video_id={self.video_id!r})>"


VideoContainer = Union[Video, VideoStreamingPlaylist]


def is_streaming_playlist(container: VideoContainer) -> bool:
    return isinstance(container, VideoStreamingPlaylist)


def get_video(container: VideoContainer) -> Video:
    """Return the video owning a container (the video itself or the playlist's video)."""
    if isinstance(container, VideoStreamingPlaylist):
        return container.video

    return container
