"""
Video model for videofiles.

The single file container of video files. A video is either owned by this
instance or mirrored from a remote one.
"""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional
import uuid

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from videofiles.core.constants import VideoPrivacy, is_video_in_private_directory
from videofiles.core.database import Base

if TYPE_CHECKING:
    from .streaming_playlist import VideoStreamingPlaylist
    from .video_file import VideoFile


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Video(Base):
    """
    Video model, owner of web video files and of streaming playlists.

    Only the attributes needed to locate its files are mapped: ownership,
    privacy, the stable uuid and, for remote videos, the origin host.
    """

    __tablename__ = "videos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[str] = mapped_column(
        String(36),
        unique=True,
        nullable=False,
        default=generate_uuid,
        doc="Stable external identifier"
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    privacy: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=VideoPrivacy.PUBLIC,
        doc="VideoPrivacy value"
    )
    remote: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        doc="True when mirrored from another instance"
    )
    host: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Declared host of the origin instance (remote videos only)"
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    video_files: Mapped[List["VideoFile"]] = relationship(
        "VideoFile",
        back_populates="video",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    streaming_playlists: Mapped[List["VideoStreamingPlaylist"]] = relationship(
        "VideoStreamingPlaylist",
        back_populates="video",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Video(id={self.id!r}, uuid={self.uuid!r}, remote={self.remote!r})>"

    def is_owned(self) -> bool:
        return not self.remote

    def has_private_static_path(self) -> bool:
        """Whether files of this video live under the private static roots."""
        return is_video_in_private_directory(self.privacy)
