"""
VideoFile model for videofiles.

One encoded rendition of a video: a resolution/frame rate pair stored either
as a single downloadable file (owned by a Video) or as the segment-set of a
streaming playlist (owned by a VideoStreamingPlaylist), never both.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, List, Optional, Union

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from videofiles.core.constants import (
    LIVE_FILE_SIZE,
    UNKNOWN_FPS,
    VideoResolution,
    VideoStorage,
)
from videofiles.core.database import Base
from videofiles.core.validators import (
    InvalidVideoFileValue,
    is_video_file_extname_valid,
    is_video_file_info_hash_valid,
    is_video_file_resolution_valid,
    is_video_file_size_valid,
    is_video_fps_valid,
    throw_if_not_valid,
)

from .streaming_playlist import get_video as get_container_video

if TYPE_CHECKING:
    from .redundancy import VideoRedundancy
    from .streaming_playlist import VideoStreamingPlaylist
    from .video import Video


@dataclass(frozen=True)
class VideoOwner:
    """The file is a web video file owned directly by a video."""

    video_id: int


@dataclass(frozen=True)
class StreamingPlaylistOwner:
    """The file is a member of a streaming playlist."""

    playlist_id: int


VideoFileOwner = Union[VideoOwner, StreamingPlaylistOwner]


class VideoFile(Base):
    """
    VideoFile model representing one rendition of a video.

    Local files carry a filename (and torrent filename), remote files carry
    the URLs advertised by their origin instance. The metadata column is
    deferred: load it explicitly with VideoFileRepository.load_with_metadata.
    """

    __tablename__ = "video_files"
    __table_args__ = (
        CheckConstraint(
            "(video_id IS NULL) <> (video_streaming_playlist_id IS NULL)",
            name="ck_video_files_single_owner",
        ),
        Index("ix_video_files_info_hash", "info_hash"),
        Index("uq_video_files_filename", "filename", unique=True),
        Index("uq_video_files_torrent_filename", "torrent_filename", unique=True),
        Index(
            "uq_video_files_video_resolution_fps",
            "video_id", "resolution", "fps",
            unique=True,
            sqlite_where=text("video_id IS NOT NULL"),
            postgresql_where=text("video_id IS NOT NULL"),
        ),
        Index(
            "uq_video_files_playlist_resolution_fps",
            "video_streaming_playlist_id", "resolution", "fps",
            unique=True,
            sqlite_where=text("video_streaming_playlist_id IS NOT NULL"),
            postgresql_where=text("video_streaming_playlist_id IS NOT NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Encoding
    resolution: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Video height, 0 for audio only files"
    )
    fps: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=UNKNOWN_FPS,
        doc="Frame rate, -1 when unknown"
    )
    size: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        doc="File size in bytes, -1 for live files"
    )
    extname: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        doc="Container extension, dot included"
    )
    info_hash: Mapped[Optional[str]] = mapped_column(
        String(40),
        nullable=True,
        doc="BitTorrent info hash"
    )
    file_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata",
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
        deferred=True,
        doc="Technical metadata (ffprobe output)"
    )
    metadata_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)

    # Location. Could be null for remote files
    file_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    # Could be null for live files
    filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    torrent_url: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    torrent_filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    storage: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=VideoStorage.FILE_SYSTEM,
        doc="VideoStorage value"
    )

    # Ownership: exactly one of these is set
    video_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    video_streaming_playlist_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("video_streaming_playlists.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    # Relationships
    video: Mapped[Optional["Video"]] = relationship("Video", back_populates="video_files")
    video_streaming_playlist: Mapped[Optional["VideoStreamingPlaylist"]] = relationship(
        "VideoStreamingPlaylist",
        back_populates="video_files",
    )
    redundancies: Mapped[List["VideoRedundancy"]] = relationship(
        "VideoRedundancy",
        back_populates="video_file",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __init__(self, **kwargs: Any):
        has_video = kwargs.get("video_id") is not None or kwargs.get("video") is not None
        has_playlist = (
            kwargs.get("video_streaming_playlist_id") is not None
            or kwargs.get("video_streaming_playlist") is not None
        )
        if has_video == has_playlist:
            raise InvalidVideoFileValue(
                "owner", "a video file belongs to exactly one video or streaming playlist"
            )

        kwargs.setdefault("fps", UNKNOWN_FPS)
        kwargs.setdefault("storage", VideoStorage.FILE_SYSTEM)
        super().__init__(**kwargs)

    def __repr__(self) -> str:
        return (
            f"<VideoFile(id={self.id!r}, resolution={self.resolution!r}, "
            f"fps={self.fps!r}, owner={self.video_id or self.video_streaming_playlist_id!r})>"
        )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @validates("resolution")
    def _validate_resolution(self, key: str, value: int) -> int:
        return throw_if_not_valid(value, is_video_file_resolution_valid, "resolution")

    @validates("fps")
    def _validate_fps(self, key: str, value: int) -> int:
        return throw_if_not_valid(value, is_video_fps_valid, "fps")

    @validates("size")
    def _validate_size(self, key: str, value: int) -> int:
        return throw_if_not_valid(value, is_video_file_size_valid, "size")

    @validates("extname")
    def _validate_extname(self, key: str, value: str) -> str:
        return throw_if_not_valid(value, is_video_file_extname_valid, "extname")

    @validates("info_hash")
    def _validate_info_hash(self, key: str, value: Optional[str]) -> Optional[str]:
        return throw_if_not_valid(value, is_video_file_info_hash_valid, "info hash")

    @validates("storage")
    def _validate_storage(self, key: str, value: int) -> int:
        if value not in (VideoStorage.FILE_SYSTEM, VideoStorage.OBJECT_STORAGE):
            raise InvalidVideoFileValue("storage", value)
        return value

    # -------------------------------------------------------------------------
    # Ownership
    # -------------------------------------------------------------------------

    @property
    def owner(self) -> VideoFileOwner:
        """
        Tagged owner of this file.

        A candidate built from a relationship (video= or
        video_streaming_playlist=) has no owner id until it is flushed, so
        the id is read from the related object instead.

        Raises:
            InvalidVideoFileValue: If both or neither owners are set, or if
                                   the related owner has not been persisted
        """
        video_id = self.video_id
        playlist_id = self.video_streaming_playlist_id

        if video_id is None and playlist_id is None:
            if self.video is not None:
                video_id = self.video.id
            elif self.video_streaming_playlist is not None:
                playlist_id = self.video_streaming_playlist.id
            else:
                raise InvalidVideoFileValue("owner", (None, None))

            if video_id is None and playlist_id is None:
                raise InvalidVideoFileValue("owner", "owner must be persisted before its files")

        if video_id is not None and playlist_id is None:
            return VideoOwner(video_id)
        if playlist_id is not None and video_id is None:
            return StreamingPlaylistOwner(playlist_id)

        raise InvalidVideoFileValue("owner", (video_id, playlist_id))

    def get_video_or_streaming_playlist(self) -> Union["Video", "VideoStreamingPlaylist"]:
        """Owning container. The matching relationship must already be loaded."""
        if self.video_streaming_playlist_id is not None:
            return self.video_streaming_playlist
        if self.video_id is not None:
            return self.video

        # Transient file built from relationship objects
        return self.video if self.video is not None else self.video_streaming_playlist

    def get_video(self) -> "Video":
        """Owning video, through the playlist for HLS files."""
        return get_container_video(self.get_video_or_streaming_playlist())

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def has_torrent(self) -> bool:
        return bool(self.info_hash and self.torrent_filename)

    def is_audio(self) -> bool:
        return self.resolution == VideoResolution.H_NOVIDEO

    def is_live(self) -> bool:
        return self.size == LIVE_FILE_SIZE

    def is_hls(self) -> bool:
        return self.video_streaming_playlist_id is not None

    def has_same_unique_keys_as(self, other: "VideoFile") -> bool:
        """Whether both files collide on the (owner, resolution, fps) unique key."""
        return (
            self.fps == other.fps
            and self.resolution == other.resolution
            and (
                (self.video_id is not None and self.video_id == other.video_id)
                or (
                    self.video_streaming_playlist_id is not None
                    and self.video_streaming_playlist_id == other.video_streaming_playlist_id
                )
            )
        )
