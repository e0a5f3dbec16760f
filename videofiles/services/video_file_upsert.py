"""
Video file upsert for videofiles.

A video file is unique on (owner, resolution, fps), not on its primary key:
a transcoding job re-producing an existing rendition does not know the id of
the row it replaces. upsert_video_file looks the row up by that composite key
and either inserts the candidate or copies the candidate onto the existing
row, keeping its id (and so its redundancies).

Two jobs racing on the same key are settled by the unique indexes: the
second insert fails and is reported as VideoFileConflictError. Roll back and
retry; the retry finds the winner's row and updates it.

Usage:
    try:
        video_file = await upsert_video_file(db, candidate, VideoFileOwnerKind.VIDEO)
        await db.commit()
    except VideoFileConflictError:
        await db.rollback()
        # retry
"""

import enum
import logging

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from videofiles.models.video_file import StreamingPlaylistOwner, VideoFile, VideoOwner
from videofiles.services.video_file_repository import VideoFileRepository

logger = logging.getLogger(__name__)


class VideoFileOwnerKind(str, enum.Enum):
    VIDEO = "video"
    STREAMING_PLAYLIST = "streaming-playlist"


# Columns overwritten when a candidate replaces an existing row.
# The composite key (owner, resolution, fps) and the id are never copied.
MUTABLE_VIDEO_FILE_FIELDS: tuple[str, ...] = (
    "size",
    "extname",
    "info_hash",
    "file_metadata",
    "metadata_url",
    "file_url",
    "filename",
    "torrent_url",
    "torrent_filename",
    "storage",
)


class VideoFileConflictError(Exception):
    """
    Raised when a concurrent writer inserted the same video file first.

    The transaction must be rolled back; retrying the upsert then updates
    the row inserted by the other writer.
    """

    retryable = True

    def __init__(self, video_file: VideoFile, message: str):
        self.resolution = video_file.resolution
        self.fps = video_file.fps
        self.video_id = video_file.video_id
        self.video_streaming_playlist_id = video_file.video_streaming_playlist_id
        super().__init__(message)


def copy_mutable_fields(source: VideoFile, target: VideoFile) -> None:
    for field in MUTABLE_VIDEO_FILE_FIELDS:
        setattr(target, field, getattr(source, field))


def release_owner(video_file: VideoFile) -> None:
    if video_file.video is not None:
        video_file.video = None
    if video_file.video_streaming_playlist is not None:
        video_file.video_streaming_playlist = None


async def upsert_video_file(
    db: AsyncSession,
    video_file: VideoFile,
    mode: VideoFileOwnerKind,
) -> VideoFile:
    """
    Insert a video file, or update the existing one with the same composite key.

    Args:
        db: Session holding the caller's transaction (not committed here)
        video_file: Transient candidate with its owner id, or persisted owner, set
        mode: Which composite key to use, must match the candidate's owner

    Returns:
        VideoFile: The persisted row, the candidate itself on insert or the
                   pre-existing row (same id) on update

    Raises:
        ValueError: If the candidate's owner does not match mode
        VideoFileConflictError: If the unique indexes rejected the write
    """
    repo = VideoFileRepository(db)
    owner = video_file.owner

    # A pending candidate would be inserted by any autoflush during the lookup
    if inspect(video_file).pending:
        db.expunge(video_file)

    if mode is VideoFileOwnerKind.STREAMING_PLAYLIST and isinstance(owner, StreamingPlaylistOwner):
        existing = await repo.load_hls_file(
            playlist_id=owner.playlist_id,
            fps=video_file.fps,
            resolution=video_file.resolution,
        )
    elif mode is VideoFileOwnerKind.VIDEO and isinstance(owner, VideoOwner):
        existing = await repo.load_web_video_file(
            video_id=owner.video_id,
            fps=video_file.fps,
            resolution=video_file.resolution,
        )
    else:
        raise ValueError(f"Video file owned by {owner!r} cannot be upserted as {mode.value}")

    if existing is None:
        db.add(video_file)
        await _flush(db, video_file)
        logger.debug(f"Inserted video file {video_file.id} ({video_file.resolution}p, {video_file.fps} fps)")
        return video_file

    if existing is video_file:
        await _flush(db, video_file)
        return existing

    # The candidate is discarded, its owner relationship must not cascade it into the session
    if inspect(video_file).transient:
        release_owner(video_file)
    copy_mutable_fields(video_file, existing)
    await _flush(db, existing)
    logger.debug(f"Updated video file {existing.id} ({existing.resolution}p, {existing.fps} fps)")
    return existing


async def _flush(db: AsyncSession, video_file: VideoFile) -> None:
    try:
        await db.flush()
    except IntegrityError as e:
        logger.info(
            f"Conflict writing video file {video_file.resolution}p/{video_file.fps} fps "
            f"of video {video_file.video_id} playlist {video_file.video_streaming_playlist_id}"
        )
        raise VideoFileConflictError(video_file, "Video file was written concurrently, retry") from e
