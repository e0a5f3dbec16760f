"""
Video file persistence for videofiles.

Every method runs inside the session given to the repository, so callers
control the transaction. Nothing here commits.

Usage:
    repo = VideoFileRepository(db)
    video_file = await repo.load_with_video_or_playlist(file_id, video_uuid)
"""

import logging
import uuid
from typing import Optional, Sequence, Union

from sqlalchemy import and_, delete, literal, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload, undefer

from videofiles.core.constants import VideoStorage
from videofiles.models.streaming_playlist import VideoStreamingPlaylist
from videofiles.models.video import Video
from videofiles.models.video_file import VideoFile
from videofiles.services.torrent_sidecar import remove_torrent

logger = logging.getLogger(__name__)


def _is_uuid(value: Union[int, str]) -> bool:
    try:
        uuid.UUID(str(value))
        return True
    except (ValueError, TypeError):
        return False


def _video_filter(video_model, video_id_or_uuid: Union[int, str]):
    if _is_uuid(video_id_or_uuid):
        return video_model.uuid == str(video_id_or_uuid)

    return video_model.id == int(video_id_or_uuid)


def _with_video_or_playlist():
    """Loader options attaching the owning video or playlist (with its video)."""
    return (
        selectinload(VideoFile.video),
        selectinload(VideoFile.video_streaming_playlist).selectinload(VideoStreamingPlaylist.video),
    )


class VideoFileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    # -------------------------------------------------------------------------
    # Point lookups
    # -------------------------------------------------------------------------

    async def load(self, video_file_id: int) -> Optional[VideoFile]:
        return await self.db.get(VideoFile, video_file_id)

    async def load_with_metadata(self, video_file_id: int) -> Optional[VideoFile]:
        """Load a video file including its deferred metadata column."""
        q = select(VideoFile).where(VideoFile.id == video_file_id).options(undefer(VideoFile.file_metadata))
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def load_with_video(self, video_file_id: int) -> Optional[VideoFile]:
        """Load a web video file together with its video. HLS files are not returned."""
        q = (
            select(VideoFile)
            .join(VideoFile.video)
            .where(VideoFile.id == video_file_id)
            .options(selectinload(VideoFile.video))
        )
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def load_by_filename(self, filename: str) -> Optional[VideoFile]:
        res = await self.db.execute(select(VideoFile).where(VideoFile.filename == filename))
        return res.scalar_one_or_none()

    async def load_with_video_by_filename(self, filename: str) -> Optional[VideoFile]:
        q = select(VideoFile).where(VideoFile.filename == filename).options(*_with_video_or_playlist())
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def load_with_video_or_playlist_by_torrent_filename(self, filename: str) -> Optional[VideoFile]:
        q = select(VideoFile).where(VideoFile.torrent_filename == filename).options(*_with_video_or_playlist())
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def load_with_video_or_playlist(
        self,
        video_file_id: int,
        video_id_or_uuid: Union[int, str],
    ) -> Optional[VideoFile]:
        """
        Load a video file if it belongs to the given video.

        Args:
            video_file_id: Video file primary key
            video_id_or_uuid: Video primary key or uuid

        Returns:
            The video file with its video or playlist loaded, or None if it
            does not exist or belongs to another video
        """
        hls_video = aliased(Video)
        q = (
            select(VideoFile)
            .outerjoin(Video, and_(Video.id == VideoFile.video_id, _video_filter(Video, video_id_or_uuid)))
            .outerjoin(VideoStreamingPlaylist, VideoStreamingPlaylist.id == VideoFile.video_streaming_playlist_id)
            .outerjoin(hls_video, and_(hls_video.id == VideoStreamingPlaylist.video_id, _video_filter(hls_video, video_id_or_uuid)))
            .where(
                VideoFile.id == video_file_id,
                or_(Video.id.is_not(None), hls_video.id.is_not(None)),
            )
            .options(*_with_video_or_playlist())
        )
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def does_video_exist_for_video_file(
        self,
        video_file_id: int,
        video_id_or_uuid: Union[int, str],
    ) -> bool:
        video_file = await self.load_with_video_or_playlist(video_file_id, video_id_or_uuid)
        return video_file is not None

    # -------------------------------------------------------------------------
    # Composite key lookups
    # -------------------------------------------------------------------------

    async def load_web_video_file(self, video_id: int, fps: int, resolution: int) -> Optional[VideoFile]:
        q = select(VideoFile).where(
            VideoFile.video_id == video_id,
            VideoFile.fps == fps,
            VideoFile.resolution == resolution,
        )
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def load_hls_file(self, playlist_id: int, fps: int, resolution: int) -> Optional[VideoFile]:
        q = select(VideoFile).where(
            VideoFile.video_streaming_playlist_id == playlist_id,
            VideoFile.fps == fps,
            VideoFile.resolution == resolution,
        )
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    # -------------------------------------------------------------------------
    # Existence checks
    # -------------------------------------------------------------------------

    async def _exists(self, q) -> bool:
        res = await self.db.execute(q.limit(1))
        return res.first() is not None

    async def info_hash_exists(self, info_hash: str) -> bool:
        return await self._exists(select(literal(1)).select_from(VideoFile).where(VideoFile.info_hash == info_hash))

    async def does_owned_torrent_file_exist(self, filename: str) -> bool:
        """Whether a torrent filename belongs to a file of a local video, web or HLS."""
        web_video = aliased(Video)
        hls_video = aliased(Video)
        q = (
            select(literal(1))
            .select_from(VideoFile)
            .outerjoin(web_video, and_(web_video.id == VideoFile.video_id, web_video.remote.is_(False)))
            .outerjoin(VideoStreamingPlaylist, VideoStreamingPlaylist.id == VideoFile.video_streaming_playlist_id)
            .outerjoin(hls_video, and_(hls_video.id == VideoStreamingPlaylist.video_id, hls_video.remote.is_(False)))
            .where(
                VideoFile.torrent_filename == filename,
                or_(web_video.id.is_not(None), hls_video.id.is_not(None)),
            )
        )
        return await self._exists(q)

    async def does_owned_web_video_file_exist(self, filename: str) -> bool:
        """Whether a filename belongs to a filesystem stored web video file of a local video."""
        q = (
            select(literal(1))
            .select_from(VideoFile)
            .join(Video, and_(Video.id == VideoFile.video_id, Video.remote.is_(False)))
            .where(
                VideoFile.filename == filename,
                VideoFile.storage == VideoStorage.FILE_SYSTEM,
            )
        )
        return await self._exists(q)

    # -------------------------------------------------------------------------
    # Listing & removal
    # -------------------------------------------------------------------------

    async def list_by_streaming_playlist(self, playlist_id: int) -> Sequence[VideoFile]:
        """List the web video files of the video owning a streaming playlist."""
        q = (
            select(VideoFile)
            .join(Video, Video.id == VideoFile.video_id)
            .join(VideoStreamingPlaylist, VideoStreamingPlaylist.video_id == Video.id)
            .where(VideoStreamingPlaylist.id == playlist_id)
            .order_by(VideoFile.resolution.desc())
        )
        res = await self.db.execute(q)
        return res.scalars().all()

    async def list_hls_files(self, playlist_id: int) -> Sequence[VideoFile]:
        q = (
            select(VideoFile)
            .where(VideoFile.video_streaming_playlist_id == playlist_id)
            .order_by(VideoFile.resolution.desc())
        )
        res = await self.db.execute(q)
        return res.scalars().all()

    async def remove_hls_files_of_playlist(self, playlist_id: int) -> int:
        """
        Bulk delete every file of a streaming playlist.

        Redundancies of the deleted files go with them through the foreign
        key cascade. Torrent files are left to the caller.

        Returns:
            int: Number of deleted video files
        """
        res = await self.db.execute(
            delete(VideoFile)
            .where(VideoFile.video_streaming_playlist_id == playlist_id)
            .execution_options(synchronize_session=False)
        )
        logger.info(f"Removed {res.rowcount} HLS files of playlist {playlist_id}")
        return res.rowcount

    async def delete(self, video_file: VideoFile) -> None:
        """Delete a video file and its torrent file. Torrent errors are not fatal."""
        remove_torrent(video_file)
        await self.db.delete(video_file)
        await self.db.flush()
