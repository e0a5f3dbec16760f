"""
Storage accounting for videofiles.

Bytes used by the files of local videos, web video files and HLS files
summed separately. Live files count with their -1 size sentinel.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from videofiles.models.streaming_playlist import VideoStreamingPlaylist
from videofiles.models.video import Video
from videofiles.models.video_file import VideoFile


async def get_local_video_files_size(db: AsyncSession) -> int:
    """
    Total size of the video files of local videos.

    Returns:
        int: Size in bytes, 0 when there are no files
    """
    web_video_files = (
        select(func.coalesce(func.sum(VideoFile.size), 0))
        .select_from(VideoFile)
        .join(Video, Video.id == VideoFile.video_id)
        .where(Video.remote.is_(False))
    )
    hls_files = (
        select(func.coalesce(func.sum(VideoFile.size), 0))
        .select_from(VideoFile)
        .join(VideoStreamingPlaylist, VideoStreamingPlaylist.id == VideoFile.video_streaming_playlist_id)
        .join(Video, Video.id == VideoStreamingPlaylist.video_id)
        .where(Video.remote.is_(False))
    )

    web_total = (await db.execute(web_video_files)).scalar()
    hls_total = (await db.execute(hls_files)).scalar()

    return int(web_total or 0) + int(hls_total or 0)


async def get_stats(db: AsyncSession) -> dict[str, int]:
    return {"total_local_video_files_size": await get_local_video_files_size(db)}
