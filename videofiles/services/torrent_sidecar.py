"""
Torrent file cleanup for videofiles.

A torrent file is regenerable from its video file, so failing to delete it
must never block the deletion of the video file itself.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from videofiles.core.config import Settings
from videofiles.core.paths import get_fs_torrent_file_path
from videofiles.models.video_file import VideoFile

logger = logging.getLogger(__name__)


def remove_path(path: Path) -> None:
    """Delete a file, ignoring files that are already gone."""
    path.unlink(missing_ok=True)


def remove_torrent(
    video_file: VideoFile,
    remove_file: Optional[Callable[[Path], None]] = None,
    settings: Optional[Settings] = None,
) -> bool:
    """
    Delete the torrent file of a video file.

    Args:
        video_file: Video file whose torrent should be removed
        remove_file: Deletion primitive, defaults to removing from the filesystem
        settings: Optional settings override

    Returns:
        bool: True unless the deletion failed (a warning is logged). A file
              without torrent, or whose torrent file is already gone, succeeds
    """
    if not video_file.torrent_filename:
        return True

    remove_file = remove_file or remove_path

    try:
        torrent_path = get_fs_torrent_file_path(video_file.torrent_filename, settings)
        remove_file(torrent_path)
    except (OSError, ValueError) as e:
        logger.warning(f"Cannot delete torrent {video_file.torrent_filename}: {e}")
        return False

    logger.debug(f"Deleted torrent {torrent_path}")
    return True
