"""
Video File Field Validation

Validators for the columns of a video file record:
- Resolution against the known heights
- Frame rate and size lower bounds (-1 sentinels allowed)
- Container extension against the allowed set
- Info hash format
"""

import re
from typing import Any

from .constants import LIVE_EXTENSION, VideoResolution


# Container extensions accepted for video files
ALLOWED_VIDEO_EXTENSIONS: set[str] = {
    ".mp4", ".ogv", ".webm", ".mkv", ".mov", ".m4v",
    ".avi", ".flv", ".mpeg", ".mpg", ".3gp", ".mxf",
    # Audio only renditions
    ".m4a", ".mp3", ".ogg", ".flac",
    LIVE_EXTENSION,
}

_INFO_HASH_RE = re.compile(r"^[0-9a-fA-F]{40}$")

_VALID_RESOLUTIONS: frozenset[int] = frozenset(r.value for r in VideoResolution)


class InvalidVideoFileValue(ValueError):
    """Raised when a video file field is assigned a malformed value."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}: {value!r}")


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid size or resolution
    return isinstance(value, int) and not isinstance(value, bool)


def is_video_file_resolution_valid(value: Any) -> bool:
    """
    Check that a resolution is a known video height or the audio sentinel.

    Example:
        >>> is_video_file_resolution_valid(720)
        True
        >>> is_video_file_resolution_valid(721)
        False
    """
    return _is_int(value) and value in _VALID_RESOLUTIONS


def is_video_fps_valid(value: Any) -> bool:
    return _is_int(value) and value >= -1


def is_video_file_size_valid(value: Any) -> bool:
    return _is_int(value) and value >= -1


def is_video_file_extname_valid(value: Any) -> bool:
    """
    Check a container extension, dot included.

    Example:
        >>> is_video_file_extname_valid(".mp4")
        True
        >>> is_video_file_extname_valid("mp4")
        False
    """
    return isinstance(value, str) and value in ALLOWED_VIDEO_EXTENSIONS


def is_video_file_info_hash_valid(value: Any, allow_null: bool = True) -> bool:
    if value is None:
        return allow_null

    return isinstance(value, str) and _INFO_HASH_RE.match(value) is not None


def throw_if_not_valid(value: Any, validator, field: str, *args) -> Any:
    """
    Run a validator and raise InvalidVideoFileValue on failure.

    Returns:
        The value unchanged, so it can be used directly from @validates hooks
    """
    if not validator(value, *args):
        raise InvalidVideoFileValue(field, value)

    return value
