from enum import IntEnum


class VideoResolution(IntEnum):
    """Heights a video file can be encoded to. H_NOVIDEO marks audio only files."""

    H_NOVIDEO = 0
    H_144P = 144
    H_240P = 240
    H_360P = 360
    H_480P = 480
    H_720P = 720
    H_1080P = 1080
    H_1440P = 1440
    H_4K = 2160


class VideoStorage(IntEnum):
    FILE_SYSTEM = 0
    OBJECT_STORAGE = 1


class VideoPrivacy(IntEnum):
    PUBLIC = 1
    UNLISTED = 2
    PRIVATE = 3
    INTERNAL = 4
    PASSWORD_PROTECTED = 5


class VideoStreamingPlaylistType(IntEnum):
    HLS = 1


# Videos with these privacies are served from the private static directories
PRIVATE_DIRECTORY_PRIVACIES: frozenset[int] = frozenset({
    VideoPrivacy.PRIVATE,
    VideoPrivacy.INTERNAL,
    VideoPrivacy.PASSWORD_PROTECTED,
})


def is_video_in_private_directory(privacy: int) -> bool:
    return privacy in PRIVATE_DIRECTORY_PRIVACIES


# Extension of live segments
LIVE_EXTENSION = ".ts"

# Sentinel size of live video files
LIVE_FILE_SIZE = -1

# Unknown frame rate (audio only or legacy files)
UNKNOWN_FPS = -1
