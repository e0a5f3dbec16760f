"""
Shared test fixtures for videofiles tests.

Provides:
- Test database (SQLite in-memory, foreign keys enforced)
- Session factory for tests needing several sessions
- Settings pointing at a temporary storage root
- Video / streaming playlist / video file factories
"""

import os
import tempfile
import uuid
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing videofiles modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["WEBSERVER_URL"] = "https://videos.local.test"

# Create a temporary directory for test storage
_test_storage_dir = tempfile.mkdtemp(prefix="videofiles_test_")
os.environ["STORAGE_PATH"] = _test_storage_dir

from videofiles.core.config import Settings
from videofiles.core.constants import VideoPrivacy, VideoStorage
from videofiles.core.database import Base, enable_sqlite_foreign_keys
from videofiles.models import Video, VideoFile, VideoStreamingPlaylist


# =============================================================================
# Test Database Configuration
# =============================================================================

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    echo=False,
)
enable_sqlite_foreign_keys(test_engine.sync_engine)

TestAsyncSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def test_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide an async database session for testing.

    Creates all tables before the test and drops them after.
    Each test gets a fresh database.
    """
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestAsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.rollback()
            await session.close()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def session_factory(test_db: AsyncSession) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database (tables already created)."""
    return TestAsyncSessionLocal


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings with a per-test storage root and no CDN base URLs."""
    return Settings(
        webserver_url="https://videos.local.test",
        storage_path=str(tmp_path),
        remote_scheme="https",
    )


@pytest.fixture
def cdn_settings(tmp_path: Path) -> Settings:
    """Settings rewriting object storage URLs onto CDN base URLs."""
    return Settings(
        webserver_url="https://videos.local.test",
        storage_path=str(tmp_path),
        object_storage_videos_base_url="https://cdn.local.test/videos",
        object_storage_streaming_playlists_base_url="https://cdn.local.test/hls",
    )


# =============================================================================
# Model Fixtures
# =============================================================================


def build_video_file(**overrides) -> VideoFile:
    """Build a transient 720p/30fps web video file, overriding any column."""
    fields = {
        "resolution": 720,
        "fps": 30,
        "size": 1024,
        "extname": ".mp4",
        "info_hash": uuid.uuid4().hex[:40].ljust(40, "0"),
        "filename": f"{uuid.uuid4()}-720.mp4",
        "torrent_filename": f"{uuid.uuid4()}-720.torrent",
        "storage": VideoStorage.FILE_SYSTEM,
    }
    fields.update(overrides)
    return VideoFile(**fields)


@pytest.fixture
def make_video_file():
    """Factory fixture building transient video files."""
    return build_video_file


@pytest.fixture
def sample_info_hash() -> str:
    return "a" * 40


@pytest_asyncio.fixture
async def local_video(test_db: AsyncSession) -> Video:
    """A public video owned by this instance."""
    video = Video(name="Local video", privacy=VideoPrivacy.PUBLIC, remote=False)
    test_db.add(video)
    await test_db.commit()
    return video


@pytest_asyncio.fixture
async def remote_video(test_db: AsyncSession) -> Video:
    """A public video mirrored from another instance."""
    video = Video(name="Remote video", privacy=VideoPrivacy.PUBLIC, remote=True, host="peer.example.com")
    test_db.add(video)
    await test_db.commit()
    return video


@pytest_asyncio.fixture
async def local_playlist(test_db: AsyncSession, local_video: Video) -> VideoStreamingPlaylist:
    """HLS playlist of the local video."""
    playlist = VideoStreamingPlaylist(video_id=local_video.id)
    test_db.add(playlist)
    await test_db.commit()
    return playlist


@pytest_asyncio.fixture
async def remote_playlist(test_db: AsyncSession, remote_video: Video) -> VideoStreamingPlaylist:
    """HLS playlist of the remote video."""
    playlist = VideoStreamingPlaylist(video_id=remote_video.id)
    test_db.add(playlist)
    await test_db.commit()
    return playlist
