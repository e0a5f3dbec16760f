"""
VideoRedundancy model for videofiles.

A copy of a video file mirrored on another instance for redundancy.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from videofiles.core.database import Base

if TYPE_CHECKING:
    from .video_file import VideoFile


class VideoRedundancy(Base):
    __tablename__ = "video_redundancies"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    video_file_id: Mapped[int] = mapped_column(
        ForeignKey("video_files.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Foreign key to the mirrored video file"
    )
    url: Mapped[str] = mapped_column(String(2000), nullable=False)
    file_url: Mapped[str] = mapped_column(String(2000), nullable=False)
    strategy: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    expires_on: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    video_file: Mapped["VideoFile"] = relationship("VideoFile", back_populates="redundancies")

    def __repr__(self) -> str:
        return f"<VideoRedundancy(id={self.id!r}, video_file_id={self.video_file_id!r})>"
