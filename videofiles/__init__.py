"""
videofiles

Storage and location tracking for encoded video renditions.
"""

__version__ = "0.1.0"
