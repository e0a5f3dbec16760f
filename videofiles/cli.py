"""
videofiles administration CLI.

Usage:
    python -m videofiles create-tables
    python -m videofiles stats
    python -m videofiles info-hash-exists <info hash>
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from videofiles.core.config import get_settings
from videofiles.core.database import AsyncSessionLocal, create_all_tables
from videofiles.core.logging import setup_logging
from videofiles.core.validators import is_video_file_info_hash_valid
from videofiles.services.info_hash_cache import build_info_hash_cache
from videofiles.services.storage_stats import get_stats

logger = logging.getLogger("videofiles.cli")


async def _create_tables() -> int:
    await create_all_tables()
    logger.info("Tables created")
    return 0


async def _stats() -> int:
    async with AsyncSessionLocal() as session:
        stats = await get_stats(session)
    print(json.dumps(stats))
    return 0


async def _info_hash_exists(info_hash: str) -> int:
    if not is_video_file_info_hash_valid(info_hash, allow_null=False):
        print(f"ERROR: invalid info hash {info_hash!r}", file=sys.stderr)
        return 2

    cache = build_info_hash_cache(AsyncSessionLocal)
    exists = await cache.exists(info_hash)
    print("true" if exists else "false")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="videofiles", description="videofiles administration CLI")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("create-tables", help="Create database tables")
    sub.add_parser("stats", help="Print storage used by local video files")
    exists_parser = sub.add_parser("info-hash-exists", help="Check whether a video file has this info hash")
    exists_parser.add_argument("info_hash", help="40 character hex info hash")

    args = parser.parse_args(argv)
    setup_logging(get_settings())

    if args.command == "create-tables":
        return asyncio.run(_create_tables())
    if args.command == "stats":
        return asyncio.run(_stats())
    return asyncio.run(_info_hash_exists(args.info_hash))
