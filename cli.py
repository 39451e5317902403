#!/usr/bin/env python3
"""Simple CLI for refreshing and inspecting just read feeds locally"""

import argparse
import asyncio
from datetime import datetime, timezone
from typing import List, Optional

from justread.config import settings
from justread.db import close_backend_client, close_redis_data_source, get_backend_client
from justread.dependencies import get_feed_store, get_feed_worker, get_score_provider
from justread.logging_config import setup_logging
from justread.services.just_read_feed.models import FeedEntry, SectionLayout
from justread.workers import run_update_just_read_feed_loop


def print_feed(entries: List[FeedEntry]):
    """Pretty print stored feed sections"""
    if not entries:
        print("❌ No sections stored for this user")
        return

    print(f"\n📰 Just Read Feed ({len(entries)} sections)")
    print("=" * 50)

    for i, entry in enumerate(entries, 1):
        expires = datetime.fromtimestamp(entry.score / 1000, tz=timezone.utc)
        section = entry.section
        if section.layout == SectionLayout.LONG:
            item = section.items[0]
            print(f"{i:3d}. [long]        {item.type:<12} {item.id}")
        else:
            print(f"{i:3d}. [quick links] {len(section.items)} items")
            for item in section.items:
                print(f"       - {item.type:<12} {item.id}")
        print(f"       score={entry.score} (expires {expires.isoformat()})")

    print(f"\nNext cursor: {entries[-1].score}")


async def cli_refresh(user_id: str):
    """Run the feed refresh job for one user"""
    print(f"🔄 Refreshing feed for {user_id}...")

    worker = get_feed_worker()
    result = await worker.run(user_id)

    if result.skipped_reason:
        print(f"⚠️  Skipped: {result.skipped_reason}")
        return

    print(f"✅ {result.sections} sections from {result.candidates} candidates "
          f"in {result.duration_seconds:.1f}s")
    if result.undistributed:
        print(f"⚠️  {result.undistributed} candidates were not placed")


async def cli_feed(user_id: str, limit: int, cursor: Optional[int]):
    """Print a page of the stored feed"""
    store = get_feed_store()
    entries = await store.get_sections(user_id, limit, max_score=cursor)
    print_feed(entries)


async def cli_loop(user_ids: List[str], max_iterations: Optional[int]):
    """Refresh a fixed set of users on an interval"""
    await run_update_just_read_feed_loop(
        user_ids,
        backend=get_backend_client(),
        scorer=get_score_provider(),
        store=get_feed_store(),
        interval_seconds=settings.feed_refresh_interval_seconds,
        max_iterations=max_iterations,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Just Read Feed CLI")
    subparsers = parser.add_subparsers(dest="command")

    refresh_parser = subparsers.add_parser("refresh", help="Refresh a user's feed")
    refresh_parser.add_argument("user_id", help="User id")

    feed_parser = subparsers.add_parser("feed", help="Print a user's stored feed")
    feed_parser.add_argument("user_id", help="User id")
    feed_parser.add_argument("--limit", type=int, default=20, help="Sections per page (default: 20)")
    feed_parser.add_argument("--cursor", type=int, help="Score of the last section of the previous page")

    loop_parser = subparsers.add_parser("loop", help="Refresh feeds for several users on an interval")
    loop_parser.add_argument("user_ids", nargs="+", help="User ids")
    loop_parser.add_argument("--iterations", type=int, help="Stop after N passes")

    return parser


async def main():
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    setup_logging()
    command = args.command.lower()

    try:
        if command == "refresh":
            await cli_refresh(args.user_id)

        elif command == "feed":
            if args.limit <= 0:
                raise ValueError("Limit must be positive")
            await cli_feed(args.user_id, args.limit, args.cursor)

        elif command == "loop":
            await cli_loop(args.user_ids, args.iterations)

        else:
            print(f"❌ Unknown command: {command}")
            parser.print_help()
    finally:
        await close_backend_client()
        await close_redis_data_source()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
