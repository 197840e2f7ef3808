from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
import warnings
from importlib.metadata import PackageNotFoundError, version
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from watch_history_stats.aggregator import SummaryReport, build_summary_report
from watch_history_stats.channels import ChannelDetail, build_channel_detail, display_name
from watch_history_stats.config import Settings, load_settings
from watch_history_stats.decoder import load_events
from watch_history_stats.exceptions import DecodeError, EmptyInputError, MalformedRecordWarning
from watch_history_stats.logging_setup import configure_logging
from watch_history_stats.models import usable_timestamp
from watch_history_stats.rounding import round_whole


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    try:
        settings = _apply_overrides(load_settings(), args)
    except RuntimeError as error:
        configure_logging("INFO")
        logging.getLogger("watch_history_stats").error("config_invalid", extra={"reason": str(error)})
        sys.exit(1)

    configure_logging(settings.log_level)
    logger = logging.getLogger("watch_history_stats")
    # Reported through the records_skipped log event instead.
    warnings.simplefilter("ignore", MalformedRecordWarning)

    try:
        logger.info("files_loading", extra={"count": len(args.files)})
        events = load_events(args.files)
        report = build_summary_report(events, tz=settings.tzinfo, top_channels=settings.top_channels)
    except DecodeError as error:
        logger.error("decode_failed", extra={"reason": str(error)})
        sys.exit(1)
    except EmptyInputError:
        logger.error("empty_input")
        sys.exit(1)

    if args.channel:
        rollup = next((item for item in report.channels if item.name == args.channel), None)
        if rollup is None:
            logger.error(f"Channel not found in watch history: {args.channel}")
            sys.exit(1)
        detail = build_channel_detail(rollup, settings.tzinfo)
        if args.json:
            print(json.dumps(_detail_to_dict(detail), indent=2, ensure_ascii=False))
        else:
            _print_channel_detail(detail, settings.tzinfo)
        return

    if args.json:
        print(json.dumps(report.to_dict(include_events=args.include_events), indent=2, ensure_ascii=False))
        return

    _print_report(report, settings)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    changes: dict[str, object] = {}
    if args.timezone:
        try:
            ZoneInfo(args.timezone)
        except (ZoneInfoNotFoundError, ValueError) as error:
            raise RuntimeError(f"Unknown timezone: {args.timezone}") from error
        changes["timezone"] = args.timezone
    if args.top is not None:
        if args.top < 1:
            raise RuntimeError(f"--top must be at least 1, got {args.top}")
        changes["top_channels"] = args.top
    if args.log_level:
        changes["log_level"] = args.log_level
    return dataclasses.replace(settings, **changes) if changes else settings


def _package_version() -> str:
    try:
        return version("watch-history-stats")
    except PackageNotFoundError:
        return "0.0.0"


def _format_date(value, tz) -> str:
    if not usable_timestamp(value):
        return "Unknown"
    return value.astimezone(tz).strftime("%Y-%m-%d")


def _print_report(report: SummaryReport, settings: Settings) -> None:
    basic = report.basic
    watch_time = report.watch_time
    content = report.content_types

    print()
    print("\033[94m" + "=" * 50 + "\033[0m")
    print(f"\033[1m   Watch History Stats v{_package_version()}\033[0m")
    print("\033[94m" + "=" * 50 + "\033[0m")
    print()
    print(f"   \033[90mVideos:\033[0m     {basic.total_videos:,} (~{basic.videos_per_day} per day)")
    print(f"   \033[90mPeriod:\033[0m     {_format_date(basic.first_video, settings.tzinfo)} - {_format_date(basic.last_video, settings.tzinfo)} ({basic.total_days} days)")
    print(f"   \033[90mHours:\033[0m      {watch_time.total_hours:,} (~{watch_time.average_minutes_per_day} min per day)")
    print(f"   \033[90mChannels:\033[0m   {basic.unique_channels:,} (~{basic.average_videos_per_channel} videos per channel)")
    print(f"   \033[90mTop year:\033[0m   {basic.most_active_year or 'Unknown'}")
    print(f"   \033[90mTop month:\033[0m  {basic.peak_month or 'Unknown'} (by estimated watch time)")
    print(f"   \033[90mPeak hours:\033[0m {', '.join(f'{hour}:00' for hour in basic.peak_hours) or 'Unknown'} ({settings.timezone})")
    print(f"   \033[90mStreak:\033[0m     {basic.longest_streak} day(s)")
    print(
        f"   \033[90mContent:\033[0m    {content.regular_percent}% regular, "
        f"{content.short_form_percent}% shorts, {content.live_stream_percent}% live/stream"
    )
    print()
    print("\033[94m" + "-" * 50 + "\033[0m")
    print(f"\033[1m   Top {len(report.top_channels)} Channels\033[0m")
    print()
    for index, channel in enumerate(report.top_channels, start=1):
        print(
            f"   {index:>2}. {channel.display_name:<33} {channel.videos:>6} videos"
            f"  {channel.watch_hours:>5} h  {channel.active_span_days:>5} days"
        )
    print()
    print("\033[94m" + "-" * 50 + "\033[0m")
    print("\033[1m   Yearly Activity\033[0m")
    print()
    for bucket in report.histograms.years:
        print(f"   {bucket.key}: {bucket.count:>6} videos  {round_whole(bucket.watch_minutes / 60):>5} h")
    print()
    print("\033[94m" + "-" * 50 + "\033[0m")
    print("\033[1m   Platforms\033[0m")
    print()
    for domain in report.domains[: settings.top_domains]:
        print(f"   {domain.domain:<35} {domain.count:>6}")
    print()


def _print_channel_detail(detail: ChannelDetail, tz) -> None:
    print()
    print("\033[94m" + "=" * 50 + "\033[0m")
    print(f"\033[1m   {display_name(detail.name)}\033[0m")
    print("\033[94m" + "=" * 50 + "\033[0m")
    print()
    if detail.url:
        print(f"   \033[90mURL:\033[0m        {detail.url}")
    print(f"   \033[90mVideos:\033[0m     {detail.video_count:,}")
    print(f"   \033[90mMinutes:\033[0m    ~{round_whole(detail.watch_minutes_estimate):,}")
    print(f"   \033[90mPeriod:\033[0m     {_format_date(detail.first_seen, tz)} - {_format_date(detail.last_seen, tz)}")
    print(f"   \033[90mStreak:\033[0m     {detail.longest_streak} day(s)")
    print(
        "   \033[90mContent:\033[0m    "
        + ", ".join(f"{count} {content_type.value}" for content_type, count in detail.content_types.items())
    )
    print()
    for bucket in detail.day_of_week:
        print(f"   {bucket.key:<10} {bucket.count:>6}")
    print()
    for event in detail.events_newest_first[:10]:
        print(f"   {_format_date(event.watched_at, tz)}  {event.title}")
    print()


def _detail_to_dict(detail: ChannelDetail) -> dict:
    return {
        "name": detail.name,
        "url": detail.url,
        "video_count": detail.video_count,
        "watch_minutes_estimate": detail.watch_minutes_estimate,
        "first_seen": detail.first_seen.isoformat() if detail.first_seen else None,
        "last_seen": detail.last_seen.isoformat() if detail.last_seen else None,
        "months": [{"month": bucket.key, "videos": bucket.count} for bucket in detail.months],
        "day_of_week": [{"day": bucket.key, "videos": bucket.count} for bucket in detail.day_of_week],
        "content_types": {content_type.value: count for content_type, count in detail.content_types.items()},
        "longest_streak": detail.longest_streak,
        "events": [
            {
                "title": event.title,
                "title_url": event.title_url,
                "watched_at": event.watched_at.isoformat() if event.watched_at else None,
            }
            for event in detail.events_newest_first
        ],
    }


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Statistics for a watch-history export")
    parser.add_argument(
        "files",
        nargs="+",
        help="One or more watch-history JSON files. Events from all files are combined.",
    )
    parser.add_argument(
        "--top",
        type=int,
        help="Number of channels in the ranked list (default from config, 10).",
    )
    parser.add_argument(
        "--timezone",
        help="IANA timezone used for hours, weekdays, dates and streaks.",
    )
    parser.add_argument(
        "--channel",
        help="Show the drill-down view for one channel (exact name).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON instead of text.",
    )
    parser.add_argument(
        "--include-events",
        action="store_true",
        help="With --json, include every channel's member events.",
    )
    parser.add_argument(
        "--log-level",
        help="Override the configured log level.",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    main()
