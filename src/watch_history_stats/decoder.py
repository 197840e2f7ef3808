from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from watch_history_stats.exceptions import DecodeError
from watch_history_stats.models import WatchEvent, parse_watch_event

logger = logging.getLogger(__name__)


def decode_payload(payload: str | bytes, source: str = "payload") -> list[WatchEvent]:
    try:
        records = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as error:
        raise DecodeError(f"{source}: not valid JSON ({error})") from error

    if not isinstance(records, list):
        raise DecodeError(f"{source}: expected a JSON array of watch records, got {type(records).__name__}")

    events: list[WatchEvent] = []
    for index, record in enumerate(records):
        try:
            events.append(parse_watch_event(record))
        except ValueError as error:
            raise DecodeError(f"{source}: record {index}: {error}") from error
    return events


def decode_payloads(
    payloads: Iterable[str | bytes],
    sources: Sequence[str] | None = None,
) -> list[WatchEvent]:
    """Decode every payload and concatenate the events in payload order.

    Any payload that fails to decode aborts the whole batch with DecodeError.
    Events are not deduplicated across payloads.
    """
    combined: list[WatchEvent] = []
    payload_count = 0
    for index, payload in enumerate(payloads):
        source = sources[index] if sources is not None else f"payload #{index + 1}"
        combined.extend(decode_payload(payload, source=source))
        payload_count += 1

    logger.info("payloads_decoded", extra={"payloads": payload_count, "events": len(combined)})
    return combined


async def _read_all(paths: Sequence[Path]) -> list[bytes]:
    return list(await asyncio.gather(*(asyncio.to_thread(path.read_bytes) for path in paths)))


def read_payloads(paths: Iterable[str | Path]) -> list[bytes]:
    """Read all files concurrently and return once every read has finished."""
    resolved = [Path(path) for path in paths]
    try:
        return asyncio.run(_read_all(resolved))
    except OSError as error:
        raise DecodeError(f"Could not read input file: {error}") from error


def load_events(paths: Iterable[str | Path]) -> list[WatchEvent]:
    resolved = [Path(path) for path in paths]
    payloads = read_payloads(resolved)
    return decode_payloads(payloads, sources=[str(path) for path in resolved])
