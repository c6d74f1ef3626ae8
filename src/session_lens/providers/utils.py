"""Shared helpers for provider scanning and message extraction."""

import json
import os
import re
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone
from pathlib import Path

from session_lens.logging import get_logger
from session_lens.providers.base import SessionLoadError

logger = get_logger("providers")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Numbers at or above this are already milliseconds (year 2001 in ms, year 33658 in s)
_MILLIS_THRESHOLD = 1_000_000_000_000

# fromisoformat accepts at most microsecond precision
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def collect_files(root: Path, extension: str) -> list[Path]:
    """Recursively collect files with the given extension under root.

    Missing roots and unreadable directories are skipped rather than raised,
    so the result may be smaller than the tree but is never an error.
    Symlinked directories are not followed. No ordering is guaranteed.

    Args:
        root: Directory to walk
        extension: File extension to match, with or without the leading dot

    Returns:
        Paths of matching regular files
    """
    suffix = extension if extension.startswith(".") else f".{extension}"
    files: list[Path] = []

    # os.walk ignores errors from scandir unless onerror is given
    for dirpath, _dirnames, filenames in os.walk(root):
        for name in filenames:
            path = Path(dirpath) / name
            if path.suffix == suffix and path.is_file():
                files.append(path)

    return files


def extract_text(content: object) -> str:
    """Flatten a message content value into plain text.

    Args:
        content: Either a string or an array of content blocks

    Returns:
        The string itself, the text-bearing blocks joined by newlines,
        or an empty string for any other shape
    """
    if isinstance(content, str):
        return content

    if isinstance(content, list):
        text_parts: list[str] = []
        for block in content:
            text = _extract_block_text(block)
            if text.strip():
                text_parts.append(text)
        return "\n".join(text_parts)

    return ""


def _extract_block_text(block: object) -> str:
    if isinstance(block, str):
        return block

    if not isinstance(block, dict):
        return ""

    text = block.get("text")
    if isinstance(text, str):
        return text

    # Tool results carry their output as nested content
    if block.get("type") == "tool_result":
        return extract_text(block.get("content"))

    return ""


def parse_timestamp_ms(value: object) -> int | None:
    """Parse a timestamp into epoch milliseconds.

    Accepts an ISO 8601 string (e.g. "2026-01-26T00:38:34.590Z"), a number
    of seconds (int or float), or a number already in milliseconds.
    Numbers are told apart by magnitude.

    Args:
        value: Raw timestamp value from a session file

    Returns:
        Epoch milliseconds, or None if the value cannot be parsed
    """
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        if abs(value) >= _MILLIS_THRESHOLD:
            return int(value)
        return int(round(value * 1000))

    if not isinstance(value, str):
        return None

    timestamp_str = value.strip()
    if not timestamp_str:
        return None

    try:
        # Handle ISO 8601 with optional fractional seconds and Z suffix
        if timestamp_str.endswith(("Z", "z")):
            timestamp_str = timestamp_str[:-1] + "+00:00"
        timestamp_str = _FRACTION_RE.sub(r"\1", timestamp_str)
        dt = datetime.fromisoformat(timestamp_str)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    return (dt - _EPOCH) // timedelta(milliseconds=1)


def file_timestamps(path: Path) -> tuple[int | None, int | None]:
    """Get (created, modified) epoch milliseconds from file metadata.

    Uses the birth time where the platform records one, otherwise st_ctime.
    Never opens the file.
    """
    try:
        stat = path.stat()
    except OSError:
        return None, None

    created = getattr(stat, "st_birthtime", None)
    if created is None:
        created = stat.st_ctime

    return int(created * 1000), int(stat.st_mtime * 1000)


def iter_jsonl(path: Path) -> Iterator[dict]:
    """Yield each JSON object in a JSONL file, one line at a time.

    Blank lines, lines that are not valid UTF-8 or JSON, and lines that do
    not hold a JSON object are skipped. Partial trailing lines written by a
    concurrent writer fall into the same bucket.

    Raises:
        SessionLoadError: If the file cannot be opened
    """
    try:
        f = open(path, "rb")
    except OSError as e:
        raise SessionLoadError(f"Failed to open session file {path}: {e}") from e

    with f:
        for line_no, line in enumerate(f, start=1):
            try:
                line_text = line.decode("utf-8").strip()
            except UnicodeDecodeError:
                logger.debug("Skipping undecodable line %d in %s", line_no, path)
                continue

            if not line_text:
                continue

            try:
                entry = json.loads(line_text)
            except (ValueError, RecursionError):
                # Malformed lines, oversized integers and runaway nesting
                logger.debug("Skipping malformed line %d in %s", line_no, path)
                continue

            if isinstance(entry, dict):
                yield entry


def read_json(path: Path) -> object | None:
    """Read a whole JSON document, returning None if unreadable or invalid."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (ValueError, RecursionError, OSError):
        logger.debug("Skipping unreadable JSON file %s", path)
        return None


def path_basename(path_str: str | None) -> str | None:
    """Return the final non-empty segment of a / or \\ separated path."""
    if not path_str:
        return None
    segments = [s for s in re.split(r"[/\\]", path_str) if s]
    return segments[-1] if segments else None
