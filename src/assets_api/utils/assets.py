"""Normalization rules for asset fields."""

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from assets_api.schemas import Visibility

DEFAULT_TITLE = "Untitled"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"

_WHITESPACE = re.compile(r"\s+")


def normalize_visibility(value: Optional[str]) -> Visibility:
    """Anything other than public/private, including nothing, is private."""
    if value is not None:
        candidate = value.strip().lower()
        if candidate == Visibility.PUBLIC.value:
            return Visibility.PUBLIC
    return Visibility.PRIVATE


def normalize_title(title: Optional[str], file_name: Optional[str] = None) -> str:
    """Trimmed title, else the file name, else "Untitled"."""
    if title and title.strip():
        return title.strip()
    if file_name and file_name.strip():
        return file_name.strip()
    return DEFAULT_TITLE


def sanitize_file_name(file_name: str) -> str:
    return _WHITESPACE.sub("_", file_name)


def make_asset_id() -> str:
    return str(uuid.uuid4())


def make_blob_name(asset_id: str, file_name: str) -> str:
    return f"{asset_id}-{sanitize_file_name(file_name)}"


def format_timestamp(moment: datetime) -> str:
    # fixed width so lexical order equals chronological order
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)


def utc_timestamp() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def next_timestamp(previous: Optional[str]) -> str:
    """Current time, but always strictly later than ``previous``."""
    now = datetime.now(timezone.utc)
    if previous:
        try:
            floor = parse_timestamp(previous) + timedelta(microseconds=1)
        except ValueError:
            floor = None
        if floor is not None and now < floor:
            now = floor
    return format_timestamp(now)
