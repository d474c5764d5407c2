from datetime import datetime, timedelta, timezone
from typing import Mapping

from torrentmeta.bencoding.value import ByteString, Dict, Int, List, Value
from torrentmeta.torrent.errors import (
    ExceedsSystemTimeError,
    ExpectedByteStringError,
    ExpectedDictError,
    ExpectedIntError,
    ExpectedListError,
    MissingKeyError,
    NotUTF8Error,
)

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def extract_int(value: Value) -> int:
    if not isinstance(value, Int):
        raise ExpectedIntError(value)
    return value.value


def extract_bytes(value: Value) -> bytes:
    if not isinstance(value, ByteString):
        raise ExpectedByteStringError(value)
    return value.value


def extract_string(value: Value) -> str:
    raw = extract_bytes(value)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise NotUTF8Error(value, e) from e


def extract_list(value: Value) -> tuple:
    if not isinstance(value, List):
        raise ExpectedListError(value)
    return value.items


def extract_dict(value: Value) -> Mapping[bytes, Value]:
    if not isinstance(value, Dict):
        raise ExpectedDictError(value)
    return value.entries


def optional_key(value: Value, key: str) -> Value | None:
    """Looks up `key` in a dictionary value, None when it is absent."""
    return extract_dict(value).get(key.encode("utf-8"))


def extract_key(value: Value, key: str) -> Value:
    found = optional_key(value, key)
    if found is None:
        raise MissingKeyError(value, key)
    return found


def extract_timestamp(value: Value) -> datetime:
    """
    Interprets an integer as seconds since the Unix epoch

    Returns:
        datetime: A timezone-aware UTC timestamp

    Raises:
        ExceedsSystemTimeError: If the seconds are negative or past what datetime can represent
    """
    seconds = extract_int(value)
    if seconds < 0:
        raise ExceedsSystemTimeError(seconds)
    try:
        return UNIX_EPOCH + timedelta(seconds=seconds)
    except OverflowError as e:
        raise ExceedsSystemTimeError(seconds) from e
