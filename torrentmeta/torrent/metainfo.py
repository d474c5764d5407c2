import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import PurePosixPath

from torrentmeta.bencoding.value import ByteString, Value
from torrentmeta.torrent.errors import (
    BadHashLengthError,
    BadPathError,
    BadPieceLengthError,
)
from torrentmeta.torrent.extract import (
    extract_bytes,
    extract_int,
    extract_key,
    extract_list,
    extract_string,
    extract_timestamp,
    optional_key,
)

logger = logging.getLogger(__name__)

PIECE_HASH_SIZE = 20


class TrackerProtocol(Enum):
    UDP = "udp"
    HTTP = "http"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TrackerAddr:
    """
    Where to find a tracker.

    Addresses stay strings since most of them still need DNS resolution,
    e.g. "tracker.example:6969". UDP addresses drop their scheme, HTTP ones
    keep the full URL so an HTTP client can tell http from https.
    """

    protocol: TrackerProtocol
    address: str

    def __str__(self) -> str:
        return f"{self.protocol.value}: {self.address}"


def classify(text: str) -> TrackerAddr:
    _, udp, rest = text.partition("udp://")
    if udp:
        return TrackerAddr(TrackerProtocol.UDP, rest)
    if text.startswith(("http://", "https://")):
        return TrackerAddr(TrackerProtocol.HTTP, text)
    return TrackerAddr(TrackerProtocol.UNKNOWN, text)


@dataclass(frozen=True)
class PieceHash:
    digest: bytes

    def __post_init__(self):
        if len(self.digest) != PIECE_HASH_SIZE:
            raise ValueError(
                f"piece hash must be {PIECE_HASH_SIZE} bytes, got {len(self.digest)}"
            )

    def hex(self) -> str:
        return self.digest.hex()


@dataclass(frozen=True)
class FileInfo:
    path: PurePosixPath
    length: int


@dataclass(frozen=True)
class Torrent:
    """
    The metadata held in a .torrent file.

    Attributes:
        trackers: (tier, address) pairs, lower tiers are tried first
        creation: When the torrent was made, if recorded
        comment: Free-form message, if any
        created_by: Program that made the torrent, if recorded
        private: Private torrents only get peers from their trackers
        piece_length: Bytes per piece, except possibly the last one
        piece_hashes: SHA1 of every piece, in piece order
        files: Relative path and length of every file, in order
    """

    trackers: tuple[tuple[int, TrackerAddr], ...]
    creation: datetime | None
    comment: str | None
    created_by: str | None
    private: bool
    piece_length: int
    piece_hashes: tuple[PieceHash, ...]
    files: tuple[FileInfo, ...]

    @property
    def total_length(self) -> int:
        return sum(f.length for f in self.files)

    @property
    def piece_count(self) -> int:
        return len(self.piece_hashes)

    @classmethod
    def from_value(cls, value: Value) -> "Torrent":
        """
        Projects a decoded tree onto a Torrent.

        Raises:
            TorrentError: If the tree is missing a field or a field has the wrong shape
        """
        trackers = get_trackers(value)
        creation = _optional(value, "creation date", extract_timestamp)
        comment = _optional(value, "comment", extract_string)
        created_by = _optional(value, "created by", extract_string)

        info = extract_key(value, "info")
        private = _optional(info, "private", extract_int) == 1
        piece_length = extract_int(extract_key(info, "piece length"))
        if piece_length <= 0:
            raise BadPieceLengthError(piece_length)
        piece_hashes = get_piece_hashes(info)
        files = get_files(info)

        torrent = cls(
            trackers=trackers,
            creation=creation,
            comment=comment,
            created_by=created_by,
            private=private,
            piece_length=piece_length,
            piece_hashes=piece_hashes,
            files=files,
        )
        logger.info(
            f"Extracted torrent with {len(trackers)} trackers, "
            f"{torrent.piece_count} pieces and {len(files)} files"
        )
        return torrent


def _optional(value: Value, key: str, extract):
    found = optional_key(value, key)
    if found is None:
        return None
    return extract(found)


def get_trackers(value: Value) -> tuple[tuple[int, TrackerAddr], ...]:
    announce_list = optional_key(value, "announce-list")
    if announce_list is None:
        announce = extract_string(extract_key(value, "announce"))
        return ((0, classify(announce)),)

    trackers = []
    for tier, urls in enumerate(extract_list(announce_list)):
        for url in extract_list(urls):
            trackers.append((tier, classify(extract_string(url))))
    return tuple(trackers)


def get_piece_hashes(info: Value) -> tuple[PieceHash, ...]:
    pieces = extract_bytes(extract_key(info, "pieces"))
    if len(pieces) % PIECE_HASH_SIZE != 0:
        raise BadHashLengthError(len(pieces))
    return tuple(
        PieceHash(pieces[i : i + PIECE_HASH_SIZE])
        for i in range(0, len(pieces), PIECE_HASH_SIZE)
    )


def get_files(info: Value) -> tuple[FileInfo, ...]:
    name = extract_string(extract_key(info, "name"))
    files = optional_key(info, "files")
    if files is None:
        length = extract_int(extract_key(info, "length"))
        return (FileInfo(PurePosixPath(name), length),)

    directory = PurePosixPath(name)
    file_infos = []
    for entry in extract_list(files):
        length = extract_int(extract_key(entry, "length"))
        file_infos.append(FileInfo(directory.joinpath(*get_path(entry)), length))
    return tuple(file_infos)


def get_path(entry: Value) -> list[str]:
    path = extract_key(entry, "path")
    # Older tools wrote a single string instead of a list of segments
    if isinstance(path, ByteString):
        segments = extract_string(path).split("/")
    else:
        segments = [extract_string(segment) for segment in extract_list(path)]

    # Every segment must name one level below the torrent name
    if not segments or any(
        segment in ("", ".", "..") or "/" in segment for segment in segments
    ):
        raise BadPathError(segments)
    return segments


def extract_torrent(value: Value) -> Torrent:
    return Torrent.from_value(value)
