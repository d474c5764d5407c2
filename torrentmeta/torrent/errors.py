from torrentmeta.bencoding.value import Value

PREVIEW_LENGTH = 60


def preview(value: Value) -> str:
    text = str(value)
    if len(text) > PREVIEW_LENGTH:
        return text[:PREVIEW_LENGTH] + "..."
    return text


class TorrentError(Exception):
    """Raised when a decoded tree does not describe a valid torrent."""


class ExtractionError(TorrentError):
    """
    A value in the tree did not have the shape we asked for.

    Args:
        found (Value): The value that failed the check
    """

    def __init__(self, found: Value, message: str) -> None:
        self.found = found
        super().__init__(message)


class ExpectedIntError(ExtractionError):
    def __init__(self, found: Value) -> None:
        super().__init__(found, f"bencoding {preview(found)} is not an integer")


class ExpectedByteStringError(ExtractionError):
    def __init__(self, found: Value) -> None:
        super().__init__(found, f"bencoding {preview(found)} is not a string")


class ExpectedListError(ExtractionError):
    def __init__(self, found: Value) -> None:
        super().__init__(found, f"bencoding {preview(found)} is not a list")


class ExpectedDictError(ExtractionError):
    def __init__(self, found: Value) -> None:
        super().__init__(found, f"bencoding {preview(found)} is not a dictionary")


class MissingKeyError(ExtractionError):
    def __init__(self, found: Value, key: str) -> None:
        self.key = key
        super().__init__(found, f"bencoding {preview(found)} does not contain the key {key!r}")


class NotUTF8Error(ExtractionError):
    def __init__(self, found: Value, reason: UnicodeDecodeError) -> None:
        self.reason = reason
        super().__init__(found, f"bencoding {preview(found)} is not valid UTF8 because: {reason}")


class ExceedsSystemTimeError(TorrentError):
    def __init__(self, seconds: int) -> None:
        self.seconds = seconds
        super().__init__(f"integer {seconds} exceeds UNIX time bounds")


class BadHashLengthError(TorrentError):
    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"hash length {length} is not a multiple of 20")


class BadPieceLengthError(TorrentError):
    def __init__(self, piece_length: int) -> None:
        self.piece_length = piece_length
        super().__init__(f"piece length {piece_length} is not positive")


class BadPathError(TorrentError):
    def __init__(self, segments: list[str]) -> None:
        self.segments = segments
        super().__init__(f"file path {segments!r} does not stay under the torrent name")
