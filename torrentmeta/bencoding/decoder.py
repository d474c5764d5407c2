import logging

from torrentmeta.bencoding.errors import (
    IntegerOverflowError,
    InsufficientBytesError,
    InvalidDigitsError,
    NestingTooDeepError,
    UnexpectedByteError,
    UnexpectedEndError,
)
from torrentmeta.bencoding.value import ByteString, Dict, Int, List, Value

logger = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
MAX_DEPTH = 256

DIGITS = b"0123456789"


class BencodeDecoder:
    """
    Recursive-descent decoder for bencoded data.

    Only the bytes needed for one top-level value are consumed; anything
    after it is left alone and `position` tells how far decoding got.
    """

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.position = 0
        self._depth = 0

    def decode(self) -> Value:
        value = self._parse_value()
        logger.debug(
            f"Decoded {value.kind} from {self.position} of {len(self.data)} bytes"
        )
        return value

    def _peek(self, expected: str) -> bytes:
        if self.position >= len(self.data):
            raise UnexpectedEndError(self.position, expected)
        return self.data[self.position : self.position + 1]

    def _expect(self, delimiter: bytes) -> None:
        found = self._peek(f"'{delimiter.decode()}'")
        if found != delimiter:
            raise UnexpectedByteError(self.position, delimiter, found)
        self.position += 1

    def _digits(self) -> bytes:
        """Consumes a non-empty run of ASCII digits."""
        start = self.position
        end = start
        while end < len(self.data) and self.data[end] in DIGITS:
            end += 1
        if end == start:
            found = self.data[start : start + 1] or None
            if found is None:
                raise UnexpectedEndError(start, "a digit")
            raise InvalidDigitsError(start, found)
        self.position = end
        return self.data[start:end]

    def _parse_value(self) -> Value:
        lead = self._peek("a value")
        if lead == b"i":
            return self._parse_int()
        if lead == b"l":
            return self._parse_list()
        if lead == b"d":
            return self._parse_dict()
        if lead in DIGITS:
            return self._parse_bytes()
        raise UnexpectedByteError(self.position, "one of 'i', 'l', 'd' or a digit", lead)

    def _parse_int(self) -> Int:
        start = self.position
        self._expect(b"i")
        negative = self._peek("a digit or '-'") == b"-"
        if negative:
            self.position += 1
        digits = self._digits()
        self._expect(b"e")

        number = _to_int(digits, start, negative)
        if not INT64_MIN <= number <= INT64_MAX:
            raise IntegerOverflowError(start, b"-" + digits if negative else digits)
        return Int(number)

    def _parse_bytes(self) -> ByteString:
        start = self.position
        length = _to_int(self._digits(), start)
        self._expect(b":")
        remaining = len(self.data) - self.position
        if length > remaining:
            raise InsufficientBytesError(self.position, length, remaining)
        value = self.data[self.position : self.position + length]
        self.position += length
        return ByteString(value)

    def _enter(self) -> None:
        if self._depth >= MAX_DEPTH:
            raise NestingTooDeepError(self.position, MAX_DEPTH)
        self._depth += 1

    def _parse_list(self) -> List:
        self._enter()
        self._expect(b"l")
        items = []
        # Peek for the terminator first so a broken element is never read as the end
        while self._peek("a list element or 'e'") != b"e":
            items.append(self._parse_value())
        self.position += 1
        self._depth -= 1
        return List(items)

    def _parse_dict(self) -> Dict:
        self._enter()
        self._expect(b"d")
        entries = {}
        while self._peek("a dictionary key or 'e'") != b"e":
            key = self._parse_bytes()
            entries[key.value] = self._parse_value()
        self.position += 1
        self._depth -= 1
        return Dict(entries)


def _to_int(digits: bytes, position: int, negative: bool = False) -> int:
    # Leading zeros are folded, more than 19 significant digits never fit in 64 bits
    significant = digits.lstrip(b"0")
    if len(significant) > 19:
        raise IntegerOverflowError(position, b"-" + digits if negative else digits)
    number = int(significant or b"0")
    return -number if negative else number


def decode(data: bytes) -> Value:
    """
    Decodes one bencoded value from the start of `data`.

    Raises:
        DecodeError: If the bytes are not valid bencoding.
    """
    return BencodeDecoder(data).decode()
