class DecodeError(Exception):
    """Raised when a byte buffer is not valid bencoding."""

    def __init__(self, position: int, message: str) -> None:
        self.position = position
        super().__init__(f"{message} at position {position}")


class UnexpectedEndError(DecodeError):
    def __init__(self, position: int, expected: str) -> None:
        self.expected = expected
        super().__init__(position, f"unexpected end of input, expected {expected}")


class InvalidDigitsError(DecodeError):
    def __init__(self, position: int, found: bytes | None) -> None:
        self.found = found
        super().__init__(position, f"expected a digit, found {found!r}")


class UnexpectedByteError(DecodeError):
    def __init__(self, position: int, expected: bytes | str, found: bytes) -> None:
        self.expected = expected
        self.found = found
        super().__init__(position, f"expected {expected!r}, found {found!r}")


class InsufficientBytesError(DecodeError):
    def __init__(self, position: int, declared: int, remaining: int) -> None:
        self.declared = declared
        self.remaining = remaining
        super().__init__(
            position,
            f"byte string declares {declared} bytes but only {remaining} remain",
        )


class IntegerOverflowError(DecodeError):
    def __init__(self, position: int, digits: bytes) -> None:
        self.digits = digits
        super().__init__(
            position, f"integer {digits.decode('ascii')} does not fit in 64 bits"
        )


class NestingTooDeepError(DecodeError):
    def __init__(self, position: int, limit: int) -> None:
        self.limit = limit
        super().__init__(position, f"containers nested deeper than {limit} levels")
