from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping


class Value:
    """
    Base class of the decoded bencoding tree.

    A tree is built bottom-up by the decoder and never mutated afterwards,
    so it is always finite and acyclic.
    """

    kind = "value"


@dataclass(frozen=True)
class Int(Value):
    value: int

    kind = "integer"

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ByteString(Value):
    value: bytes

    kind = "byte string"

    def __post_init__(self):
        object.__setattr__(self, "value", bytes(self.value))

    def __str__(self) -> str:
        # Byte strings are not required to be text, display only
        return self.value.decode("utf-8", errors="replace")

    def __len__(self) -> int:
        return len(self.value)


@dataclass(frozen=True)
class List(Value):
    items: tuple = field(default=())

    kind = "list"

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))

    def __str__(self) -> str:
        return "[" + ", ".join(str(item) for item in self.items) + "]"

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)


@dataclass(frozen=True)
class Dict(Value):
    entries: Mapping[bytes, Value] = field(default_factory=dict)

    kind = "dictionary"

    def __post_init__(self):
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __hash__(self) -> int:
        return hash(frozenset(self.entries.items()))

    def __str__(self) -> str:
        pairs = (
            f"{ByteString(key)}: {self.entries[key]}" for key in sorted(self.entries)
        )
        return "{" + ", ".join(pairs) + "}"

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[bytes]:
        return iter(sorted(self.entries))

    def __contains__(self, key) -> bool:
        return _as_key(key) in self.entries

    def get(self, key, default=None):
        return self.entries.get(_as_key(key), default)


def _as_key(key) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    return bytes(key)
