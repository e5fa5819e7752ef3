"""Type definitions for HelixDB client."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class InputKind(Enum):
    """Shape of a query input, decided once before encoding."""

    NIL = "nil"
    JSON_TEXT = "json_text"
    JSON_BYTES = "json_bytes"
    ENCODABLE = "encodable"
    SEQUENCE = "sequence"
    UNSUPPORTED = "unsupported"


@dataclass
class QueryOptions:
    """Options for a single query.

    Attributes:
        data: Request payload. ``None``, a JSON string or bytes, a dataclass
            instance or a mapping.
        target: Expected result type. Carried with the request but not yet
            used when decoding.
    """

    data: Any = None
    target: Any = None


class Ref(Generic[T]):
    """Mutable box used as a scan destination.

    Args:
        type_: Type the decoded JSON is converted to (``Any`` keeps plain
            JSON values).
        value: Initial value.

    Example:
        >>> users = Ref(list[User])
        >>> client.query("get_users").scan(Dest("users", users))
        >>> users.value[0].name
    """

    def __init__(self, type_: Any = Any, value: T | None = None):
        self.type = type_
        self.value = value

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


@dataclass(frozen=True)
class Dest:
    """Decode the top-level JSON key ``name`` into ``target``."""

    name: str
    target: Any
