"""HelixDB Python Client.

A Python client for running HelixDB queries via its HTTP/JSON gateway.

Usage:
    from helixdb import Dest, HelixClient, Ref

    client = HelixClient("http://localhost:6969")

    # Decode the whole response into a dataclass
    created = CreateUserResponse()
    client.query("create_user", data={"name": "Alice"}).scan(created)

    # Decode selected top-level fields
    users = Ref(list[User])
    client.query("get_users").scan(Dest("users", users))

    # Untyped access
    result = client.query("create_users", data={"users": [...]}).as_map()

    # Raw body, errors returned instead of raised
    body, error = client.query("delete_user", data={"id": user_id}).raw()
"""

from .client import AsyncHelixClient, HelixClient
from .encoding import classify_input, marshal_input
from .exceptions import (
    BodyReadError,
    DecodeError,
    EncodeError,
    FieldDecodeError,
    FieldNotFound,
    HelixError,
    HTTPStatusError,
    InvalidArgumentType,
    InvalidJSONBytes,
    InvalidJSONString,
    NilDestination,
    NoDestination,
    NotAPointer,
    RequestBuildError,
    ScanError,
    SequenceNotAllowed,
    TransportError,
    UnsupportedShape,
)
from .response import HelixResponse
from .types import Dest, InputKind, QueryOptions, Ref

__version__ = "0.1.0"
__all__ = [
    "HelixClient",
    "AsyncHelixClient",
    "HelixResponse",
    "QueryOptions",
    "Dest",
    "Ref",
    "InputKind",
    "classify_input",
    "marshal_input",
    "HelixError",
    "EncodeError",
    "InvalidJSONString",
    "InvalidJSONBytes",
    "UnsupportedShape",
    "SequenceNotAllowed",
    "RequestBuildError",
    "TransportError",
    "BodyReadError",
    "HTTPStatusError",
    "DecodeError",
    "ScanError",
    "NoDestination",
    "NilDestination",
    "NotAPointer",
    "FieldNotFound",
    "FieldDecodeError",
    "InvalidArgumentType",
]
