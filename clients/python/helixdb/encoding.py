"""Turn query inputs into JSON request payloads."""

import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from .exceptions import (
    EncodeError,
    InvalidJSONBytes,
    InvalidJSONString,
    SequenceNotAllowed,
    UnsupportedShape,
)
from .types import InputKind, Ref

EMPTY_OBJECT = b"{}"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def is_valid_json(text: str | bytes) -> bool:
    """Check that ``text`` is strict JSON (no NaN/Infinity)."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError:
            return False
    try:
        json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return False
    return True


def classify_input(data: Any) -> InputKind:
    """Classify a query input. ``Ref`` values are unwrapped once first."""
    if data is None:
        return InputKind.NIL
    if isinstance(data, str):
        return InputKind.JSON_TEXT
    if isinstance(data, (bytes, bytearray, memoryview)):
        return InputKind.JSON_BYTES

    if isinstance(data, Ref):
        data = data.value

    if isinstance(data, Mapping) or (
        dataclasses.is_dataclass(data) and not isinstance(data, type)
    ):
        return InputKind.ENCODABLE
    if isinstance(data, (list, tuple, set, frozenset, range)):
        return InputKind.SEQUENCE
    return InputKind.UNSUPPORTED


def json_name(f: dataclasses.Field) -> str:
    """Key used for a dataclass field on the wire."""
    return f.metadata.get("json", f.name)


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, mappings and refs into plain JSON values."""
    if isinstance(value, Ref):
        return to_jsonable(value.value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            json_name(f): to_jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def marshal_input(data: Any) -> bytes:
    """Produce the request body for ``data``.

    Raises:
        EncodeError: If ``data`` cannot be sent as a JSON object.
    """
    kind = classify_input(data)

    if kind is InputKind.NIL:
        return EMPTY_OBJECT
    elif kind is InputKind.JSON_TEXT:
        if not is_valid_json(data):
            raise InvalidJSONString()
        return data.encode("utf-8")
    elif kind is InputKind.JSON_BYTES:
        raw = bytes(data)
        if not is_valid_json(raw):
            raise InvalidJSONBytes()
        return raw
    elif kind is InputKind.ENCODABLE:
        try:
            return json.dumps(
                to_jsonable(data), separators=(",", ":"), allow_nan=False
            ).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise EncodeError(f"failed to encode input data: {e}") from e
    elif kind is InputKind.SEQUENCE:
        raise SequenceNotAllowed()
    else:
        value = data.value if isinstance(data, Ref) else data
        raise UnsupportedShape(type(value).__name__)
