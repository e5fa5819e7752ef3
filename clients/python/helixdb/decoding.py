"""Scan destinations and typed decoding of JSON values.

A destination is anything that can be written in place: a ``Ref`` box, a
``dict``, a ``list`` or a (non-frozen) dataclass instance. Typed conversion
follows the type hints of the destination, with the same leniency as most
JSON decoders: unknown keys are ignored, absent keys keep their default and
``null`` leaves the destination untouched.
"""

import dataclasses
import json
import types
from collections.abc import Iterator
from typing import Any, Union, get_args, get_origin, get_type_hints

from .encoding import json_name
from .exceptions import DecodeError, NilDestination, NotAPointer
from .types import Ref


def parse_json(content: bytes | None) -> Any:
    """Decode a response body, raising ``DecodeError`` with the parser message."""
    try:
        return json.loads(content or b"")
    except ValueError as e:
        raise DecodeError(str(e)) from e


def _json_kind(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)


def _mismatch(value: Any, tp: Any) -> DecodeError:
    return DecodeError(f"cannot decode JSON {_json_kind(value)} into {_type_name(tp)}")


def _is_instance(obj: Any) -> bool:
    return dataclasses.is_dataclass(obj) and not isinstance(obj, type)


def _is_frozen(obj: Any) -> bool:
    params = getattr(type(obj), "__dataclass_params__", None)
    return bool(params and params.frozen)


def validate_destination(target: Any) -> None:
    """Ensure ``target`` can be decoded into.

    Raises:
        NilDestination: ``target`` is ``None``.
        NotAPointer: ``target`` cannot be written in place.
    """
    if target is None:
        raise NilDestination()
    if isinstance(target, (Ref, dict, list)):
        return
    if _is_instance(target) and not _is_frozen(target):
        return
    raise NotAPointer(type(target).__name__)


def _matched_fields(cls: type, obj: dict[str, Any]) -> Iterator[tuple[dataclasses.Field, Any]]:
    # Exact key first, then case-insensitive.
    lowered = {}
    for key in obj:
        lowered.setdefault(key.lower(), key)
    for f in dataclasses.fields(cls):
        name = json_name(f)
        if name in obj:
            yield f, obj[name]
        elif name.lower() in lowered:
            yield f, obj[lowered[name.lower()]]


def _convert_fields(cls: type, obj: dict[str, Any]) -> dict[str, Any]:
    hints = get_type_hints(cls)
    converted = {}
    for f, raw in _matched_fields(cls, obj):
        if raw is None:
            continue
        try:
            converted[f.name] = convert(raw, hints.get(f.name, Any))
        except DecodeError as e:
            raise DecodeError(f"{cls.__name__}.{f.name}: {e.message}") from e
    return converted


def zero_value(tp: Any) -> Any:
    """Empty value for ``tp``, used for dataclass fields absent from the JSON."""
    origin = get_origin(tp)
    if tp is bool:
        return False
    if tp is int:
        return 0
    if tp is float:
        return 0.0
    if tp is str:
        return ""
    if tp is list or origin is list:
        return []
    if tp is dict or origin is dict:
        return {}
    if dataclasses.is_dataclass(tp) and isinstance(tp, type):
        return _build_dataclass(tp, {})
    return None


def _build_dataclass(cls: type, obj: dict[str, Any]) -> Any:
    kwargs = _convert_fields(cls, obj)
    hints = get_type_hints(cls)
    for f in dataclasses.fields(cls):
        if not f.init:
            kwargs.pop(f.name, None)
            continue
        missing = f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
        if f.name not in kwargs and missing:
            kwargs[f.name] = zero_value(hints.get(f.name, Any))
    return cls(**kwargs)


def convert(value: Any, tp: Any) -> Any:
    """Convert a plain JSON value into an instance of ``tp``."""
    if tp is Any or tp is object:
        return value

    origin = get_origin(tp)
    if origin is Union or origin is types.UnionType:
        args = get_args(tp)
        if value is None and type(None) in args:
            return None
        for arg in args:
            if arg is type(None):
                continue
            try:
                return convert(value, arg)
            except DecodeError:
                continue
        raise _mismatch(value, tp)

    if value is None:
        return zero_value(tp)

    if tp is list or origin is list:
        if not isinstance(value, list):
            raise _mismatch(value, tp)
        (item_type,) = get_args(tp) or (Any,)
        return [convert(v, item_type) for v in value]

    if tp is dict or origin is dict:
        if not isinstance(value, dict):
            raise _mismatch(value, tp)
        args = get_args(tp)
        value_type = args[1] if len(args) == 2 else Any
        return {k: convert(v, value_type) for k, v in value.items()}

    if dataclasses.is_dataclass(tp) and isinstance(tp, type):
        if not isinstance(value, dict):
            raise _mismatch(value, tp)
        return _build_dataclass(tp, value)

    if tp is bool:
        if isinstance(value, bool):
            return value
    elif tp is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif tp is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif isinstance(tp, type) and isinstance(value, tp):
        return value

    raise _mismatch(value, tp)


def decode_into(target: Any, value: Any) -> None:
    """Write a decoded JSON value into a validated destination.

    JSON ``null`` leaves the destination untouched.
    """
    if value is None:
        return

    if isinstance(target, Ref):
        target.value = convert(value, target.type)
    elif isinstance(target, dict):
        if not isinstance(value, dict):
            raise _mismatch(value, dict)
        target.update(value)
    elif isinstance(target, list):
        if not isinstance(value, list):
            raise _mismatch(value, list)
        target[:] = value
    else:
        if not isinstance(value, dict):
            raise _mismatch(value, type(target))
        for name, converted in _convert_fields(type(target), value).items():
            setattr(target, name, converted)
