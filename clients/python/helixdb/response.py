"""Query response holder and decoding strategies."""

from dataclasses import dataclass
from typing import Any

from .decoding import decode_into, parse_json, validate_destination
from .exceptions import (
    DecodeError,
    FieldDecodeError,
    FieldNotFound,
    HelixError,
    InvalidArgumentType,
    NoDestination,
)
from .types import Dest


@dataclass(frozen=True)
class HelixResponse:
    """Outcome of one query: the response body or the error that ended it.

    Exactly one of ``content`` and ``error`` is meaningful. Once ``error`` is
    set every decoding method raises it again without touching ``content``.

    Example:
        >>> users = Ref(list[User])
        >>> count = Ref(int)
        >>> client.query("get_users").scan(
        ...     Dest("users", users),
        ...     Dest("total_count", count),
        ... )
    """

    content: bytes | None = None
    error: HelixError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raw(self) -> tuple[bytes | None, HelixError | None]:
        """Return the stored body and error unchanged."""
        return self.content, self.error

    def as_map(self) -> dict[str, Any]:
        """Decode the body as an untyped JSON object.

        Raises:
            HelixError: The stored query error, if any.
            DecodeError: If the body is not a JSON object.
        """
        self._raise_for_error()

        data = parse_json(self.content)
        if not isinstance(data, dict):
            raise DecodeError(
                f"cannot decode JSON {type(data).__name__} into dict"
            )
        return data

    def scan(self, *targets: Any) -> None:
        """Decode the body into one destination or into named fields.

        Args:
            *targets: Either a single destination (``Ref``, ``dict``,
                ``list`` or dataclass instance) that receives the whole body,
                or one or more ``Dest(name, destination)`` descriptors, each
                receiving one top-level key. Fields are decoded in argument
                order; a failure stops the scan and leaves earlier fields
                written.

        Raises:
            NoDestination: No targets given.
            HelixError: The stored query error, if any.
            NilDestination: A destination is ``None``.
            NotAPointer: A destination cannot be written in place.
            InvalidArgumentType: Several targets given and not all are ``Dest``.
            FieldNotFound: A named field is absent from the body.
            FieldDecodeError: A named field does not fit its destination.
            DecodeError: The body does not fit the destination.
        """
        if not targets:
            raise NoDestination()

        self._raise_for_error()

        if len(targets) == 1 and not isinstance(targets[0], Dest):
            target = targets[0]
            validate_destination(target)
            decode_into(target, parse_json(self.content))
            return

        for target in targets:
            if not isinstance(target, Dest):
                raise InvalidArgumentType(type(target).__name__)

        fields = self._fields()
        for dest in targets:
            self._scan_field(dest, fields)

    def _raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error

    def _fields(self) -> dict[str, Any]:
        try:
            data = parse_json(self.content)
        except DecodeError as e:
            raise DecodeError(f"invalid json response: {e.message}") from e
        if not isinstance(data, dict):
            raise DecodeError(
                f"invalid json response: expected an object, got {type(data).__name__}"
            )
        return data

    @staticmethod
    def _scan_field(dest: Dest, fields: dict[str, Any]) -> None:
        validate_destination(dest.target)

        if dest.name not in fields:
            raise FieldNotFound(dest.name)

        try:
            decode_into(dest.target, fields[dest.name])
        except DecodeError as e:
            raise FieldDecodeError(dest.name, e) from e
