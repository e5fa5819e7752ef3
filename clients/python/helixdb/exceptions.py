"""HelixDB client exceptions."""


class HelixError(Exception):
    """Base exception for HelixDB errors."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class EncodeError(HelixError):
    """Query input could not be turned into a JSON payload."""

    pass


class InvalidJSONString(EncodeError):
    """String input is not valid JSON."""

    def __init__(self) -> None:
        super().__init__("provided string is not valid JSON")


class InvalidJSONBytes(EncodeError):
    """Byte input is not valid JSON."""

    def __init__(self) -> None:
        super().__init__("provided byte slice is not valid JSON")


class UnsupportedShape(EncodeError):
    """Input is neither a record nor a mapping."""

    def __init__(self, kind: str):
        super().__init__(
            f"unsupported input data type: {kind}. Input must be a dataclass or a mapping"
        )
        self.kind = kind


class SequenceNotAllowed(EncodeError):
    """Top-level sequences cannot become a keyed query payload."""

    def __init__(self) -> None:
        super().__init__(
            "input data cannot be a list or tuple; it must be a dataclass or "
            "mapping to produce a key-value object"
        )


class RequestBuildError(HelixError):
    """The HTTP request could not be constructed."""

    pass


class TransportError(HelixError):
    """Failed to reach the HelixDB gateway."""

    pass


class BodyReadError(HelixError):
    """The response body could not be read."""

    pass


class HTTPStatusError(HelixError):
    """Gateway answered with a non-2xx status.

    The message is always ``"<status>: <body>"``.
    """

    def __init__(self, status_code: int, body: str):
        super().__init__(f"{status_code}: {body}", str(status_code))
        self.status_code = status_code
        self.body = body


class DecodeError(HelixError):
    """Response JSON does not fit the requested shape."""

    pass


class ScanError(HelixError):
    """Invalid scan destination or field lookup."""

    pass


class NoDestination(ScanError):
    def __init__(self) -> None:
        super().__init__("scan destination is expected")


class NilDestination(ScanError):
    def __init__(self) -> None:
        super().__init__("scan destination cannot be None")


class NotAPointer(ScanError):
    def __init__(self, kind: str):
        super().__init__(
            f"scan destination must be writable in place (Ref, dict, list or dataclass instance), got {kind}"
        )
        self.kind = kind


class FieldNotFound(ScanError):
    def __init__(self, name: str):
        super().__init__(f'field "{name}" not found')
        self.name = name


class FieldDecodeError(ScanError):
    def __init__(self, name: str, cause: Exception):
        super().__init__(f'failed to scan field "{name}": {cause}')
        self.name = name
        self.cause = cause


class InvalidArgumentType(ScanError):
    def __init__(self, kind: str):
        super().__init__(
            f"invalid scan argument type {kind} (expected a single destination or Dest(...) descriptors)"
        )
        self.kind = kind
