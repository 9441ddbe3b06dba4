"""Exceptions raised by the Keep provider."""


class KeepProviderError(Exception):
    """Base class for every provider failure.

    Each subclass carries a short ``category`` label; ``detail`` is the
    human-readable part, including the raw upstream response where known.
    """

    category = "error"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"[{self.category}] {detail}")


class ConfigurationError(KeepProviderError):
    """Raised when provider settings cannot be resolved."""

    category = "configuration"


class TransportError(KeepProviderError):
    """Raised when a request to the Keep API cannot be completed."""

    category = "transport"


class APIError(TransportError):
    """Raised when the Keep API answers with a status >= 400.

    The body is kept as raw text; it may be HTML on server-side failures.
    """

    def __init__(self, method: str, path: str, status_code: int, body: str):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"{method} {path} failed with status {status_code}: {body}"
        )

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class DecodeError(KeepProviderError):
    """Raised when a response is not JSON or lacks an expected field."""

    category = "decode"

    def __init__(self, detail: str, body: str = ""):
        self.body = body
        if body:
            detail = f"{detail}; response: {body}"
        super().__init__(detail)


class NotFoundError(KeepProviderError):
    """Raised when a remote object does not exist."""

    category = "not_found"

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} with ID {identifier} not found")


class ResourceValidationError(KeepProviderError):
    """Raised when a resource model is rejected before any request is sent."""

    category = "validation"


class CSVParseError(ResourceValidationError):
    """Raised when csv_data is empty or not valid CSV."""


class CSVFieldCountError(ResourceValidationError):
    """Raised when a CSV record and the header disagree on field count."""

    def __init__(self, line: int, expected: int, got: int):
        self.line = line
        self.expected = expected
        self.got = got
        super().__init__(
            f"CSV record on line {line} has wrong number of fields: "
            f"expected {expected}, got {got}"
        )


class ReplacementRequiredError(KeepProviderError):
    """Raised when an update touches an attribute that cannot change in place."""

    category = "replace"

    def __init__(self, kind: str, attribute: str, old: str, new: str):
        self.kind = kind
        self.attribute = attribute
        super().__init__(
            f"{kind} attribute '{attribute}' cannot be changed in place "
            f"({old!r} -> {new!r}); the resource must be replaced"
        )
