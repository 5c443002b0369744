"""Public exceptions for the cloudbase.io SDK."""


class CloudbaseError(Exception):
    """Base exception for all cloudbase SDK errors."""


class CloudbaseAPIError(CloudbaseError):
    """Error from the cloudbase.io API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CloudbaseConfigError(CloudbaseError):
    """Configuration error (missing env vars, invalid config)."""


class CloudbaseValidationError(CloudbaseError):
    """Validation error for request/response data."""


class TransportError(CloudbaseError):
    """Network-level failure: unreachable host, TLS failure, timeout."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class DecodeError(CloudbaseError):
    """The response body could not be turned into a response envelope."""


class ParseError(DecodeError):
    """The text is not well-formed JSON."""


class AmbiguousEnvelopeError(DecodeError):
    """The response has no entry for the function that was called."""

    def __init__(self, function: str) -> None:
        super().__init__(f"response envelope has no entry for function '{function}'")
        self.function = function
