"""Custom exception hierarchy for pycartelera."""

from __future__ import annotations


class CarteleraError(Exception):
    """Base exception for all pycartelera errors."""


class CarteleraConfigError(CarteleraError):
    """Invalid or missing configuration."""


class CarteleraValidationError(CarteleraError, ValueError):
    """A local precondition was violated (e.g. a record without an id).

    Always raised synchronously to the caller; never retried.
    """


class CarteleraNotFoundError(CarteleraError):
    """No record exists for the requested id (remote, local, or tombstoned).

    Only the admin helpers raise this.  Regular reads represent a missing
    record as ``None``.
    """


class CarteleraRequestError(CarteleraError):
    """The request could not be built, e.g. the payload is not JSON-serializable."""


class CarteleraResponseError(CarteleraError):
    """The remote answered 2xx but the body could not be decoded."""

    def __init__(self, message: str, *, endpoint: str = "", body: str = "") -> None:
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)


class CarteleraTransportError(CarteleraError):
    """Remote call failed.

    ``status_code`` is ``None`` when no HTTP response was received at all
    (DNS failure, refused connection, reset, CORS-style opaque failure).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)

    @property
    def network_failure(self) -> bool:
        """Whether the failure happened below HTTP (no status received)."""
        return self.status_code is None


class CarteleraHttpError(CarteleraTransportError):
    """Remote answered with a non-2xx status.

    ``body`` carries the raw response text for display.
    """


class BlockedWriteError(CarteleraTransportError):
    """A remote write failure classified as recoverable by a local fallback.

    The fallback router never raises this; it attaches it to the
    ``local-fallback`` result so callers can inspect what was absorbed.
    """

    def __init__(self, message: str, *, operation: str, cause: CarteleraTransportError) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(
            message,
            status_code=cause.status_code,
            endpoint=cause.endpoint,
            body=cause.body,
        )
