"""Masthead exception hierarchy.

Shared across Router, App, dispatcher, store, and handler pipeline so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class MastheadError(Exception):
    """Base for all masthead-specific errors."""


class ConfigurationError(MastheadError):
    """Raised when app configuration is invalid.

    Typically raised by ``AppConfig.from_env()`` or ``App._freeze()``
    at startup.
    """


class DispatchError(MastheadError):
    """Raised when a handler breaks the exactly-once dispatch contract.

    A dispatcher accepts one terminal action (render, redirect, or
    cookie-then-redirect). A second terminal action, or none at all once
    the handler has returned, is a programming error in the handler.
    """


class StoreError(MastheadError):
    """Raised when a document store operation fails."""

    def __init__(self, collection: str, detail: str = "") -> None:
        self.collection = collection
        self.detail = detail
        super().__init__(f"{collection}: {detail}" if detail else collection)


@dataclass(frozen=True, slots=True)
class HTTPError(MastheadError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or handlers. The ASGI handler catches these
    and turns them into a plain-text response with the given status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
