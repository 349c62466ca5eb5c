"""Immutable HTTP request.

Frozen metadata with async body access. Handlers receive this as the
first argument; templates see it as ``req`` in the view model.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from masthead._internal.asgi import Receive, Scope
from masthead.http.cookies import parse_cookies
from masthead.http.headers import Headers
from masthead.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Cookies are parsed once in ``from_asgi`` and stored as a frozen
    field. Path parameters are attached by the router via
    ``with_path_params`` after a route matches.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: Mapping[str, str]
    client: tuple[str, int] | None
    cookies: Mapping[str, str]

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: body cache (the dict is mutable, the field reference is not)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def url(self) -> str:
        """Request path plus query string."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    async def body(self) -> bytes:
        """Read the full request body.

        The ASGI receive is consumed once; later calls return the cache.
        """
        if "_body" not in self._cache:
            self._cache["_body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["_body"]

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as UTF-8 text."""
        return (await self.body()).decode("utf-8")

    def with_path_params(self, path_params: Mapping[str, str]) -> Request:
        """Return a copy carrying the matched route's path parameters."""
        return replace(self, path_params=dict(path_params))

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = Headers(tuple(scope.get("headers", ())))
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=headers,
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            client=tuple(client) if client else None,
            cookies=parse_cookies(headers.get("cookie", "")),
            _receive=receive,
        )
