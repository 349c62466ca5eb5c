"""Action dispatch: the one way a handler produces an HTTP effect.

Handlers never build responses. The route-table glue binds a fresh
``Dispatcher`` to each request's ``DispatchContext`` and hands it to the
handler, which calls it exactly once::

    async def front_page(request, store, dispatch):
        posts = await store.scan("posts")
        dispatch("render", "index", {"posts": posts.items})

    def logout(request, store, dispatch):
        dispatch("cookie", "session", "", {"max_age": 0}, "/")

Actions:

- ``render(page, fields)``: merge the view model, hand it to the renderer.
- ``redirect(target)``: 302 to *target*.
- ``cookie(name, value, options, target)``: set a cookie, then fall
  through to the same redirect path as ``redirect``.

An unknown action is logged and ignored. It never raises into the
handler and never counts as the terminal action.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

from masthead.errors import DispatchError
from masthead.http.response import Response
from masthead.view_model import ViewModel, merge_view_model

if TYPE_CHECKING:
    from masthead.config import SiteDefaults
    from masthead.http.request import Request

logger = logging.getLogger("masthead.dispatch")


class Action(StrEnum):
    """Recognised dispatch action tags."""

    RENDER = "render"
    REDIRECT = "redirect"
    COOKIE = "cookie"


class PageRenderer(Protocol):
    """Rendering collaborator: page name + view model → HTML."""

    def __call__(self, page: str, view_model: ViewModel) -> str: ...


class ResponseHandle(Protocol):
    """Outbound side of a dispatch context."""

    def set_cookie(self, name: str, value: str, **options: Any) -> None: ...
    def redirect(self, target: str) -> None: ...
    def send(self, body: str, content_type: str = ...) -> None: ...


class ResponseBuilder:
    """``ResponseHandle`` that accumulates effects into an immutable Response."""

    __slots__ = ("response",)

    def __init__(self) -> None:
        self.response = Response()

    def set_cookie(self, name: str, value: str, **options: Any) -> None:
        self.response = self.response.with_cookie(name, value, **options)

    def redirect(self, target: str) -> None:
        self.response = self.response.with_redirect(target)

    def send(self, body: str, content_type: str = "text/html; charset=utf-8") -> None:
        self.response = self.response.with_body(body).with_content_type(content_type)


@dataclass(frozen=True, slots=True)
class DispatchContext:
    """One request's inbound request and outbound response handle."""

    request: Request | None
    response: ResponseHandle


class Dispatcher:
    """Command object bound to a single dispatch context.

    Call it with an action tag and that action's arguments, or call the
    named methods directly. The first terminal action wins; a second one
    raises ``DispatchError``.
    """

    __slots__ = ("_done", "context", "defaults", "renderer")

    def __init__(
        self,
        context: DispatchContext,
        defaults: SiteDefaults,
        renderer: PageRenderer,
    ) -> None:
        self.context = context
        self.defaults = defaults
        self.renderer = renderer
        self._done: Action | None = None

    @property
    def done(self) -> bool:
        """True once a terminal action has run."""
        return self._done is not None

    def __call__(self, action: str, *args: Any) -> None:
        match action:
            case Action.RENDER:
                self.render(*args)
            case Action.REDIRECT:
                self.redirect(*args)
            case Action.COOKIE:
                self.set_cookie_and_redirect(*args)
            case _:
                logger.warning("Unknown dispatch action %r; no response produced", action)

    def render(self, page: str, fields: Mapping[str, Any] | None = None) -> None:
        """Render *page* with the site defaults merged under *fields*."""
        self._claim(Action.RENDER)
        view_model = merge_view_model(self.defaults, self.context.request, fields)
        self.context.response.send(self.renderer(page, view_model))

    def redirect(self, target: str) -> None:
        """Redirect to *target*."""
        self._claim(Action.REDIRECT)
        self._redirect(target)

    def set_cookie_and_redirect(
        self,
        name: str,
        value: str,
        options: Mapping[str, Any] | None,
        target: str,
    ) -> None:
        """Set a cookie, then redirect to *target* in the same invocation."""
        self._claim(Action.COOKIE)
        self.context.response.set_cookie(name, value, **(options or {}))
        self._redirect(target)

    def _redirect(self, target: str) -> None:
        self.context.response.redirect(target)

    def _claim(self, action: Action) -> None:
        if self._done is not None:
            msg = f"Dispatcher already completed with {self._done!r}; refusing {action!r}"
            raise DispatchError(msg)
        self._done = action
