"""ASGI handler: translates ASGI scope/messages to masthead types.

The only component that touches raw ASGI directly. Builds the Request,
matches a route, binds a fresh Dispatcher to this request for dispatch
routes, and sends the resulting Response back through ASGI send().
"""

import logging

from masthead._internal.asgi import Receive, Scope, Send
from masthead._internal.invoke import invoke
from masthead.config import SiteDefaults
from masthead.dispatch import DispatchContext, Dispatcher, PageRenderer, ResponseBuilder
from masthead.errors import DispatchError, HTTPError
from masthead.http.request import Request
from masthead.http.response import Response
from masthead.routing.route import RouteKind, RouteMatch
from masthead.routing.router import Router
from masthead.server.sender import send_response
from masthead.store import DocumentStore

logger = logging.getLogger("masthead.server")


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    store: DocumentStore,
    renderer: PageRenderer,
    defaults: SiteDefaults,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        match = router.match(request.method, request.path)
        response = await _invoke_route(
            match,
            request.with_path_params(match.path_params),
            store=store,
            renderer=renderer,
            defaults=defaults,
        )
    except HTTPError as exc:
        logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
        response = Response(body=exc.detail or f"Error {exc.status}", status=exc.status)
        response = response.with_content_type("text/plain; charset=utf-8")
        for name, value in exc.headers:
            response = response.with_header(name, value)
    except Exception as exc:
        logger.exception("500 %s %s", request.method, request.path)
        body = f"Internal Server Error: {exc}" if debug else "Internal Server Error"
        response = Response(body=body, status=500, content_type="text/plain; charset=utf-8")

    await send_response(response, send, head=request.method == "HEAD")


async def _invoke_route(
    match: RouteMatch,
    request: Request,
    *,
    store: DocumentStore,
    renderer: PageRenderer,
    defaults: SiteDefaults,
) -> Response:
    """Call the matched handler according to its route kind."""
    route = match.route

    if route.kind is RouteKind.ENDPOINT:
        result = await invoke(route.handler, request, store)
        if not isinstance(result, Response):
            msg = f"Endpoint {route.path!r} returned {type(result).__name__}, not Response"
            raise TypeError(msg)
        return result

    builder = ResponseBuilder()
    dispatcher = Dispatcher(DispatchContext(request, builder), defaults, renderer)
    await invoke(route.handler, request, store, dispatcher)
    if not dispatcher.done:
        msg = f"Handler for {route.path!r} returned without dispatching a response"
        logger.error(msg)
        raise DispatchError(msg)
    return builder.response
