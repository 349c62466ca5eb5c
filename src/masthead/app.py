"""Masthead application class: the route table.

Mutable during setup (route registration, lifecycle hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

from __future__ import annotations

import inspect
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from kida import Environment

from masthead._internal.asgi import Receive, Scope, Send
from masthead._internal.types import DispatchHandler, EndpointHandler
from masthead.config import AppConfig
from masthead.routing.route import Route, RouteKind
from masthead.routing.router import Router
from masthead.server.handler import handle_request
from masthead.store import DocumentStore, MemoryStore
from masthead.templating.integration import (
    DIRECTIVE_FILTERS,
    KidaRenderer,
    create_environment,
    directive_globals,
)


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    handler: Callable[..., Any]
    methods: list[str] | None
    kind: RouteKind
    name: str | None


class App:
    """The masthead application.

    Two kinds of routes:

    - ``@app.route(path)`` registers a dispatch handler called as
      ``handler(request, store, dispatch)``. It must call ``dispatch``
      exactly once.
    - ``@app.endpoint(path)`` registers a handler called as
      ``handler(request, store)`` that returns a ``Response`` itself.

    Usage::

        app = App(AppConfig(), store=MemoryStore({"posts": []}))

        @app.route("/about")
        def about(request, store, dispatch):
            dispatch("render", "about")
    """

    __slots__ = (
        "_custom_kida_env",
        "_freeze_lock",
        "_frozen",
        "_kida_env",
        "_pending_routes",
        "_renderer",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "_template_loader",
        "config",
        "store",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        store: DocumentStore | None = None,
        kida_env: Environment | None = None,
        template_loader: Any = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.store: DocumentStore = store if store is not None else MemoryStore()
        self._pending_routes: list[_PendingRoute] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._custom_kida_env: Environment | None = kida_env
        self._template_loader: Any = template_loader

        # Compiled state: set during _freeze()
        self._router: Router | None = None
        self._kida_env: Environment | None = None
        self._renderer: KidaRenderer | None = None

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[DispatchHandler], DispatchHandler]:
        """Register a dispatch handler via decorator.

        Args:
            path: URL path pattern. Use ``{param}`` for path parameters
                and ``{param:path}`` for a catch-all.
            methods: HTTP methods. Defaults to ``["GET"]``.
            name: Optional route name, shown by ``masthead routes``.
        """
        return self._register(path, methods, name, RouteKind.DISPATCH)

    def endpoint(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[EndpointHandler], EndpointHandler]:
        """Register a handler that builds its own ``Response``."""
        return self._register(path, methods, name, RouteKind.ENDPOINT)

    def _register(
        self,
        path: str,
        methods: list[str] | None,
        name: str | None,
        kind: RouteKind,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._pending_routes.append(_PendingRoute(path, func, methods, kind, name))
            return func

        return decorator

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """Compiled routes (freezes the app)."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router.routes

    @property
    def renderer(self) -> KidaRenderer:
        """The kida page renderer (freezes the app)."""
        self._ensure_frozen()
        assert self._renderer is not None
        return self._renderer

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start a development server with pounce."""
        from masthead.server.dev import run_dev_server

        self._ensure_frozen()
        run_dev_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=self.config.debug,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._router is not None
        assert self._renderer is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            store=self.store,
            renderer=self._renderer,
            defaults=self.config.site,
            debug=self.config.debug,
        )

    async def run_startup_hooks(self) -> None:
        for hook in self._startup_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def run_shutdown_hooks(self) -> None:
        for hook in self._shutdown_hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request), then
        runs the registered hooks and signals completion to the server.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    await self.run_startup_hooks()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await self.run_shutdown_hooks()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            router.add(
                Route(
                    path=pending.path,
                    handler=pending.handler,
                    methods=frozenset(m.upper() for m in (pending.methods or ["GET"])),
                    kind=pending.kind,
                    name=pending.name,
                )
            )
        router.compile()
        self._router = router

        if self._custom_kida_env is not None:
            env = self._custom_kida_env
            env.update_filters(DIRECTIVE_FILTERS)
            for name, value in directive_globals(env).items():
                env.add_global(name, value)
        else:
            env = create_environment(self.config, self._template_loader)
        self._kida_env = env
        self._renderer = KidaRenderer(env)

        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
