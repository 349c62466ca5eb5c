"""Compiled router with trie-based path matching.

Static segments win over parameters, parameters win over catch-alls,
so ``/sitemap.xml`` is never swallowed by ``/{path:path}``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from masthead.errors import ConfigurationError, MethodNotAllowed, NotFound
from masthead.routing.params import CONVERTERS
from masthead.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/posts"               -> [PathSegment("posts")]
        "/posts/{post_id}"     -> [PathSegment("posts"), PathSegment("{post_id}", is_param=True)]
        "/{path:path}"         -> [PathSegment("{path:path}", is_param=True, param_type="path")]

    Raises:
        ConfigurationError: For ``<param>`` placeholders or unknown converters.
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route {path!r} uses <param> placeholders; "
                "masthead expects {param} (e.g. /posts/{post_id})."
            )
            raise ConfigurationError(msg)
        if not (part.startswith("{") and part.endswith("}")):
            segments.append(PathSegment(value=part))
            continue
        param_name, _, param_type = part[1:-1].partition(":")
        param_type = param_type or "str"
        if param_type not in CONVERTERS:
            msg = f"Unknown converter {param_type!r} in route {path!r}"
            raise ConfigurationError(msg)
        segments.append(
            PathSegment(
                value=part,
                is_param=True,
                param_name=param_name,
                param_type=param_type,
            )
        )
    return segments


@dataclass(slots=True)
class _Node:
    """A node in the route trie. Mutable during compilation only."""

    children: dict[str, _Node] = field(default_factory=dict)
    param: _ParamEdge | None = None
    catch_all: _CatchAllEdge | None = None
    routes: dict[str, Route] = field(default_factory=dict)


@dataclass(slots=True)
class _ParamEdge:
    name: str
    regex: re.Pattern[str]
    node: _Node


@dataclass(slots=True)
class _CatchAllEdge:
    """Consumes the remaining path."""

    name: str
    routes: dict[str, Route]


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/sitemap.xml", sitemap, frozenset({"GET"})))
        router.add(Route("/{path:path}", missing, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/sitemap.xml")
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _Node()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param and seg.param_type == "path":
                if node.catch_all is None:
                    node.catch_all = _CatchAllEdge(name=seg.param_name or "path", routes={})
                node.catch_all.routes.update(dict.fromkeys(route.methods, route))
                return

            if seg.is_param:
                if node.param is None:
                    pattern, _ = CONVERTERS[seg.param_type]
                    node.param = _ParamEdge(
                        name=seg.param_name or "",
                        regex=re.compile(f"^{pattern}$"),
                        node=_Node(),
                    )
                node = node.param.node
            else:
                node = node.children.setdefault(seg.value, _Node())

        node.routes.update(dict.fromkeys(route.methods, route))

    @property
    def routes(self) -> list[Route]:
        """Return every registered route, each once, in trie order."""
        result: list[Route] = []
        stack = [self._root]
        while stack:
            node = stack.pop(0)
            groups = [node.routes.values()]
            if node.catch_all is not None:
                groups.append(node.catch_all.routes.values())
            for group in groups:
                for route in group:
                    if not any(route is seen for seen in result):
                        result.append(route)
            stack.extend(node.children.values())
            if node.param is not None:
                stack.append(node.param.node)
        return result

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path against compiled routes.

        Raises ``NotFound`` if no route matches the path and
        ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        found = self._walk(self._root, parts, 0, {})
        if found is None:
            raise NotFound(f"No route matches {method} {path!r}")

        routes, params = found
        if method in routes:
            return RouteMatch(route=routes[method], path_params=params)
        if method == "HEAD" and "GET" in routes:
            return RouteMatch(route=routes["GET"], path_params=params)
        raise MethodNotAllowed(frozenset(routes))

    def _walk(
        self,
        node: _Node,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, Route], dict[str, str]] | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            if node.routes:
                return node.routes, params
            return None

        part = parts[index]

        child = node.children.get(part)
        if child is not None:
            found = self._walk(child, parts, index + 1, params)
            if found is not None:
                return found

        if node.param is not None and node.param.regex.match(part):
            found = self._walk(
                node.param.node, parts, index + 1, {**params, node.param.name: part}
            )
            if found is not None:
                return found

        if node.catch_all is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all.routes, {**params, node.catch_all.name: remaining}

        return None
