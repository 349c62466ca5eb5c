"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class RouteKind(StrEnum):
    """How the route-table glue calls a handler.

    ``DISPATCH`` handlers take ``(request, store, dispatch)`` and must
    dispatch exactly once. ``ENDPOINT`` handlers take ``(request, store)``
    and return a ``Response``.
    """

    DISPATCH = "dispatch"
    ENDPOINT = "endpoint"


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/posts``  (is_param=False)
    Param:   ``/{post_id}``   (is_param=True, param_name="post_id")
    Typed:   ``/{page:int}`` (is_param=True, param_name="page", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created during app setup, compiled into the router at freeze time.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    kind: RouteKind = RouteKind.DISPATCH
    name: str | None = None


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: Mapping[str, str]
