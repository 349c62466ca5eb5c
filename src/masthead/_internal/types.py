"""Shared type aliases used across masthead modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Dispatch handler: (request, store, dispatch) -> None, sync or async
DispatchHandler: TypeAlias = Callable[..., Any]

# Endpoint handler: (request, store) -> Response, sync or async
EndpointHandler: TypeAlias = Callable[..., Any]
