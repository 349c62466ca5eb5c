"""Invoke helpers: call sync or async handlers uniformly.

Masthead handlers can be ``def`` or ``async def``. Any code that calls
a user-provided handler must handle both cases. This module provides
a single helper so the sync/async check lives in exactly one place.

Usage::

    from masthead._internal.invoke import invoke

    result = await invoke(handler, request, store, dispatch)
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's a coroutine.

    Works with both sync and async callables::

        # sync: dispatches immediately
        def about(request, store, dispatch):
            dispatch("render", "about")

        # async: dispatches after awaiting the store
        async def front_page(request, store, dispatch):
            posts = await store.scan("posts")
            dispatch("render", "index", {"posts": posts.items})
    """
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
