"""Masthead: the site server behind a small news publication.

Renders pages through kida with a handful of layout directives, answers
every handler through a single-shot action dispatcher, and serves a
sitemap built from the document store.

Basic usage::

    from masthead import AppConfig, MemoryStore, create_app

    app = create_app(AppConfig.from_env(), MemoryStore.from_json("site.json"))
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "Action",
    "App",
    "AppConfig",
    "ConfigurationError",
    "DispatchError",
    "Dispatcher",
    "HTTPError",
    "MastheadError",
    "MemoryStore",
    "MethodNotAllowed",
    "NotFound",
    "Request",
    "Response",
    "SiteDefaults",
    "StoreError",
    "ViewModel",
    "create_app",
    "generate_sitemap",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import masthead`` fast while providing a clean top-level API.
    """
    if name == "App":
        from masthead.app import App

        return App

    if name in ("AppConfig", "SiteDefaults"):
        from masthead import config as _config

        return getattr(_config, name)

    if name in ("Action", "Dispatcher"):
        from masthead import dispatch as _dispatch

        return getattr(_dispatch, name)

    if name == "Request":
        from masthead.http.request import Request

        return Request

    if name == "Response":
        from masthead.http.response import Response

        return Response

    if name == "MemoryStore":
        from masthead.store import MemoryStore

        return MemoryStore

    if name == "ViewModel":
        from masthead.view_model import ViewModel

        return ViewModel

    if name == "create_app":
        from masthead.site import create_app

        return create_app

    if name == "generate_sitemap":
        from masthead.sitemap import generate_sitemap

        return generate_sitemap

    if name in (
        "ConfigurationError",
        "DispatchError",
        "HTTPError",
        "MastheadError",
        "MethodNotAllowed",
        "NotFound",
        "StoreError",
    ):
        from masthead import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
