"""Development server.

Starts a pounce ASGI server with the live masthead App object.
Single worker, auto-reload when the app runs in debug mode.
"""


def run_dev_server(
    app: object,
    host: str,
    port: int,
    *,
    reload: bool = False,
) -> None:
    """Start a pounce server with the given masthead App.

    Pounce's ``run()`` takes an import string, but masthead has a live
    ``App`` object, so ``pounce.Server`` is driven directly with the
    ASGI callable.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
    )
    Server(config, app).run()
