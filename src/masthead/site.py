"""The site's route table.

``create_app()`` wires the public pages onto an App: the front page,
the static about/contact pages, ``robots.txt``, ``sitemap.xml``, and a
catch-all that renders the ``missing`` page. Article, quiz, and
subscriber CRUD live elsewhere and register onto the same App.
"""

from masthead.app import App
from masthead.config import AppConfig
from masthead.dispatch import Action, Dispatcher
from masthead.http.request import Request
from masthead.http.response import Response
from masthead.sitemap import SitemapSource, generate_sitemap
from masthead.store import DocumentStore

# How many posts the front page shows above the fold.
FRONT_PAGE_LEAD = 4


def create_app(config: AppConfig | None = None, store: DocumentStore | None = None) -> App:
    """Build the site App for *config* and *store*."""
    config = config or AppConfig()
    app = App(config, store=store)

    primary = SitemapSource(
        collection=config.primary_collection,
        path="posts",
        id_field="postId",
        skip_staging=True,
    )
    secondary = SitemapSource(
        collection=config.secondary_collection,
        path="quizzes",
        id_field="quizId",
    )

    @app.route("/", name="front_page")
    async def front_page(request: Request, store: DocumentStore, dispatch: Dispatcher) -> None:
        scan = await store.scan(config.primary_collection)
        posts = [post for post in scan.items if not post.get("staging")]
        dispatch(
            Action.RENDER,
            "index",
            {
                "posts": posts,
                "features": [post for post in posts if post.get("featured")],
                "lead": FRONT_PAGE_LEAD,
            },
        )

    @app.route("/about", name="about")
    def about(request: Request, store: DocumentStore, dispatch: Dispatcher) -> None:
        dispatch(Action.RENDER, "about")

    @app.route("/contact", name="contact")
    def contact(request: Request, store: DocumentStore, dispatch: Dispatcher) -> None:
        dispatch(Action.RENDER, "contact")

    @app.endpoint("/robots.txt", name="robots")
    def robots(request: Request, store: DocumentStore) -> Response:
        return Response(
            body=f"Sitemap: {config.site.base_url}/sitemap.xml",
            content_type="text/plain; charset=utf-8",
        )

    @app.endpoint("/sitemap.xml", name="sitemap")
    async def sitemap(request: Request, store: DocumentStore) -> Response:
        result = await generate_sitemap(store, primary, secondary, config.site.base_url)
        return result.to_response()

    @app.route("/{path:path}", name="missing")
    def missing(request: Request, store: DocumentStore, dispatch: Dispatcher) -> None:
        dispatch(Action.RENDER, "missing")

    return app
