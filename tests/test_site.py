"""Tests for masthead.site: the public route table with packaged templates."""

from masthead.config import AppConfig, SiteDefaults
from masthead.site import FRONT_PAGE_LEAD, create_app
from masthead.store import MemoryStore
from masthead.testing import TestClient

BASE_URL = "https://thefishwrapper.news"


def _posts(count: int) -> list[dict[str, object]]:
    return [
        {
            "postId": f"p{i}",
            "title": f"Headline {i}",
            "content": f"<p>Lede {i}</p><p>Body {i}</p>",
            "thumbnail": f"https://img.test/{i}.png",
        }
        for i in range(count)
    ]


def _store(posts: list[dict[str, object]] | None = None) -> MemoryStore:
    return MemoryStore(
        {
            "posts": posts if posts is not None else _posts(2),
            "quizzes": [{"quizId": "q1"}],
        }
    )


class TestFrontPage:
    async def test_renders_posts_with_blurbs(self) -> None:
        app = create_app(store=_store())

        async with TestClient(app) as client:
            response = await client.get("/")

        assert response.status == 200
        assert "<title>The Fishwrapper</title>" in response.text
        assert "Headline 0" in response.text
        assert "<p>Lede 0..." in response.text
        assert "Body 0" not in response.text

    async def test_staging_posts_hidden(self) -> None:
        posts = _posts(2)
        posts[1]["staging"] = True
        app = create_app(store=_store(posts))

        async with TestClient(app) as client:
            response = await client.get("/")

        assert "Headline 0" in response.text
        assert "Headline 1" not in response.text

    async def test_featured_posts_in_carousel(self) -> None:
        posts = _posts(3)
        posts[1]["featured"] = True
        posts[2]["featured"] = True
        app = create_app(store=_store(posts))

        async with TestClient(app) as client:
            response = await client.get("/")

        assert response.text.count("carousel-item active") == 1
        assert response.text.count('<div class="carousel-item">') == 1

    async def test_lead_then_window(self) -> None:
        app = create_app(store=_store(_posts(FRONT_PAGE_LEAD + 2)))

        async with TestClient(app) as client:
            response = await client.get("/")

        lead, _, more = response.text.partition('<section id="more">')
        assert f"Headline {FRONT_PAGE_LEAD - 1}" in lead
        assert f"Headline {FRONT_PAGE_LEAD}" not in lead
        assert f"Headline {FRONT_PAGE_LEAD}" in more
        assert f"Headline {FRONT_PAGE_LEAD + 1}" in more

    async def test_missing_thumbnail_uses_placeholder(self) -> None:
        app = create_app(store=_store([{"postId": "p0", "title": "No picture"}]))

        async with TestClient(app) as client:
            response = await client.get("/")

        assert "via.placeholder.com" in response.text


class TestStaticPages:
    async def test_about(self) -> None:
        app = create_app(store=_store())

        async with TestClient(app) as client:
            response = await client.get("/about")

        assert response.status == 200
        assert "<h1>About</h1>" in response.text
        assert f'content="{BASE_URL}/about"' in response.text

    async def test_contact(self) -> None:
        app = create_app(store=_store())

        async with TestClient(app) as client:
            response = await client.get("/contact")

        assert "<h1>Contact</h1>" in response.text

    async def test_og_image_from_bucket(self) -> None:
        config = AppConfig(site=SiteDefaults(bucket="https://bucket.test/"))
        app = create_app(config, _store())

        async with TestClient(app) as client:
            response = await client.get("/about")

        assert 'content="https://bucket.test/logo.png"' in response.text


class TestMissing:
    async def test_unknown_path_renders_missing(self) -> None:
        app = create_app(store=_store())

        async with TestClient(app) as client:
            response = await client.get("/no/such/page")

        assert response.status == 200
        assert "Page not found" in response.text

    async def test_post_to_unknown_path_is_405(self) -> None:
        app = create_app(store=_store())

        async with TestClient(app) as client:
            response = await client.post("/no/such/page")

        assert response.status == 405


class TestRobots:
    async def test_points_at_sitemap(self) -> None:
        app = create_app(store=_store())

        async with TestClient(app) as client:
            response = await client.get("/robots.txt")

        assert response.text == f"Sitemap: {BASE_URL}/sitemap.xml"
        assert response.content_type.startswith("text/plain")


class TestSitemap:
    async def test_lists_posts_and_quizzes(self) -> None:
        posts = _posts(2)
        posts[1]["staging"] = True
        app = create_app(store=_store(posts))

        async with TestClient(app) as client:
            response = await client.get("/sitemap.xml")

        assert response.status == 200
        assert response.content_type == "application/xml"
        assert response.text.count("<url>") == 2
        assert f"<loc>{BASE_URL}/posts/p0</loc>" in response.text
        assert f"<loc>{BASE_URL}/quizzes/q1</loc>" in response.text

    async def test_custom_collections(self) -> None:
        config = AppConfig(primary_collection="articles", secondary_collection="polls")
        store = MemoryStore({"articles": [{"postId": "a1"}], "polls": [{"quizId": "z1"}]})
        app = create_app(config, store)

        async with TestClient(app) as client:
            response = await client.get("/sitemap.xml")

        assert f"{BASE_URL}/posts/a1" in response.text
        assert f"{BASE_URL}/quizzes/z1" in response.text

    async def test_scan_failure_is_xml_error(self) -> None:
        app = create_app(store=MemoryStore())

        async with TestClient(app) as client:
            response = await client.get("/sitemap.xml")

        assert response.status == 500
        assert response.content_type == "application/xml"
        assert "<error>" in response.text
        assert "<url>" not in response.text
