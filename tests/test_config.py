"""Tests for masthead.config: AppConfig, SiteDefaults, and from_env."""

import pytest

from masthead.config import AppConfig, SiteDefaults
from masthead.errors import ConfigurationError


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()

        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8000
        assert cfg.debug is False
        assert cfg.template_dir is None
        assert cfg.autoescape is True
        assert cfg.log_level == "info"
        assert cfg.data_file is None
        assert cfg.primary_collection == "posts"
        assert cfg.secondary_collection == "quizzes"
        assert cfg.site == SiteDefaults()

    def test_frozen(self) -> None:
        cfg = AppConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]


class TestSiteDefaults:
    def test_social_image_fallback(self) -> None:
        assert SiteDefaults(bucket="/assets/").social_image == "/assets/logo.png"

    def test_social_image_explicit(self) -> None:
        assert SiteDefaults(og_image="/og.png").social_image == "/og.png"


class TestFromEnv:
    def test_empty_environment_keeps_defaults(self) -> None:
        assert AppConfig.from_env({}) == AppConfig()

    def test_reads_variables(self) -> None:
        cfg = AppConfig.from_env(
            {
                "MASTHEAD_HOST": "0.0.0.0",
                "MASTHEAD_PORT": "3000",
                "MASTHEAD_DEBUG": "true",
                "MASTHEAD_LOG_LEVEL": "debug",
                "MASTHEAD_DATA_FILE": "site.json",
                "POSTS_TABLE": "prod-posts",
                "QUIZZES_TABLE": "prod-quizzes",
                "S3_BUCKET": "https://bucket.test/",
                "SITE_URL": "https://example.test/",
                "SITE_TITLE": "The Daily Test",
            }
        )

        assert cfg.host == "0.0.0.0"
        assert cfg.port == 3000
        assert cfg.debug is True
        assert cfg.log_level == "debug"
        assert cfg.data_file == "site.json"
        assert cfg.primary_collection == "prod-posts"
        assert cfg.secondary_collection == "prod-quizzes"
        assert cfg.site.bucket == "https://bucket.test/"
        assert cfg.site.base_url == "https://example.test"
        assert cfg.site.title == "The Daily Test"
        assert cfg.site.social_image == "https://bucket.test/logo.png"

    @pytest.mark.parametrize("value", ["0", "false", "no", ""])
    def test_debug_falsey(self, value: str) -> None:
        assert AppConfig.from_env({"MASTHEAD_DEBUG": value}).debug is False

    def test_invalid_port(self) -> None:
        with pytest.raises(ConfigurationError, match="MASTHEAD_PORT"):
            AppConfig.from_env({"MASTHEAD_PORT": "eighty"})

    def test_reads_os_environ_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POSTS_TABLE", "from-os")
        assert AppConfig.from_env().primary_collection == "from-os"
