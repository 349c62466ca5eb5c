"""Application configuration.

AppConfig and SiteDefaults are frozen dataclasses: loaded once at
process start, immutable afterwards, and passed by reference into every
dispatcher. No string-key dict lookups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from masthead.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class SiteDefaults:
    """Site-wide values merged into every rendered page.

    ``og_image`` falls back to ``{bucket}logo.png`` when left empty,
    matching how the asset bucket lays out its files.
    """

    title: str = "The Fishwrapper"
    description: str = (
        "The Fishwrapper is UW's own satirical newspaper, committed to "
        "publishing all the news that's unfit to print. "
        "Irrelevant, irreverent, irresponsible."
    )
    base_url: str = "https://thefishwrapper.news"
    bucket: str = "/static/"
    og_image: str = ""
    type: str = "article"

    @property
    def social_image(self) -> str:
        """Default social-image URL for Open Graph tags."""
        return self.og_image or f"{self.bucket}logo.png"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Templates
    template_dir: str | Path | None = None  # None = package templates only
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Logging
    log_level: str = "info"

    # Document store
    data_file: str | Path | None = None
    primary_collection: str = "posts"
    secondary_collection: str = "quizzes"

    # Site defaults merged into every view model
    site: SiteDefaults = field(default_factory=SiteDefaults)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Build a config from environment variables.

        Called once at process start. Unset variables keep their defaults.

        Raises:
            ConfigurationError: If ``MASTHEAD_PORT`` is not an integer.
        """
        env = os.environ if environ is None else environ
        base = cls()

        raw_port = env.get("MASTHEAD_PORT", "")
        try:
            port = int(raw_port) if raw_port else base.port
        except ValueError:
            msg = f"MASTHEAD_PORT must be an integer, got {raw_port!r}"
            raise ConfigurationError(msg) from None

        defaults = base.site
        site = SiteDefaults(
            title=env.get("SITE_TITLE", defaults.title),
            description=env.get("SITE_DESCRIPTION", defaults.description),
            base_url=env.get("SITE_URL", defaults.base_url).rstrip("/"),
            bucket=env.get("S3_BUCKET", defaults.bucket),
            og_image=env.get("SITE_OG_IMAGE", ""),
        )

        return cls(
            host=env.get("MASTHEAD_HOST", base.host),
            port=port,
            debug=env.get("MASTHEAD_DEBUG", "").lower() in ("1", "true", "yes", "on"),
            template_dir=env.get("MASTHEAD_TEMPLATE_DIR") or None,
            log_level=env.get("MASTHEAD_LOG_LEVEL", base.log_level),
            data_file=env.get("MASTHEAD_DATA_FILE") or None,
            primary_collection=env.get("POSTS_TABLE", base.primary_collection),
            secondary_collection=env.get("QUIZZES_TABLE", base.secondary_collection),
            site=site,
        )
