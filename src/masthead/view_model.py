"""View model: the merged mapping handed to the page renderer.

Precedence, lowest to highest:

1. Site defaults (``SiteDefaults``: title, description, url, og_image,
   bucket, type)
2. The dispatch context's request (``req``)
3. Handler-supplied fields

A handler field named like a default replaces that default, so a post
page can pass ``{"title": post.title}`` and the layout picks it up.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from masthead.config import SiteDefaults
    from masthead.http.request import Request

SITE_FIELDS = ("title", "description", "url", "og_image", "bucket", "type")


def site_fields(defaults: SiteDefaults) -> dict[str, str]:
    """Flatten site defaults into view-model field names."""
    return {
        "title": defaults.title,
        "description": defaults.description,
        "url": defaults.base_url,
        "og_image": defaults.social_image,
        "bucket": defaults.bucket,
        "type": defaults.type,
    }


@dataclass(frozen=True, slots=True)
class ViewModel:
    """Typed view model with named site fields and free-form extras."""

    title: str
    description: str
    url: str
    og_image: str
    bucket: str
    type: str
    req: Request | None = None
    fields: Mapping[str, Any] = field(default_factory=dict)

    def as_context(self) -> dict[str, Any]:
        """Flatten to the template context dict."""
        return {
            **self.fields,
            "title": self.title,
            "description": self.description,
            "url": self.url,
            "og_image": self.og_image,
            "bucket": self.bucket,
            "type": self.type,
            "req": self.req,
        }


def merge_view_model(
    defaults: SiteDefaults,
    request: Request | None,
    fields: Mapping[str, Any] | None = None,
) -> ViewModel:
    """Merge site defaults, request, and handler fields into a ViewModel."""
    merged: dict[str, Any] = {**site_fields(defaults), "req": request, **(fields or {})}
    extras = {k: v for k, v in merged.items() if k not in SITE_FIELDS and k != "req"}
    return ViewModel(
        title=merged["title"],
        description=merged["description"],
        url=merged["url"],
        og_image=merged["og_image"],
        bucket=merged["bucket"],
        type=merged["type"],
        req=merged["req"],
        fields=MappingProxyType(extras),
    )
