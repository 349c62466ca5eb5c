"""Sitemap generation for ``GET /sitemap.xml``.

Scans the primary collection (articles), then the secondary collection
(quizzes), and serializes both into one ``<urlset>`` document. Staging
records are dropped from the primary collection only; every secondary
record is published.

The two scans are sequential: the secondary scan starts only after the
primary scan succeeded. Either failure ends the request with an XML
error document and no ``<url>`` entries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING
from urllib.parse import quote
from xml.sax.saxutils import escape

from masthead.errors import StoreError
from masthead.http.response import Response

if TYPE_CHECKING:
    from masthead.store import DocumentStore, Record

logger = logging.getLogger("masthead.sitemap")

XML_CONTENT_TYPE = "application/xml"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
URLSET_OPEN = (
    '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"'
    ' xmlns:image="http://www.google.com/schemas/sitemap-image/1.1">'
)
URLSET_CLOSE = "</urlset>"

# Answered with the XML error body when a scan fails.
ERROR_STATUS = 500


class SitemapState(StrEnum):
    SCANNING_PRIMARY = "scanning-primary"
    SCANNING_SECONDARY = "scanning-secondary"
    SERIALIZED = "serialized"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SitemapSource:
    """Where one collection's records live on the site.

    A record becomes ``{base_url}/{path}/{record[id_field]}``, with
    ``record[image_field]`` as its image when present.
    """

    collection: str
    path: str
    id_field: str
    image_field: str = "thumbnail"
    skip_staging: bool = False


@dataclass(frozen=True, slots=True)
class SitemapEntry:
    loc: str
    image: str | None = None

    def to_xml(self) -> str:
        out = f"<url><loc>{escape(self.loc)}</loc>"
        if self.image:
            out += f"<image:image><image:loc>{escape(self.image)}</image:loc></image:image>"
        return out + "</url>"


@dataclass(frozen=True, slots=True)
class SitemapResult:
    """Outcome of one generation run."""

    state: SitemapState
    body: str

    def to_response(self) -> Response:
        status = ERROR_STATUS if self.state is SitemapState.FAILED else 200
        return Response(body=self.body, status=status, content_type=XML_CONTENT_TYPE)


def entries_for(
    records: Iterable[Record],
    source: SitemapSource,
    base_url: str,
) -> Iterator[SitemapEntry]:
    """Yield sitemap entries for *records* in scan order."""
    prefix = f"{base_url.rstrip('/')}/{source.path.strip('/')}"
    for record in records:
        if source.skip_staging and record.get("staging"):
            continue
        identifier = quote(str(record.get(source.id_field, "")), safe="")
        yield SitemapEntry(
            loc=f"{prefix}/{identifier}",
            image=record.get(source.image_field) or None,
        )


def render_sitemap(entries: Iterable[SitemapEntry]) -> str:
    """Wrap *entries* in the ``<urlset>`` root element."""
    return XML_DECLARATION + URLSET_OPEN + "".join(e.to_xml() for e in entries) + URLSET_CLOSE


def render_error(exc: Exception) -> str:
    """XML-safe error document for a failed scan."""
    return f"{XML_DECLARATION}<error>{escape(str(exc))}</error>"


async def generate_sitemap(
    store: DocumentStore,
    primary: SitemapSource,
    secondary: SitemapSource,
    base_url: str,
) -> SitemapResult:
    """Scan *primary* then *secondary* and serialize one sitemap."""
    state = SitemapState.SCANNING_PRIMARY
    try:
        primary_scan = await store.scan(primary.collection)
        state = SitemapState.SCANNING_SECONDARY
        secondary_scan = await store.scan(secondary.collection)
    except StoreError as exc:
        logger.error("Sitemap scan failed while %s: %s", state, exc)
        return SitemapResult(SitemapState.FAILED, render_error(exc))

    body = render_sitemap(
        [
            *entries_for(primary_scan.items, primary, base_url),
            *entries_for(secondary_scan.items, secondary, base_url),
        ]
    )
    return SitemapResult(SitemapState.SERIALIZED, body)
