"""XML serialization of sitemap entries and index rows."""

from __future__ import annotations

import io
import logging
from datetime import date, datetime, timezone
from typing import Iterable

from lxml import etree

from sitemapgen.errors import EncodingError
from sitemapgen.models import ChangeFreq, SitemapIndexLoc, SitemapLoc

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"

XML_HEADER = b'<?xml version="1.0" encoding="UTF-8"?>\n'
URLSET_OPEN_TAG = f'<urlset xmlns="{SITEMAP_NS}">'.encode()
URLSET_CLOSE_TAG = b"</urlset>\n"

_INDENT = b"  "

logger = logging.getLogger(__name__)


def format_last_mod(value: datetime | date) -> str:
    """Return a W3C datetime string; naive datetimes are taken as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat(timespec="seconds")
    if isinstance(value, date):
        return value.isoformat()
    raise EncodingError(f"Unsupported last modification value: {value!r}")


def format_priority(value: float) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise EncodingError(f"Priority must be a number, got {value!r}")
    if not 0.0 <= value <= 1.0:
        raise EncodingError(f"Priority must be between 0.0 and 1.0, got {value!r}")
    return f"{value:.2f}".rstrip("0").rstrip(".")


def sitemap_header(pretty_print: bool) -> bytes:
    """Bytes a sitemap file starts with, before the first ``<url>``."""
    return XML_HEADER + URLSET_OPEN_TAG + (b"\n" if pretty_print else b"")


def _build_url_element(loc: SitemapLoc) -> etree._Element:
    if not loc.loc:
        raise EncodingError("URL entry has an empty location")

    url = etree.Element("url", nsmap={"image": IMAGE_NS} if loc.images else None)
    etree.SubElement(url, "loc").text = loc.loc
    if loc.last_mod is not None:
        etree.SubElement(url, "lastmod").text = format_last_mod(loc.last_mod)
    if loc.change_freq is not None:
        try:
            change_freq = ChangeFreq(loc.change_freq)
        except ValueError as exc:
            raise EncodingError(f"Unknown change frequency: {loc.change_freq!r}") from exc
        etree.SubElement(url, "changefreq").text = change_freq.value
    if loc.priority is not None:
        etree.SubElement(url, "priority").text = format_priority(loc.priority)
    for image in loc.images:
        image_element = etree.SubElement(url, f"{{{IMAGE_NS}}}image")
        etree.SubElement(image_element, f"{{{IMAGE_NS}}}loc").text = image.loc
    return url


class XMLEncoder:
    """Serializes ``SitemapLoc`` entries into ``<url>`` elements.

    A single scratch buffer is reused between calls; the bytes returned by
    :meth:`encode` are a copy and stay valid after the next call.
    """

    def __init__(self, pretty_print: bool = False) -> None:
        self.pretty_print = pretty_print
        self._buffer = io.BytesIO()

    def encode(self, loc: SitemapLoc) -> tuple[int, bytes]:
        """Return ``(length, data)`` for the encoded entry."""
        try:
            element = _build_url_element(loc)
            etree.ElementTree(element).write(
                self._buffer,
                encoding="UTF-8",
                xml_declaration=False,
                pretty_print=self.pretty_print,
            )
            data = self._buffer.getvalue()
        except EncodingError:
            raise
        except (TypeError, ValueError) as exc:
            raise EncodingError(f"Unable to encode {loc.loc!r}: {exc}") from exc
        finally:
            self._buffer.seek(0)
            self._buffer.truncate()

        if self.pretty_print:
            data = b"".join(_INDENT + line for line in data.splitlines(keepends=True))
        return len(data), data


def encode_index(locs: Iterable[SitemapIndexLoc], *, pretty_print: bool = False) -> bytes:
    """Serialize a complete ``<sitemapindex>`` document."""
    root = etree.Element(f"{{{SITEMAP_NS}}}sitemapindex", nsmap={None: SITEMAP_NS})
    count = 0
    for index_loc in locs:
        row = etree.SubElement(root, f"{{{SITEMAP_NS}}}sitemap")
        etree.SubElement(row, f"{{{SITEMAP_NS}}}loc").text = index_loc.loc
        if index_loc.last_mod is not None:
            etree.SubElement(row, f"{{{SITEMAP_NS}}}lastmod").text = format_last_mod(
                index_loc.last_mod
            )
        count += 1

    body = etree.tostring(root, encoding="UTF-8", xml_declaration=False, pretty_print=pretty_print)
    if not body.endswith(b"\n"):
        body += b"\n"
    logger.debug("Encoded sitemap index with %d rows", count)
    return XML_HEADER + body
