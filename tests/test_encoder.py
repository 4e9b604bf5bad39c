"""Tests for XML encoding of entries and index rows."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest
from lxml import etree

from sitemapgen.encoding.encoder import (
    IMAGE_NS,
    SITEMAP_NS,
    XML_HEADER,
    XMLEncoder,
    encode_index,
    format_last_mod,
    format_priority,
    sitemap_header,
)
from sitemapgen.errors import EncodingError
from sitemapgen.models import ChangeFreq, SitemapImage, SitemapIndexLoc, SitemapLoc


class TestFormatting:
    """Test value formatting helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.4, "0.4"), (1.0, "1"), (0, "0"), (0.25, "0.25"), (0.5, "0.5")],
    )
    def test_format_priority(self, value: float, expected: str) -> None:
        assert format_priority(value) == expected

    @pytest.mark.parametrize("value", [-0.1, 1.5, float("nan"), "0.5", True])
    def test_format_priority_invalid(self, value: object) -> None:
        with pytest.raises(EncodingError):
            format_priority(value)  # type: ignore[arg-type]

    def test_format_last_mod_aware(self) -> None:
        value = datetime(2024, 1, 2, 3, 4, 5, 678, tzinfo=timezone(timedelta(hours=2)))
        assert format_last_mod(value) == "2024-01-02T03:04:05+02:00"

    def test_format_last_mod_naive_is_utc(self) -> None:
        assert format_last_mod(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05+00:00"

    def test_format_last_mod_date(self) -> None:
        assert format_last_mod(date(2024, 1, 2)) == "2024-01-02"

    def test_sitemap_header(self) -> None:
        assert sitemap_header(False) == XML_HEADER + f'<urlset xmlns="{SITEMAP_NS}">'.encode()
        assert sitemap_header(True).endswith(b">\n")


class TestXMLEncoder:
    """Test XMLEncoder."""

    def test_minimal_entry(self) -> None:
        """Should emit only the location."""
        length, data = XMLEncoder().encode(SitemapLoc(loc="https://example.com/a"))

        assert data == b"<url><loc>https://example.com/a</loc></url>"
        assert length == len(data)

    def test_full_entry(self) -> None:
        """Should emit optional tags in protocol order."""
        loc = SitemapLoc(
            loc="https://example.com/a",
            last_mod=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            change_freq=ChangeFreq.DAILY,
            priority=0.4,
        )

        _, data = XMLEncoder().encode(loc)

        assert data == (
            b"<url><loc>https://example.com/a</loc>"
            b"<lastmod>2024-01-02T03:04:05+00:00</lastmod>"
            b"<changefreq>daily</changefreq>"
            b"<priority>0.4</priority></url>"
        )

    def test_change_freq_string(self) -> None:
        """Should accept the plain string value."""
        _, data = XMLEncoder().encode(SitemapLoc(loc="https://example.com/", change_freq="never"))
        assert b"<changefreq>never</changefreq>" in data

    def test_escapes_text(self) -> None:
        """Should escape XML special characters."""
        _, data = XMLEncoder().encode(SitemapLoc(loc="https://example.com/?a=1&b=<2>"))
        assert b"<loc>https://example.com/?a=1&amp;b=&lt;2&gt;</loc>" in data

    def test_images(self) -> None:
        """Should emit namespaced image references."""
        loc = SitemapLoc(
            loc="https://example.com/a",
            images=[SitemapImage(loc="https://example.com/1.jpg"), SitemapImage(loc="https://example.com/2.jpg")],
        )

        _, data = XMLEncoder().encode(loc)

        element = etree.fromstring(data)
        image_locs = element.findall(f"{{{IMAGE_NS}}}image/{{{IMAGE_NS}}}loc")
        assert [image.text for image in image_locs] == [
            "https://example.com/1.jpg",
            "https://example.com/2.jpg",
        ]
        assert b"<image:image>" in data

    def test_pretty_print(self) -> None:
        """Should indent entries one level below urlset."""
        _, data = XMLEncoder(pretty_print=True).encode(SitemapLoc(loc="https://example.com/a"))

        assert data == b"  <url>\n    <loc>https://example.com/a</loc>\n  </url>\n"

    def test_returned_bytes_are_not_reused(self) -> None:
        """Should keep earlier results intact across calls."""
        encoder = XMLEncoder()
        _, first = encoder.encode(SitemapLoc(loc="https://example.com/first"))
        _, second = encoder.encode(SitemapLoc(loc="https://example.com/2"))

        assert first == b"<url><loc>https://example.com/first</loc></url>"
        assert second == b"<url><loc>https://example.com/2</loc></url>"

    @pytest.mark.parametrize(
        "loc",
        [
            SitemapLoc(loc=""),
            SitemapLoc(loc="https://example.com/", priority=2.0),
            SitemapLoc(loc="https://example.com/", change_freq="sometimes"),
            SitemapLoc(loc="https://example.com/\x01"),
        ],
    )
    def test_invalid_entries(self, loc: SitemapLoc) -> None:
        """Should raise EncodingError for malformed entries."""
        with pytest.raises(EncodingError):
            XMLEncoder().encode(loc)

    def test_usable_after_error(self) -> None:
        """Should not leak a failed entry into the next result."""
        encoder = XMLEncoder()
        with pytest.raises(EncodingError):
            encoder.encode(SitemapLoc(loc="https://example.com/", priority=5))

        _, data = encoder.encode(SitemapLoc(loc="https://example.com/ok"))
        assert data == b"<url><loc>https://example.com/ok</loc></url>"


class TestEncodeIndex:
    """Test encode_index function."""

    def test_empty_index(self) -> None:
        data = encode_index([])

        assert data.startswith(XML_HEADER)
        assert data.endswith(b"\n")
        root = etree.fromstring(data)
        assert root.tag == f"{{{SITEMAP_NS}}}sitemapindex"
        assert len(root) == 0

    def test_rows(self) -> None:
        """Should emit one sitemap element per row."""
        locs = [
            SitemapIndexLoc(loc="https://example.com/sitemap1.xml", last_mod=date(2024, 1, 1)),
            SitemapIndexLoc(loc="https://example.com/sitemap2.xml"),
        ]

        root = etree.fromstring(encode_index(locs))

        rows = root.findall(f"{{{SITEMAP_NS}}}sitemap")
        assert [row.findtext(f"{{{SITEMAP_NS}}}loc") for row in rows] == [
            "https://example.com/sitemap1.xml",
            "https://example.com/sitemap2.xml",
        ]
        assert rows[0].findtext(f"{{{SITEMAP_NS}}}lastmod") == "2024-01-01"
        assert rows[1].find(f"{{{SITEMAP_NS}}}lastmod") is None

    def test_pretty_print(self) -> None:
        data = encode_index([SitemapIndexLoc(loc="https://example.com/s.xml")], pretty_print=True)
        assert b"\n  <sitemap>\n" in data
        assert data.endswith(b"</sitemapindex>\n")
