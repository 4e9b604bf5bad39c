"""Shared helpers for sitemap tests."""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import List

import pytest
from lxml import etree

from sitemapgen.encoding.encoder import SITEMAP_NS


def read_xml(path: Path) -> bytes:
    data = path.read_bytes()
    if path.suffix == ".gz":
        return gzip.decompress(data)
    return data


def parse_locations(path: Path, row_tag: str = "url") -> List[str]:
    """Return the ``<loc>`` values of a sitemap or sitemap index file."""
    root = etree.fromstring(read_xml(path))
    return [
        element.text
        for element in root.iterfind(f"{{{SITEMAP_NS}}}{row_tag}/{{{SITEMAP_NS}}}loc")
    ]


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"
