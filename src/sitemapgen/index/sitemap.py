"""Sitemap documents that split themselves at the protocol limits."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, timezone
from typing import BinaryIO, Iterator

from sitemapgen.config import MAX_FILE_SIZE, MAX_URLS_COUNT, SitemapOptions
from sitemapgen.encoding.encoder import URLSET_CLOSE_TAG, XMLEncoder, sitemap_header
from sitemapgen.errors import EncodingError
from sitemapgen.models import SitemapImage, SitemapIndexLoc, SitemapLoc
from sitemapgen.utils.files import write_to_file
from sitemapgen.utils.urls import is_absolute_url, join_url

LOGGER = logging.getLogger(__name__)


class Sitemap:
    """A sitemap file plus the chain of files it spills into.

    Entries are added with :meth:`add`. When the current file would exceed
    ``max_urls`` entries or ``max_file_size`` bytes (closing tag included),
    a successor is linked through ``next_sitemap`` and accumulation continues
    there. Every file of the chain shares the same ``options``; the display
    mode is fixed when the sitemap is created.
    """

    def __init__(
        self,
        options: SitemapOptions | None = None,
        *,
        last_mod: datetime | date | None = None,
        max_urls: int = MAX_URLS_COUNT,
        max_file_size: int = MAX_FILE_SIZE,
        pretty_print: bool | None = None,
        file_num: int = 0,
    ) -> None:
        self.options = options if options is not None else SitemapOptions()
        self.pretty_print = self.options.pretty_print if pretty_print is None else pretty_print
        self.sitemap_loc = SitemapIndexLoc(last_mod=last_mod or datetime.now(timezone.utc))
        self.max_urls = max_urls
        self.max_file_size = max_file_size
        self.file_num = file_num
        self.next_sitemap: Sitemap | None = None
        self.urls_count = 0

        self._encoder = XMLEncoder(self.pretty_print)
        self._content = bytearray(sitemap_header(self.pretty_print))
        self._tail: Sitemap = self

    @property
    def filename(self) -> str:
        """Output filename of this file; successors carry their number."""
        suffix = str(self.file_num) if self.file_num > 0 else ""
        return f"{self.options.name}{suffix}{self.options.file_ext}"

    @property
    def size(self) -> int:
        """Serialized size of this file including the closing tag."""
        return len(self._content) + len(URLSET_CLOSE_TAG)

    @property
    def total_urls(self) -> int:
        return sum(node.urls_count for node in self.iter_chain())

    def iter_chain(self) -> Iterator[Sitemap]:
        node: Sitemap | None = self
        while node is not None:
            yield node
            node = node.next_sitemap

    def add(self, loc: SitemapLoc) -> None:
        """Add an entry, moving on to a new file when this one is full.

        ``loc`` is copied before its locations are joined with the hostname.
        Raises :class:`EncodingError` if the entry cannot be serialized or
        would not fit even into an empty file; the chain is left unchanged.
        """
        tail = self._find_tail()
        length, data = tail._encoder.encode(tail._resolve(loc))

        overhead = len(sitemap_header(tail.pretty_print)) + len(URLSET_CLOSE_TAG)
        if overhead + length >= tail.max_file_size:
            raise EncodingError(
                f"Entry {loc.loc!r} ({length} bytes) does not fit in a sitemap of "
                f"{tail.max_file_size} bytes"
            )

        if tail.urls_count >= tail.max_urls or tail.size + length >= tail.max_file_size:
            tail = tail._build_next()
            self._tail = tail

        tail._content += data
        tail.urls_count += 1

    def write_to(self, stream: BinaryIO) -> int:
        """Write this file (not its successors) to ``stream``."""
        written = stream.write(self._content)
        written += stream.write(URLSET_CLOSE_TAG)
        return written

    def filenames(self) -> list[str]:
        """Filenames :meth:`save` produces, in chain order."""
        return [node.filename for node in self.iter_chain()]

    def save(self) -> list[str]:
        """Write every file of the chain into ``options.output_path``.

        Returns the filenames, this file first. A failure stops the walk;
        files already written stay on disk.
        """
        filenames: list[str] = []
        for node in self.iter_chain():
            node._write()
            filenames.append(node.filename)
        return filenames

    def _write(self) -> None:
        written = write_to_file(
            self.filename,
            self.options.output_path,
            self.options.compress,
            bytes(self._content),
            URLSET_CLOSE_TAG,
        )
        LOGGER.info("Wrote %s (%d URLs, %d bytes)", self.filename, self.urls_count, written)

    def _find_tail(self) -> Sitemap:
        node = self._tail
        while node.next_sitemap is not None:
            node = node.next_sitemap
        self._tail = node
        return node

    def _build_next(self) -> Sitemap:
        self.next_sitemap = Sitemap(
            self.options,
            last_mod=self.sitemap_loc.last_mod,
            max_urls=self.max_urls,
            max_file_size=self.max_file_size,
            pretty_print=self.pretty_print,
            file_num=self.file_num + 1,
        )
        LOGGER.debug(
            "Sitemap %s is full (%d URLs, %d bytes), continuing in %s",
            self.filename,
            self.urls_count,
            self.size,
            self.next_sitemap.filename,
        )
        return self.next_sitemap

    def _absolute(self, location: str) -> str:
        hostname = self.options.hostname
        if not location or not hostname or is_absolute_url(location):
            return location
        return join_url(hostname, location)

    def _resolve(self, loc: SitemapLoc) -> SitemapLoc:
        return replace(
            loc,
            loc=self._absolute(loc.loc),
            images=[SitemapImage(loc=self._absolute(image.loc)) for image in loc.images],
        )
