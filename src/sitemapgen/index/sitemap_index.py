"""Sitemap index: concurrent saving of sitemap chains."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import replace
from pathlib import Path
from typing import BinaryIO

from sitemapgen.config import MAX_FILE_SIZE, MAX_URLS_COUNT, SitemapOptions
from sitemapgen.encoding.encoder import encode_index
from sitemapgen.errors import PingBeforeSaveError, SitemapError
from sitemapgen.index.ping import Pinger
from sitemapgen.index.sitemap import Sitemap
from sitemapgen.models import SitemapIndexLoc
from sitemapgen.utils.files import check_and_make_dir, write_to_file
from sitemapgen.utils.urls import join_url

LOGGER = logging.getLogger(__name__)


class SitemapIndex:
    """Owns sitemap chains and writes the index that references them.

    :meth:`save` writes every chain in its own thread and collects one
    ``SitemapIndexLoc`` per written file. Rows are ordered by completion,
    not by chain creation. A chain that fails to save is logged and left out
    of the index; its name is recorded in ``failed_sitemaps``.
    """

    def __init__(
        self,
        options: SitemapOptions | None = None,
        *,
        max_urls: int = MAX_URLS_COUNT,
        max_file_size: int = MAX_FILE_SIZE,
    ) -> None:
        self.options = options if options is not None else SitemapOptions()
        self.pretty_print = self.options.pretty_print
        self.max_urls = max_urls
        self.max_file_size = max_file_size
        self.sitemap_locs: list[SitemapIndexLoc] = []
        self.sitemaps: list[Sitemap] = []
        self.failed_sitemaps: list[str] = []
        self.final_url: str | None = None
        self._generated: list[SitemapIndexLoc] = []
        self._lock = threading.Lock()

    @property
    def filename(self) -> str:
        return f"{self.options.name}{self.options.file_ext}"

    def add(self, loc: SitemapIndexLoc) -> None:
        """Append a row; safe to call from several threads."""
        with self._lock:
            self.sitemap_locs.append(loc)

    def new_sitemap(self) -> Sitemap:
        """Create a chain configured like this index and take ownership of it."""
        options = replace(self.options, name=f"{self.options.name}{len(self.sitemaps) + 1}")
        sitemap = Sitemap(
            options,
            max_urls=self.max_urls,
            max_file_size=self.max_file_size,
            pretty_print=self.pretty_print,
        )
        self.sitemaps.append(sitemap)
        return sitemap

    def append_sitemap(self, sitemap: Sitemap) -> None:
        """Take ownership of an existing chain without changing its settings."""
        self.sitemaps.append(sitemap)

    def set_hostname(self, hostname: str) -> None:
        self.options.hostname = hostname
        for sitemap in self.sitemaps:
            sitemap.options.hostname = hostname

    def set_output_path(self, output_path: Path | str) -> None:
        self.options.output_path = Path(output_path)
        for sitemap in self.sitemaps:
            sitemap.options.output_path = Path(output_path)

    def set_compress(self, compress: bool) -> None:
        self.options.compress = compress
        for sitemap in self.sitemaps:
            sitemap.options.compress = compress

    def to_bytes(self) -> bytes:
        with self._lock:
            locs = list(self.sitemap_locs)
        return encode_index(locs, pretty_print=self.pretty_print)

    def write_to(self, stream: BinaryIO) -> int:
        return stream.write(self.to_bytes())

    def save(self) -> str:
        """Save every chain, then the index itself. Returns the index filename.

        Errors writing the index file propagate; errors of single chains do
        not (see ``failed_sitemaps``).
        """
        self.final_url = None
        self._check_filenames()
        check_and_make_dir(self.options.output_path)
        self._forget_generated()
        self._save_sitemaps()

        filename = self.filename
        written = write_to_file(
            filename, self.options.output_path, self.options.compress, self.to_bytes()
        )
        self.final_url = join_url(
            self.options.hostname, self.options.output_path.as_posix(), filename
        )
        LOGGER.info(
            "Wrote sitemap index %s (%d sitemaps, %d bytes)",
            filename,
            len(self.sitemap_locs),
            written,
        )
        return filename

    def ping_search_engines(self, *ping_urls: str, pinger: Pinger | None = None) -> dict[str, bool]:
        """Notify search engines about the saved index.

        ``ping_urls`` are extra URL templates with a ``%s`` placeholder.
        """
        if self.final_url is None:
            raise PingBeforeSaveError("the save method must be called before ping")
        if pinger is not None:
            return pinger.ping(self.final_url, *ping_urls)
        with Pinger() as own_pinger:
            return own_pinger.ping(self.final_url, *ping_urls)

    def _check_filenames(self) -> None:
        planned = Counter(
            (sitemap.options.output_path, filename)
            for sitemap in self.sitemaps
            for filename in sitemap.filenames()
        )
        planned[(self.options.output_path, self.filename)] += 1
        duplicates = sorted(name for (_, name), count in planned.items() if count > 1)
        if duplicates:
            raise SitemapError(f"Sitemap filenames collide: {', '.join(duplicates)}")

    def _forget_generated(self) -> None:
        generated = {id(loc) for loc in self._generated}
        with self._lock:
            self.sitemap_locs = [loc for loc in self.sitemap_locs if id(loc) not in generated]
        self._generated = []

    def _save_sitemaps(self) -> None:
        self.failed_sitemaps = []
        if not self.sitemaps:
            return

        with ThreadPoolExecutor(max_workers=len(self.sitemaps)) as executor:
            futures = {executor.submit(self._save_sitemap, sitemap): sitemap for sitemap in self.sitemaps}
            for future in as_completed(futures):
                sitemap = futures[future]
                try:
                    locs = future.result()
                except Exception as exc:
                    LOGGER.error("Error while saving sitemap %s: %s", sitemap.options.name, exc)
                    self.failed_sitemaps.append(sitemap.options.name)
                    continue
                for loc in locs:
                    self.add(loc)
                self._generated.extend(locs)

    def _save_sitemap(self, sitemap: Sitemap) -> list[SitemapIndexLoc]:
        filenames = sitemap.save()
        locs: list[SitemapIndexLoc] = []
        for filename, node in zip(filenames, sitemap.iter_chain()):
            node.sitemap_loc.loc = join_url(self.options.hostname, self.options.server_uri, filename)
            locs.append(replace(node.sitemap_loc))
        return locs
