"""Configuration holders and protocol limits."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

# sitemaps.org protocol limits per file
MAX_URLS_COUNT = 50_000
MAX_FILE_SIZE = 52_428_800

FILE_EXT = ".xml"
FILE_GZ_EXT = ".xml.gz"

DEFAULT_NAME = "sitemap"
DEFAULT_PING_TIMEOUT = 5.0


@dataclass(slots=True)
class SitemapOptions:
    """Settings shared by every file of a sitemap chain or index.

    ``hostname`` is prepended to every relative URL. ``server_uri`` is the
    path under which the sitemap files are served and is used to build the
    index rows. ``name`` is the output filename without extension.
    """

    name: str = DEFAULT_NAME
    hostname: str = ""
    server_uri: str = ""
    output_path: Path = Path(".")
    compress: bool = True
    pretty_print: bool = False

    def __post_init__(self) -> None:
        self.output_path = Path(self.output_path)

    @property
    def file_ext(self) -> str:
        return FILE_GZ_EXT if self.compress else FILE_EXT


@dataclass(slots=True)
class AppConfig:
    output_path: Path = Path("sitemaps")
    name: str = DEFAULT_NAME
    compress: bool = True
    pretty_print: bool = False
    ping_timeout: float = DEFAULT_PING_TIMEOUT

    def resolve_output_path(self, base_dir: Path | None = None) -> Path:
        if Path(self.output_path).is_absolute() or base_dir is None:
            return Path(self.output_path)
        return base_dir / self.output_path

    def to_options(
        self, hostname: str, *, server_uri: str = "", base_dir: Path | None = None
    ) -> SitemapOptions:
        return SitemapOptions(
            name=self.name,
            hostname=hostname,
            server_uri=server_uri,
            output_path=self.resolve_output_path(base_dir),
            compress=self.compress,
            pretty_print=self.pretty_print,
        )
