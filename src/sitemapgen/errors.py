"""Exceptions raised by sitemapgen."""

from __future__ import annotations


class SitemapError(Exception):
    """Base class for sitemap generation errors."""


class EncodingError(SitemapError, ValueError):
    """A URL entry cannot be serialized into a valid sitemap."""


class PingBeforeSaveError(SitemapError, RuntimeError):
    """Search engines were pinged before the sitemap index was saved."""
