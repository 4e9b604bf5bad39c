"""Core sitemapgen data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List


class ChangeFreq(str, Enum):
    """Allowed values of the ``<changefreq>`` tag."""

    ALWAYS = "always"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    NEVER = "never"


@dataclass(slots=True)
class SitemapImage:
    """Image reference attached to a URL entry."""

    loc: str


@dataclass(slots=True)
class SitemapLoc:
    """One ``<url>`` entry of a sitemap.

    ``loc`` may be relative; it is joined with the sitemap hostname when the
    entry is added. The caller's instance is never modified.
    """

    loc: str
    last_mod: datetime | date | None = None
    change_freq: ChangeFreq | str | None = None
    priority: float | None = None
    images: List[SitemapImage] = field(default_factory=list)


@dataclass(slots=True)
class SitemapIndexLoc:
    """One ``<sitemap>`` row of a sitemap index."""

    loc: str = ""
    last_mod: datetime | date | None = None
