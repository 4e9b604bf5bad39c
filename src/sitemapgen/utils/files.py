"""Utility helpers for reading inputs and writing sitemap files."""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import Iterable, Iterator


def check_and_make_dir(path: Path) -> None:
    """Create ``path`` and its parents if missing."""
    Path(path).mkdir(parents=True, exist_ok=True)


def write_to_file(filename: str, path: Path, compress: bool, *chunks: bytes) -> int:
    """Write ``chunks`` to ``path/filename``, optionally gzip compressed.

    The file is created or truncated. Returns the number of uncompressed
    bytes written. The gzip stream is closed before the file so that the
    trailer is always flushed.
    """
    check_and_make_dir(path)
    written = 0
    with (Path(path) / filename).open("wb") as handle:
        if compress:
            # mtime=0 keeps repeated saves byte-identical
            with gzip.GzipFile(filename=filename, mode="wb", fileobj=handle, mtime=0) as stream:
                for chunk in chunks:
                    written += stream.write(chunk)
        else:
            for chunk in chunks:
                written += handle.write(chunk)
    return written


def iter_locations(inputs: Iterable[Path]) -> Iterator[str]:
    """Yield URL locations from text files, one per line.

    Blank lines and lines starting with ``#`` are skipped.
    """
    for item in inputs:
        with Path(item).open("r", encoding="utf-8") as handle:
            for line in handle:
                value = line.strip()
                if value and not value.startswith("#"):
                    yield value
