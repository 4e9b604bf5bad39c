"""Command line interface for sitemapgen."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List

import typer
from rich.console import Console
from rich.table import Table

from sitemapgen.config import MAX_URLS_COUNT, AppConfig
from sitemapgen.errors import EncodingError, SitemapError
from sitemapgen.index.ping import Pinger
from sitemapgen.index.sitemap import Sitemap
from sitemapgen.index.sitemap_index import SitemapIndex
from sitemapgen.models import SitemapLoc
from sitemapgen.utils.files import iter_locations


console = Console()
app = typer.Typer(help="sitemapgen - split URL lists into sitemaps.org files")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _add_locations(sitemap: Sitemap, path: Path) -> int:
    count = 0
    for location in iter_locations([path]):
        try:
            sitemap.add(SitemapLoc(loc=location))
        except EncodingError as exc:
            raise typer.BadParameter(f"{path}: {exc}") from exc
        count += 1
    return count


def _print_ping_results(results: Dict[str, bool]) -> None:
    for url, ok in results.items():
        status = "[green]ok[/green]" if ok else "[red]failed[/red]"
        console.print(f"Ping {status}: {url}")


@app.command()
def generate(
    inputs: List[Path] = typer.Argument(
        ...,
        help="Text files with one URL or path per line.",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    hostname: str = typer.Option(..., "--hostname", help="Prefix for relative URLs"),
    output: Path = typer.Option(None, "--output", "-o", help="Output directory"),
    name: str = typer.Option(AppConfig().name, help="Base filename without extension"),
    server_uri: str = typer.Option("", "--server-uri", help="Path the sitemap files are served under"),
    compress: bool = typer.Option(AppConfig().compress, "--compress/--no-compress", help="Write .xml.gz files"),
    pretty: bool = typer.Option(AppConfig().pretty_print, "--pretty", help="Indent the XML output"),
    index: bool = typer.Option(True, "--index/--no-index", help="Write a sitemap index over all inputs"),
    max_urls: int = typer.Option(MAX_URLS_COUNT, "--max-urls", min=1, help="URLs per sitemap file"),
    ping: bool = typer.Option(False, "--ping", help="Ping search engines after saving the index"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Generate sitemap files from URL lists."""
    _setup_logging(verbose)
    config = AppConfig(
        output_path=output if output is not None else AppConfig().output_path,
        name=name,
        compress=compress,
        pretty_print=pretty,
    )
    options = config.to_options(hostname, server_uri=server_uri)

    if not index:
        if len(inputs) != 1:
            raise typer.BadParameter("--no-index accepts exactly one input file")
        if ping:
            raise typer.BadParameter("--ping requires --index")
        sitemap = Sitemap(options, max_urls=max_urls)
        count = _add_locations(sitemap, inputs[0])
        filenames = sitemap.save()
        console.print(
            f"Wrote {len(filenames)} sitemap file(s) with {count} URLs "
            f"into [bold]{options.output_path}[/bold]"
        )
        for filename in filenames:
            console.print(f"  {filename}")
        return

    sitemap_index = SitemapIndex(options, max_urls=max_urls)
    for path in inputs:
        _add_locations(sitemap_index.new_sitemap(), path)

    try:
        filename = sitemap_index.save()
    except SitemapError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Sitemap")
    table.add_column("Last modified")
    for row in sitemap_index.sitemap_locs:
        table.add_row(row.loc, row.last_mod.isoformat() if row.last_mod else "")
    console.print(table)
    console.print(f"Index [bold]{filename}[/bold] published at {sitemap_index.final_url}")

    if sitemap_index.failed_sitemaps:
        console.print(
            f"[yellow]Failed sitemaps: {', '.join(sitemap_index.failed_sitemaps)}[/yellow]"
        )
        raise typer.Exit(code=1)

    if ping:
        with Pinger(timeout=config.ping_timeout) as pinger:
            results = sitemap_index.ping_search_engines(pinger=pinger)
        _print_ping_results(results)


@app.command()
def ping(
    sitemap_url: str = typer.Argument(..., help="Published URL of the sitemap or index"),
    target: List[str] = typer.Option(None, "--target", help="Extra ping URL template containing %s"),
    timeout: float = typer.Option(AppConfig().ping_timeout, help="Request timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Notify search engines about a published sitemap."""
    _setup_logging(verbose)
    with Pinger(timeout=timeout) as pinger:
        try:
            results = pinger.ping(sitemap_url, *(target or []))
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
    _print_ping_results(results)
