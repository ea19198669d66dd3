"""CLI commands for cachedfonts."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.table import Table

from cachedfonts.core.exceptions import CachedFontsError
from cachedfonts.core.keys import short_name_or_locator


if TYPE_CHECKING:
    from cachedfonts.core.services import FontCache


app = typer.Typer(
    name="cachedfonts",
    help="Download, cache and load TrueType and OpenType fonts.",
    no_args_is_help=True,
)

CacheDirOption = typer.Option(
    None,
    "--cache-dir",
    help="Cache directory. Defaults to CACHEDFONTS_DIR or .fonts under the project root.",
)
VerboseOption = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Log every cache operation.",
)


def _fail(error: CachedFontsError) -> typer.Exit:
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)
    return typer.Exit(1)


def _build_cache(
    cache_dir: Path | None,
    verbose: bool,
    with_s3: bool = False,
) -> FontCache:
    """Create the FontCache used by a command.

    Args:
        cache_dir: Overrides the configured cache directory.
        verbose: Enables verbose logging on the cache.
        with_s3: Adds an S3 resolver for s3:// locators.
    """
    from cachedfonts.config import CacheSettings
    from cachedfonts.core.services import FontCache
    from cachedfonts.logging import setup_logging

    try:
        settings = CacheSettings.from_env()
    except CachedFontsError as e:
        raise _fail(e) from None
    if cache_dir is not None:
        settings = settings.model_copy(update={"cache_dir": cache_dir})

    resolver = None
    if with_s3:
        from cachedfonts.adapters.resolvers import S3LocatorResolver

        resolver = S3LocatorResolver()

    font_cache = FontCache.from_directory(settings=settings, resolver=resolver)
    if verbose:
        setup_logging()
        font_cache.toggle_verbose_logging(True)
    return font_cache


def _needs_s3(urls: list[str]) -> bool:
    return any(url.startswith("s3://") for url in urls)


@app.command()
def fetch(
    urls: list[str] = typer.Argument(..., help="Font urls to download."),
    cache_dir: Path | None = CacheDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Download fonts into the cache, showing progress."""
    from cachedfonts.progress import RichProgressReporter

    font_cache = _build_cache(cache_dir, verbose, with_s3=_needs_s3(urls))

    try:
        with RichProgressReporter() as progress:
            fonts = font_cache.cache_fonts(urls, max_workers=1, progress=progress)
    except CachedFontsError as e:
        raise _fail(e) from None

    for url, data in zip(urls, fonts, strict=True):
        typer.echo(f"{short_name_or_locator(url)}: {len(data)} bytes")


@app.command()
def status(
    urls: list[str] = typer.Argument(..., help="Font urls to check."),
    cache_dir: Path | None = CacheDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Show whether each font is cached or missing."""
    font_cache = _build_cache(cache_dir, verbose)

    table = Table()
    table.add_column("Font")
    table.add_column("Status")

    for url in urls:
        if font_cache.can_load_font(url):
            table.add_row(url, "[green]cached[/green]")
        else:
            table.add_row(url, "[yellow]missing[/yellow]")

    console = Console(force_terminal=True)
    console.print(table)


@app.command()
def load(
    urls: list[str] = typer.Argument(..., help="Font urls of one family."),
    family: str = typer.Option(..., "--family", "-f", help="Family name to register under."),
    cache_dir: Path | None = CacheDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Load fonts from the cache, downloading the ones that are missing."""
    from cachedfonts.facade import DynamicFont

    font_cache = _build_cache(cache_dir, verbose, with_s3=_needs_s3(urls))

    try:
        if len(urls) == 1:
            loader = DynamicFont(urls[0], family, font_cache=font_cache)
        else:
            loader = DynamicFont.family_of(urls, family, font_cache=font_cache)
        fonts = loader.load()
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None
    except CachedFontsError as e:
        raise _fail(e) from None

    typer.echo(f"Loaded {len(fonts)} font(s) for family {family}")


@app.command()
def remove(
    url: str = typer.Argument(..., help="Font url to remove from the cache."),
    cache_dir: Path | None = CacheDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Delete a cached font."""
    font_cache = _build_cache(cache_dir, verbose)

    try:
        font_cache.remove_cached_font(url)
    except CachedFontsError as e:
        raise _fail(e) from None

    typer.echo(f"Removed {short_name_or_locator(url)}")


@app.command()
def clean(
    cache_dir: Path | None = CacheDirOption,
    verbose: bool = VerboseOption,
) -> None:
    """Evict stale fonts and fonts beyond the size limit."""
    font_cache = _build_cache(cache_dir, verbose)

    try:
        removed = font_cache.clean()
    except CachedFontsError as e:
        raise _fail(e) from None

    typer.echo(f"Evicted {removed} font(s)")


def main() -> None:
    """Entry point for the CLI."""
    app()
