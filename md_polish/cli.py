"""
Polishes Markdown converted from a web page.
Relative link and image destinations become absolute and tables are compacted;
the result goes to stdout or to an output file.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from .config import ConfigError, apply_overrides, build_config
from .exceptions import InputTooLargeError, InvalidBaseURLError
from .filesystem import enforce_size, get_max_file_size, read_markdown, write_markdown
from .pipeline import process
from .resolver import require_absolute_base

__all__ = ["cli"]

STDIN_MARKER = "-"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _read_stdin(max_file_size: int) -> str:
    content = click.get_text_stream("stdin").read()
    enforce_size(len(content.encode("UTF-8")), max_file_size, "<stdin>")
    return content


@click.command()
@click.version_option(package_name="md-polish")
@click.option("-b", "--base-url", help="URL of the page the Markdown was converted from")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file path. If omitted, writes to stdout.",
)
@click.option(
    "--resolve-urls/--no-resolve-urls", default=None, help="Make relative destinations absolute"
)
@click.option(
    "--compact-tables/--no-compact-tables", default=None, help="Strip table cell padding"
)
@click.option("--separator-dashes", type=int, help="Dashes per table separator cell")
@click.option("-v", "--verbose", is_flag=True, help="Log each rewrite to stderr")
@click.argument(
    "source", default=STDIN_MARKER, type=click.Path(exists=True, dir_okay=False, allow_dash=True)
)
def cli(
    source: str,
    base_url: str | None = None,
    output: Path | None = None,
    resolve_urls: bool | None = None,
    compact_tables: bool | None = None,
    separator_dashes: int | None = None,
    verbose: bool = False,
):
    """
    Entry point for polishing a Markdown document.

    Args:
        source: Markdown file to read, or ``-`` for stdin.
        base_url: Page URL that relative destinations are resolved against.
        output: File to write; stdout when omitted.
        resolve_urls: Override for the link resolution pass.
        compact_tables: Override for the table compaction pass.
        separator_dashes: Override for the dash count in separator cells.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If the base URL is not absolute or configuration
            values are invalid.
        click.ClickException: If the input cannot be read, is too large, or the
            output cannot be written.

    Examples:
        md-polish page.md --base-url https://example.com/docs/page -o out/page.md
    """
    _configure_logging(verbose)

    search_path = Path.cwd() if source == STDIN_MARKER else Path(source).resolve().parent
    try:
        config = build_config(
            search_path,
            base_url=base_url,
            resolve_urls=resolve_urls,
            compact_tables=compact_tables,
            min_separator_dashes=separator_dashes,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    if config.resolve_urls and config.base_url is None:
        click.echo("Warning: no base URL given; links are left unresolved", err=True)
        config = apply_overrides(config, resolve_urls=False)
    elif config.resolve_urls:
        try:
            require_absolute_base(config.base_url)
        except InvalidBaseURLError as error:
            raise click.BadParameter(str(error), param_hint="'--base-url'") from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        if source == STDIN_MARKER:
            markdown = _read_stdin(max_file_size)
        else:
            markdown = read_markdown(Path(source), max_file_size)
    except (IOError, InputTooLargeError) as error:
        raise click.ClickException(str(error)) from error

    polished = process(markdown, config.base_url or "", config)

    if output is None:
        click.echo(polished, nl=False)
        return

    try:
        write_markdown(output, polished)
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
