"""CLI entry points: site-search build, site-search search, site-search inspect."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path

import click

from .config import Config
from .errors import SiteSearchError


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Site search — build and query the full-text index of a static site."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = Config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.option("--corpus", type=click.Path(path_type=Path), help="Corpus JSON written by the site generator")
@click.option("--output", "-o", type=click.Path(path_type=Path), help="Where to write the index artifact")
@click.option("--tokenizer", type=click.Choice(["cjk-bigram", "simple"]), help="Segmentation strategy")
@click.option("--title-boost", type=float, help="Weight of title matches relative to content matches")
@click.option("--strip-html/--no-strip-html", default=None, help="Remove residual HTML tags from corpus fields")
@click.pass_context
def build(
    ctx: click.Context,
    corpus: Path | None,
    output: Path | None,
    tokenizer: str | None,
    title_boost: float | None,
    strip_html: bool | None,
) -> None:
    """Build the search index artifact from the site corpus."""
    from .search import reindex

    config = ctx.obj["config"]
    if tokenizer:
        config = replace(config, tokenizer=tokenizer)
    if title_boost is not None:
        config = replace(config, title_boost=title_boost)
    if strip_html is not None:
        config = replace(config, strip_html=strip_html)
    output = output or config.index_path

    try:
        index = reindex(config, corpus_path=corpus, index_path=output)
    except (SiteSearchError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    if index.document_count == 0:
        click.echo("Warning: corpus is empty, every search will return no results.", err=True)
    click.echo(f"Indexed {index.document_count} document(s), {len(index.postings)} term(s) -> {output}")


@cli.command()
@click.argument("query")
@click.option("--index", "index_path", type=click.Path(path_type=Path), help="Index artifact to search")
@click.option("--limit", "-n", type=int, help="Max results to return")
@click.option("--window", type=int, help="Snippet characters on each side of the first match")
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def search(
    ctx: click.Context,
    query: str,
    index_path: Path | None,
    limit: int | None,
    window: int | None,
    as_json: bool,
) -> None:
    """Search the site's posts and pages."""
    from .search.engine import open_engine

    config = ctx.obj["config"]
    try:
        engine = open_engine(
            index_path or config.index_path,
            scorer=config.scorer,
            window_size=window if window is not None else config.snippet_window,
        )
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    results = engine.search(query, limit=limit if limit is not None else config.result_limit)

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
    elif not engine.is_ready():
        click.echo("Search is unavailable: no usable index. Run `site-search build` first.")
    elif not query.strip():
        click.echo("Enter a search query.")
    elif results:
        for rank, r in enumerate(results, start=1):
            click.echo(f"\n--- [{rank}] {r.title} (score: {r.score:.2f}) ---")
            click.echo(f"  {r.url}")
            click.echo(f"  {r.snippet}")
    else:
        click.echo("No results found.")


@cli.command()
@click.option("--index", "index_path", type=click.Path(path_type=Path), help="Index artifact to inspect")
@click.pass_context
def inspect(ctx: click.Context, index_path: Path | None) -> None:
    """Show statistics about an index artifact."""
    from .search.artifact import load_artifact

    config = ctx.obj["config"]
    index_path = index_path or config.index_path
    try:
        index, store = load_artifact(index_path)
    except SiteSearchError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Index: {index_path}")
    click.echo(f"  Documents:      {len(store)}")
    click.echo(f"  Terms:          {len(index.postings)}")
    click.echo(f"  Avg length:     {index.average_document_length:.1f} tokens")
    click.echo(f"  Tokenizer:      {index.tokenizer_name}")
    click.echo(f"  Title boost:    {index.title_boost:g}")
