"""Main CLI entry point for search-pager commands."""

import click

from search_pager import __version__
from search_pager.cli.commands import search
from search_pager.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="search-pager")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Search Pager CLI - Read large result sets out of a search store.

    Connection settings come from SEARCH_* environment variables (or a
    .env file), paging defaults from PAGINATION_* and logging from LOG_*.

    \b
    Commands:
      dump   Stream matching documents as JSON lines
      count  Count matching documents

    \b
    Quick Start:
      search-pager count compliance_results
      search-pager dump compliance_results --term benchmarkID=cis-aws -o out.jsonl
    """
    ctx.ensure_object(dict)


cli.add_command(search.dump)
cli.add_command(search.count)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
