"""Search CLI commands.

Commands for reading documents out of a search index:
- dump: Stream every matching document as JSON lines
- count: Print the number of matching documents

Filters are given on the command line:

    --term status=failed              {"term": {"status": "failed"}}
    --terms benchmarkID=a,b           {"terms": {"benchmarkID": ["a", "b"]}}
    --exclude kind=test               {"bool": {"must_not": {"term": ...}}}
    --range evaluatedAt:gte=2024-01-01
"""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from search_pager.cli.utils import coro, error, header, info, success, warning
from search_pager.core.exceptions import IndexNotFoundError, SearchPagerError
from search_pager.core.pagination import (
    BoolFilter,
    MustNotFilter,
    Paginator,
    RangeFilter,
    TermFilter,
    TermsFilter,
    build_query,
)
from search_pager.infra.search import SearchClient

RANGE_OPERATORS = ("gt", "gte", "lt", "lte")
SORT_ORDERS = ("asc", "desc")


def _build_client() -> SearchClient:
    return SearchClient.from_settings()


def _split_pair(raw: str, option: str) -> tuple[str, str]:
    field, sep, value = raw.partition("=")
    if not sep or not field:
        msg = f"expected FIELD=VALUE, got {raw!r}"
        raise click.BadParameter(msg, param_hint=option)
    return field, value


def parse_filters(
    term: tuple[str, ...],
    terms: tuple[str, ...],
    exclude: tuple[str, ...],
    range_: tuple[str, ...],
) -> list[BoolFilter]:
    """Turn command-line filter options into bool filters."""
    filters: list[BoolFilter] = []

    for raw in term:
        field, value = _split_pair(raw, "--term")
        filters.append(TermFilter(field, value))

    for raw in terms:
        field, value = _split_pair(raw, "--terms")
        filters.append(TermsFilter(field, [v for v in value.split(",") if v]))

    for raw in exclude:
        field, value = _split_pair(raw, "--exclude")
        filters.append(MustNotFilter(TermFilter(field, value)))

    # Several bounds on one field collapse into one range clause
    bounds: dict[str, dict[str, str]] = {}
    for raw in range_:
        target, value = _split_pair(raw, "--range")
        field, sep, op = target.rpartition(":")
        if not sep or not field or op not in RANGE_OPERATORS:
            msg = f"expected FIELD:{{{'|'.join(RANGE_OPERATORS)}}}=VALUE, got {raw!r}"
            raise click.BadParameter(msg, param_hint="--range")
        bounds.setdefault(field, {})[op] = value
    for field, ops in bounds.items():
        try:
            filters.append(RangeFilter(field, **ops))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--range") from e

    return filters


def parse_sort(sort: tuple[str, ...]) -> list[dict[str, Any]] | None:
    """Turn ``FIELD[:asc|desc]`` options into sort clauses."""
    clauses: list[dict[str, Any]] = []
    for raw in sort:
        field, _, order = raw.partition(":")
        order = order or "asc"
        if not field or order not in SORT_ORDERS:
            msg = f"expected FIELD[:asc|desc], got {raw!r}"
            raise click.BadParameter(msg, param_hint="--sort")
        clauses.append({field: order})
    return clauses or None


def filter_options(func):
    """Attach the shared filter options to a command."""
    options = [
        click.option("--term", multiple=True, metavar="FIELD=VALUE", help="Exact match on a field"),
        click.option(
            "--terms",
            multiple=True,
            metavar="FIELD=A,B",
            help="Match any of comma-separated values",
        ),
        click.option("--exclude", multiple=True, metavar="FIELD=VALUE", help="Exclude exact matches"),
        click.option(
            "--range",
            "range_",
            multiple=True,
            metavar="FIELD:OP=VALUE",
            help="Range bound (OP is gt, gte, lt or lte)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.command()
@click.argument("index")
@filter_options
@click.option("--limit", "-n", type=click.IntRange(min=0), default=None, help="Stop after about N documents")
@click.option(
    "--page-size",
    type=click.IntRange(1, 10_000),
    default=None,
    help="Hits per request (default: PAGINATION_PAGE_SIZE)",
)
@click.option("--sort", multiple=True, metavar="FIELD[:asc|desc]", help="Sort before the tiebreaker")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, allow_dash=True),
    default="-",
    help="Output file (default: stdout)",
)
@coro
async def dump(
    index: str,
    term: tuple[str, ...],
    terms: tuple[str, ...],
    exclude: tuple[str, ...],
    range_: tuple[str, ...],
    limit: int | None,
    page_size: int | None,
    sort: tuple[str, ...],
    output: str,
) -> None:
    """Stream every matching document of INDEX as JSON lines.

    Reads through a point-in-time snapshot when the result set can span
    more than one page, so a dump is consistent even while the index is
    being written to.

    Examples:

    \b
      search-pager dump compliance_results --term benchmarkID=cis-aws -o results.jsonl
      search-pager dump findings --terms severity=high,critical --limit 500
    """
    filters = parse_filters(term, terms, exclude, range_)
    sort_clauses = parse_sort(sort)

    header(f"Dumping {index}")
    written = 0
    pages = 0

    try:
        async with _build_client() as client:
            paginator = Paginator(
                client,
                index,
                filters,
                limit,
                sort=sort_clauses,
                page_size=page_size,
            )
            with click.open_file(output, "w", encoding="utf-8") as out:
                async with paginator:
                    async for page in paginator:
                        pages += 1
                        for item in page.items:
                            out.write(json.dumps(item, default=str) + "\n")
                        written += page.hits
                        if page.total is not None and page.hits:
                            info(f"Page {pages}: {written}/{page.total.value} documents")
    except SearchPagerError as e:
        error(f"Dump failed after {written} documents: {e.detail}")
        sys.exit(1)

    if written == 0:
        warning(f"No documents matched in {index}")
        return
    success(f"Wrote {written} documents in {pages} pages")


@click.command()
@click.argument("index")
@filter_options
@coro
async def count(
    index: str,
    term: tuple[str, ...],
    terms: tuple[str, ...],
    exclude: tuple[str, ...],
    range_: tuple[str, ...],
) -> None:
    """Print the number of documents in INDEX matching the filters.

    Examples:

    \b
      search-pager count compliance_results --term complianceStatus=failed
    """
    filters = parse_filters(term, terms, exclude, range_)

    try:
        async with _build_client() as client:
            total = await client.count(build_query(filters), index)
    except IndexNotFoundError:
        warning(f"Index {index} not found")
        total = 0
    except SearchPagerError as e:
        error(f"Count failed: {e.detail}")
        sys.exit(1)

    click.echo(total)
