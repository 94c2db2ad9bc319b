"""Command-line interface for search-pager."""
