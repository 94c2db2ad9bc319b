"""Logging infrastructure.

Library modules log through ``logging.getLogger(__name__)`` with structured
``extra=`` fields and never configure handlers themselves. Entrypoints call
``setup_logging()`` once:

    from search_pager.infra.logging import setup_logging

    setup_logging()  # reads LOG_* settings
"""

from search_pager.infra.logging.config import configure_logging, setup_logging
from search_pager.infra.logging.formatters import JSONFormatter

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "setup_logging",
]
