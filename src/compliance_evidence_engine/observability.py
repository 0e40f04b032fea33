"""Structured logging for the compliance evidence engine.

All modules obtain their logger through get_logger(__name__) and log with
keyword context, e.g. ``logger.info("Submission reviewed", submission_id=...)``.
Processor configuration is left to the host application.
"""

import structlog
from structlog.typing import FilteringBoundLogger


def get_logger(name: str) -> FilteringBoundLogger:
    """Return a structured logger bound to a module name.

    Args:
        name: Logger name, normally the calling module's ``__name__``.

    Returns:
        A structlog bound logger carrying ``logger=name`` in every event.
    """
    return structlog.get_logger(name).bind(logger=name)
