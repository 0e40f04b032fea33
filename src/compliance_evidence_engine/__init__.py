"""Compliance evidence engine.

Evidence form registry, submission validation, document freshness and task
completion scoring, and finding notification routing for organization
compliance dashboards.
"""

__version__ = "0.1.0"
