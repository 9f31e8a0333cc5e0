"""
Repository layer for LeeCMS.

All SQL for the web service lives here. The kernel's PostgresStorage is the
only other place that touches the pages table.
"""

from api.repos.page_repo import PageRepo

__all__ = [
    "PageRepo",
]
