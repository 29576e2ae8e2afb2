import logging

from django_search_path.schemas import format_search_path
from django_search_path.utils import get_search_path_manager


class SearchPathContextFilter(logging.Filter):
    """
    Add the current ``search_path`` and ``active_schema`` to log records.
    """
    def filter(self, record):
        manager = get_search_path_manager()
        record.search_path = format_search_path(manager.schemas)
        record.active_schema = manager.active_schema
        return True
