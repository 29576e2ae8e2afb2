import logging
import threading
from contextlib import contextmanager
from contextvars import ContextVar

from django_search_path.schemas import (
    format_search_path, parse_search_path, prepend_schemas, set_search_path_sql, to_schema_path,
)
from django_search_path.signals import search_path_changed
from django_search_path.utils import get_default_from_connection, get_limit_set_calls, get_public_schema_name

logger = logging.getLogger(__name__)

# Maps database alias -> schema path for the current thread or task. The
# mapping is replaced on every write, never mutated, so a task started from
# this context can't change the path seen here.
_schema_paths = ContextVar('django_search_path.schemas', default={})


def get_stored_schemas(alias):
    return _schema_paths.get().get(alias)


def store_schemas(alias, schemas):
    schema_paths = dict(_schema_paths.get())
    if schemas is None:
        schema_paths.pop(alias, None)
    else:
        schema_paths[alias] = schemas
    _schema_paths.set(schema_paths)


class SchemaPathManager:
    """
    Keeps the schemas of the current thread or task for one database
    connection, and keeps the connection's search_path in line with them.

    The connection has to provide ``alias``, ``is_in_failed_transaction()``
    and ``execute_search_path_sql(sql, params=None)``.
    """

    def __init__(self, connection):
        self.connection = connection
        # The search_path last sent on the current physical connection, None
        # when unknown.
        self.pushed_schemas = None
        self._lock = threading.RLock()

    @property
    def alias(self):
        return self.connection.alias

    @property
    def schemas(self):
        schemas = get_stored_schemas(self.alias)
        if schemas is None:
            schemas = self.get_default_schemas()
            store_schemas(self.alias, schemas)
        return schemas

    @property
    def active_schema(self):
        """
        The schema new objects get created in.
        """
        schemas = self.schemas
        return schemas[0] if schemas else None

    def get_default_schemas(self):
        if get_default_from_connection():
            return self.get_search_path_from_connection()
        return to_schema_path([get_public_schema_name()])

    def store(self, schemas):
        """
        Changes the schemas of the current context without touching the
        connection.
        """
        schemas = to_schema_path(schemas)
        store_schemas(self.alias, schemas)
        search_path_changed.send(sender=self.connection.__class__,
                                 connection=self.connection,
                                 schemas=schemas)
        return schemas

    def set_schemas(self, schemas):
        schemas = self.store(schemas)
        self._push(schemas)

    def clear(self):
        store_schemas(self.alias, None)

    def is_synchronized(self):
        return self.pushed_schemas is not None and self.pushed_schemas == self.schemas

    def synchronize(self):
        self._push(self.schemas)

    def reset_connection_state(self):
        self.pushed_schemas = None

    def _push(self, schemas):
        with self._lock:
            # Inside a failed transaction the server rejects everything until
            # rollback, which also resets the search_path for us.
            if self.connection.is_in_failed_transaction():
                logger.debug("Not setting search_path to '%s' on '%s', the transaction is aborted.",
                             format_search_path(schemas), self.alias)
                return

            if get_limit_set_calls() and schemas == self.pushed_schemas:
                return

            sql, params = set_search_path_sql(schemas)
            self.pushed_schemas = None
            self.connection.execute_search_path_sql(sql, params)
            self.pushed_schemas = schemas
            logger.debug("Set search_path to '%s' on '%s'.", format_search_path(schemas), self.alias)

    @contextmanager
    def _overridden(self, build_path):
        previous_schemas = self.schemas
        try:
            self.set_schemas(build_path(previous_schemas))
            yield self.schemas
        finally:
            self.set_schemas(previous_schemas)

    def use_schema(self, *schemas):
        """
        Puts ``schemas`` in front of the current ones for the duration of the
        ``with`` block. Schemas already in the path move to the front.
        """
        schemas = to_schema_path(schemas)
        return self._overridden(lambda previous: prepend_schemas(schemas, previous))

    def override_schema(self, *schemas):
        """
        Uses only ``schemas`` for the duration of the ``with`` block.
        """
        schemas = to_schema_path(schemas)
        return self._overridden(lambda previous: schemas)

    def call_with_schema(self, schemas, func, *args, **kwargs):
        with self.use_schema(*schemas):
            return func(*args, **kwargs)

    def call_with_overridden_schema(self, schemas, func, *args, **kwargs):
        with self.override_schema(*schemas):
            return func(*args, **kwargs)

    def show_search_path(self):
        """
        The search_path as the server reports it, after bringing it in line
        with the schemas of the current context.
        """
        self.synchronize()
        return self._show_search_path()

    def get_search_path_from_connection(self):
        return parse_search_path(self._show_search_path())

    def _show_search_path(self):
        return self.connection.execute_search_path_sql('SHOW search_path')
