from importlib import import_module

from django.conf import settings

from django_search_path.manager import SchemaPathManager
from django_search_path.utils import get_limit_set_calls

try:
    from django.db.backends.postgresql.psycopg_any import is_psycopg3
except ImportError:
    is_psycopg3 = False

if is_psycopg3:
    import psycopg
    from psycopg.pq import TransactionStatus

    TRANSACTION_STATUS_INERROR = TransactionStatus.INERROR
else:
    import psycopg2 as psycopg
    from psycopg2.extensions import TRANSACTION_STATUS_INERROR


ORIGINAL_BACKEND = getattr(settings, 'ORIGINAL_BACKEND', 'django.db.backends.postgresql')

original_backend = import_module(ORIGINAL_BACKEND + '.base')


class DatabaseWrapper(original_backend.DatabaseWrapper):
    """
    Adds a per thread/task stack of schemas that decides the search_path of
    the connection. See ``SchemaPathManager`` for the API.
    """

    def __init__(self, *args, **kwargs):
        self.search_path = SchemaPathManager(self)
        super().__init__(*args, **kwargs)

    def connect(self):
        self.search_path.reset_connection_state()
        super().connect()

    def close(self):
        self.search_path.reset_connection_state()
        super().close()

    def _rollback(self):
        # Rolling back undoes any SET issued in the transaction.
        try:
            super()._rollback()
        finally:
            self.search_path.reset_connection_state()

    def _savepoint_rollback(self, sid):
        try:
            super()._savepoint_rollback(sid)
        finally:
            self.search_path.reset_connection_state()

    @property
    def schemas(self):
        return self.search_path.schemas

    @property
    def active_schema(self):
        return self.search_path.active_schema

    def set_schemas(self, schemas):
        self.search_path.set_schemas(schemas)

    def use_schema(self, *schemas):
        return self.search_path.use_schema(*schemas)

    def override_schema(self, *schemas):
        return self.search_path.override_schema(*schemas)

    def show_search_path(self):
        return self.search_path.show_search_path()

    def is_in_failed_transaction(self):
        if self.connection is None:
            return False
        if is_psycopg3:
            status = self.connection.info.transaction_status
        else:
            status = self.connection.get_transaction_status()
        return status == TRANSACTION_STATUS_INERROR

    def execute_search_path_sql(self, sql, params=None):
        """
        Runs ``sql`` on a cursor of its own and returns the first value of the
        result, if any. Parameters are always bound client side, since the
        server can't take them in SET or SHOW.
        """
        self.ensure_connection()
        with self.wrap_database_errors:
            if is_psycopg3:
                cursor = psycopg.ClientCursor(self.connection)
            else:
                cursor = self.connection.cursor()
            with cursor:
                cursor.execute(sql, params)
                if cursor.description is None:
                    return None
                row = cursor.fetchone()
                return row[0] if row else None

    def _cursor(self, name=None):
        """
        Every Django db operation goes through here to get a cursor, so this
        is where the search_path catches up with the schemas of the calling
        thread or task.
        """
        if name:
            cursor = super()._cursor(name=name)
        else:
            cursor = super()._cursor()

        # Only send the search_path when this context's schemas differ from
        # what the connection last received, unless limiting is turned off.
        if (not get_limit_set_calls()) or not self.search_path.is_synchronized():
            self.search_path.synchronize()
        return cursor
