from contextlib import ContextDecorator, asynccontextmanager

from asgiref.sync import sync_to_async
from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, connections

from django_search_path.schemas import prepend_schemas, to_schema_path


def get_search_path_database_alias():
    return getattr(settings, 'SEARCH_PATH_DB_ALIAS', DEFAULT_DB_ALIAS)


def get_public_schema_name():
    return getattr(settings, 'PUBLIC_SCHEMA_NAME', 'public')


def get_default_from_connection():
    return getattr(settings, 'SEARCH_PATH_FROM_CONNECTION', False)


def get_limit_set_calls():
    return getattr(settings, 'SEARCH_PATH_LIMIT_SET_CALLS', True)


def get_search_path_manager(database=None):
    return connections[database or get_search_path_database_alias()].search_path


class _schema_override(ContextDecorator):
    def __init__(self, *schemas, database=None):
        self.schemas = schemas
        self.database = database or get_search_path_database_alias()
        self._overrides = []
        super().__init__()

    def _recreate_cm(self):
        # Each call of a decorated function gets its own stack of overrides.
        return self.__class__(*self.schemas, database=self.database)

    def get_override(self, manager):
        raise NotImplementedError

    def __enter__(self):
        override = self.get_override(get_search_path_manager(self.database))
        override.__enter__()
        self._overrides.append(override)

    def __exit__(self, *exc):
        return self._overrides.pop().__exit__(*exc)


class use_schema(_schema_override):
    """
    Puts ``schemas`` in front of the current search_path for the duration of
    the block, or of every call to the decorated function.
    """
    def get_override(self, manager):
        return manager.use_schema(*self.schemas)


class override_schema(_schema_override):
    """
    Replaces the current search_path with ``schemas`` for the duration of the
    block, or of every call to the decorated function.
    """
    def get_override(self, manager):
        return manager.override_schema(*self.schemas)


def _current_schemas(database):
    return get_search_path_manager(database).schemas


def _synchronize(database):
    get_search_path_manager(database).synchronize()


@asynccontextmanager
async def _async_schema_override(database, build_path):
    database = database or get_search_path_database_alias()
    manager = get_search_path_manager(database)
    previous_schemas = await sync_to_async(_current_schemas)(database)

    # The path is stored in this task's context, then pushed from the thread
    # the ORM runs on, which inherits the context.
    manager.store(build_path(previous_schemas))
    try:
        await sync_to_async(_synchronize)(database)
        yield
    finally:
        manager.store(previous_schemas)
        await sync_to_async(_synchronize)(database)


def async_use_schema(*schemas, database=None):
    return _async_schema_override(database, lambda previous: prepend_schemas(schemas, previous))


def async_override_schema(*schemas, database=None):
    return _async_schema_override(database, lambda previous: to_schema_path(schemas))


def schema_exists(schema_name, database=None):
    _connection = connections[database or get_search_path_database_alias()]
    with _connection.cursor() as cursor:
        cursor.execute(
            'SELECT 1 FROM INFORMATION_SCHEMA.SCHEMATA WHERE SCHEMA_NAME = %s',
            [str(schema_name)],
        )
        return cursor.fetchone() is not None
