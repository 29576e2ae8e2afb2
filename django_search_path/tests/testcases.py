import re
from contextlib import contextmanager
from unittest import SkipTest, mock

from django.db import OperationalError, connection
from django.test import SimpleTestCase

from django_search_path.manager import SchemaPathManager

_BARE_IDENTIFIER = re.compile(r'^[a-z_][a-z0-9_$]*$')


@contextmanager
def catch_signal(signal):
    """
    Catch django signal and return the mocked call.
    """
    handler = mock.Mock()
    signal.connect(handler)
    yield handler
    signal.disconnect(handler)


def quote_search_path_entry(name):
    if _BARE_IDENTIFIER.match(name):
        return name
    return '"%s"' % name.replace('"', '""')


class FakeConnection:
    """
    Stands in for a PostgreSQL connection: remembers the statements it gets and
    reports the search_path back the way the server formats it.
    """

    def __init__(self, alias='fake', search_path='"$user", public'):
        self.alias = alias
        self.search_path_value = search_path
        self.failed_transaction = False
        self.executed = []

    def is_in_failed_transaction(self):
        return self.failed_transaction

    def execute_search_path_sql(self, sql, params=None):
        self.executed.append((sql, params))
        if sql == 'SHOW search_path':
            return self.search_path_value
        if params is None:
            self.search_path_value = '""'
        else:
            self.search_path_value = ', '.join(quote_search_path_entry(p) for p in params)
        return None

    @property
    def set_statements(self):
        return [(sql, params) for sql, params in self.executed if sql.startswith('SET')]


class FakeConnectionTestCase(SimpleTestCase):
    """
    Runs a ``SchemaPathManager`` against a ``FakeConnection``.
    """

    def setUp(self):
        super().setUp()
        self.fake = FakeConnection()
        self.manager = SchemaPathManager(self.fake)
        self.manager.clear()

    def tearDown(self):
        self.manager.clear()
        super().tearDown()

    def assertSchemas(self, *schemas):
        self.assertEqual(self.manager.active_schema, schemas[0] if schemas else None)
        self.assertEqual(self.manager.schemas, schemas)
        self.assertEqual(self.manager.get_search_path_from_connection(), schemas)


class PostgreSQLTestCase(SimpleTestCase):
    """
    Runs against the configured PostgreSQL database, creating ``SCHEMAS``
    beforehand. Skipped when no server can be reached.
    """
    databases = {'default'}

    SCHEMAS = ('schema1', 'schema2', 'schema3', 'schema4')

    @classmethod
    def setUpClass(cls):
        try:
            connection.ensure_connection()
        except OperationalError as e:
            raise SkipTest("PostgreSQL is not available: %s" % e)

        super().setUpClass()

        with connection.cursor() as cursor:
            for schema_name in cls.SCHEMAS:
                cursor.execute('CREATE SCHEMA IF NOT EXISTS %s' % connection.ops.quote_name(schema_name))

    @classmethod
    def tearDownClass(cls):
        connection.search_path.clear()
        with connection.cursor() as cursor:
            for schema_name in cls.SCHEMAS:
                cursor.execute('DROP SCHEMA IF EXISTS %s CASCADE' % connection.ops.quote_name(schema_name))

        super().tearDownClass()

    def setUp(self):
        super().setUp()
        connection.search_path.clear()
        connection.search_path.reset_connection_state()
        connection.set_schemas(['public'])
        self.assertSchemas('public')

    def tearDown(self):
        self.assertSchemas('public')
        super().tearDown()

    def assertSchemas(self, *schemas):
        self.assertEqual(connection.active_schema, schemas[0] if schemas else None)
        self.assertEqual(connection.schemas, schemas)
        self.assertEqual(connection.show_search_path(), ', '.join(schemas))
