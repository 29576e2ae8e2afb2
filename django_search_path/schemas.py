import re

from django.core.exceptions import ImproperlyConfigured, ValidationError

# Valid PostgreSQL schema name regex
# Criteria:
#  1. Can be any valid character, if quoted, except NUL
#  2. Must be between 1 and 63 characters long
#
# Reference:
# https://www.postgresql.org/docs/current/sql-syntax-lexical.html#SQL-SYNTAX-IDENTIFIERS
PGSQL_VALID_SCHEMA_NAME = re.compile(r'^[^\x00]{1,63}$', re.DOTALL)

# Placeholder PostgreSQL substitutes with the session user's schema.
USER_SCHEMA_PLACEHOLDER = '$user'

_SEARCH_PATH_ENTRY = re.compile(r'\s*(?:"((?:[^"]|"")*)"|([^",\s]+))\s*(?:,|$)')


class MalformedSearchPath(ImproperlyConfigured):
    """The search_path reported by the server could not be parsed."""


def is_valid_schema_name(name):
    return PGSQL_VALID_SCHEMA_NAME.match(name)


def _check_schema_name(name):
    if not is_valid_schema_name(name):
        raise ValidationError("Invalid string used for the schema name.")


class SchemaName:
    """
    An identifier for a single schema.

    The name is kept exactly as given; it is only ever sent to the server as a
    bound parameter, so quotes, semicolons or leading hyphens are harmless.
    """
    __slots__ = ('_name',)

    def __init__(self, name):
        if isinstance(name, SchemaName):
            name = name.name
        elif not isinstance(name, str):
            raise TypeError("Schema names must be strings, not %s." % type(name).__name__)
        _check_schema_name(name)
        self._name = name

    @property
    def name(self):
        return self._name

    def __str__(self):
        return self._name

    def __repr__(self):
        return '%s(%r)' % (self.__class__.__name__, self._name)

    def __eq__(self, other):
        if isinstance(other, SchemaName):
            return self._name == other._name
        if isinstance(other, str):
            return self._name == other
        return NotImplemented

    def __hash__(self):
        return hash(self._name)


def to_schema_path(schemas):
    """
    Converts an iterable of names into a schema path: a tuple of
    ``SchemaName`` where each schema keeps the position of its first
    occurrence.
    """
    path = []
    seen = set()
    for schema in schemas:
        schema = SchemaName(schema)
        if schema not in seen:
            seen.add(schema)
            path.append(schema)
    return tuple(path)


def prepend_schemas(schemas, current_path):
    return to_schema_path(tuple(schemas) + tuple(current_path))


def format_search_path(schemas):
    return ', '.join(str(schema) for schema in schemas)


def set_search_path_sql(schemas):
    """
    Returns the ``SET search_path`` statement and its parameters. Every schema
    is a bound parameter; an empty path resolves to nothing.
    """
    if not schemas:
        return "SET search_path TO ''", None
    placeholders = ', '.join(['%s'] * len(schemas))
    return 'SET search_path TO {0}'.format(placeholders), [str(schema) for schema in schemas]


def parse_search_path(value):
    """
    Parses the output of ``SHOW search_path`` into a schema path.

    Entries are separated by commas. Quoted identifiers are unquoted, bare
    ones are folded to lower case the way the server resolves them, and the
    ``$user`` placeholder is dropped since it is not a real schema.
    """
    if value is None:
        raise MalformedSearchPath("The server did not report a search_path.")

    value = value.strip()
    names = []
    position = 0
    while position < len(value):
        match = _SEARCH_PATH_ENTRY.match(value, position)
        if match is None or match.end() == position:
            raise MalformedSearchPath("Unable to parse search_path %r." % value)
        position = match.end()

        quoted, bare = match.groups()
        name = quoted.replace('""', '"') if quoted is not None else bare.lower()
        if name and name != USER_SCHEMA_PLACEHOLDER:
            names.append(name)

    return to_schema_path(names)
