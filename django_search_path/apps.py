from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured
from django.db import connections

from django_search_path.schemas import is_valid_schema_name
from django_search_path.utils import get_public_schema_name, get_search_path_database_alias


class DjangoSearchPathConfig(AppConfig):
    name = 'django_search_path'
    verbose_name = "Django search path"

    def ready(self):
        database = get_search_path_database_alias()
        if database not in connections.settings:
            raise ImproperlyConfigured("SEARCH_PATH_DB_ALIAS '%s' is not in DATABASES." % database)

        if not hasattr(connections[database], 'search_path'):
            raise ImproperlyConfigured("The '%s' database must use the "
                                       "'django_search_path.postgresql_backend' ENGINE." % database)

        if not is_valid_schema_name(get_public_schema_name()):
            raise ImproperlyConfigured("PUBLIC_SCHEMA_NAME is not a valid schema name.")
