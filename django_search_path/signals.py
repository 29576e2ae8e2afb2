from django.dispatch import Signal

search_path_changed = Signal()
search_path_changed.__doc__ = """
Sent after the schemas of the current context have been changed, before the
new search_path is sent to the database

Argument Required = connection, schemas
"""
