"""
Which lists have a configurable column layout.

Each list key maps to the entity type it shows and the dotted path of that
entity's default columns, so this module does not import the entity apps.
"""

from django.utils.module_loading import import_string

from apps.columns.storage import SessionStorage
from apps.columns.store import ColumnConfigStore

LISTS = {
    'contact-list-columns': ('contact', 'apps.contacts.catalog.DEFAULT_COLUMNS'),
    'deal-list-columns': ('deal', 'apps.deals.catalog.DEFAULT_COLUMNS'),
}


class UnknownListError(KeyError):
    pass


def entity_type_for(list_key):
    try:
        return LISTS[list_key][0]
    except KeyError:
        raise UnknownListError(list_key)


def default_columns_for(list_key):
    try:
        return import_string(LISTS[list_key][1])
    except KeyError:
        raise UnknownListError(list_key)


def store_for_request(request, list_key):
    """Column store of the given list, persisted in the request's session."""
    return ColumnConfigStore(list_key, default_columns_for(list_key), SessionStorage(request.session))
