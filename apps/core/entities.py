"""
Entity types that custom fields and column layouts attach to.

Catalogs are referenced by dotted path so apps can look each other up
without import cycles.
"""

from django.apps import apps
from django.utils.module_loading import import_string

CONTACT = 'contact'
DEAL = 'deal'

ENTITY_TYPE_CHOICES = [
    (CONTACT, 'Contact'),
    (DEAL, 'Deal'),
]

ENTITIES = {
    CONTACT: {
        'model': 'contacts.Contact',
        'catalog': 'apps.contacts.catalog.CATALOG',
        'default_columns': 'apps.contacts.catalog.DEFAULT_COLUMNS',
        'row_keys': 'apps.contacts.serializers.ROW_KEYS',
    },
    DEAL: {
        'model': 'deals.Deal',
        'catalog': 'apps.deals.catalog.CATALOG',
        'default_columns': 'apps.deals.catalog.DEFAULT_COLUMNS',
        'row_keys': 'apps.deals.serializers.ROW_KEYS',
    },
}


def get_entity_model(entity_type):
    return apps.get_model(ENTITIES[entity_type]['model'])


def get_catalog(entity_type):
    return import_string(ENTITIES[entity_type]['catalog'])


def reserved_column_ids(entity_type):
    """Column ids a custom field key may not take for this entity type."""
    catalog = get_catalog(entity_type)
    default_columns = import_string(ENTITIES[entity_type]['default_columns'])
    row_keys = import_string(ENTITIES[entity_type]['row_keys'])
    return set(catalog.column_ids()) | {column.id for column in default_columns} | set(row_keys)
