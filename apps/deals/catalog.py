"""
Deal columns: what can be filtered, and the default list layout.
"""
from apps.columns.store import ColumnConfig
from apps.querying.catalog import DATE, ENUM, NUMBER, TEXT, EntityCatalog, FieldSpec
from .models import Deal

LIST_KEY = 'deal-list-columns'

CATALOG = EntityCatalog(
    'deal',
    fields={
        'name': FieldSpec(TEXT, ['name']),
        'stage': FieldSpec(ENUM, ['stage'], options=Deal.STAGES),
        'value': FieldSpec(NUMBER, ['value']),
        'currency': FieldSpec(TEXT, ['currency']),
        'expectedCloseDate': FieldSpec(DATE, ['expected_close_date']),
        'notes': FieldSpec(TEXT, ['notes']),
        'createdAt': FieldSpec(DATE, ['created_at']),
        'updatedAt': FieldSpec(DATE, ['updated_at']),
    },
    search_paths=('name',),
)

DEFAULT_COLUMNS = [
    ColumnConfig('name', 'Deal', order=0),
    ColumnConfig('stage', 'Stage', order=1),
    ColumnConfig('value', 'Value', order=2),
    ColumnConfig('contacts', 'Contacts', order=3),
    ColumnConfig('expectedCloseDate', 'Expected Close', order=4),
    ColumnConfig('createdAt', 'Created', order=5),
]
