"""
Contact columns: what can be filtered, and the default list layout.
"""
from apps.columns.store import ColumnConfig
from apps.querying.catalog import DATE, TEXT, EntityCatalog, FieldSpec

LIST_KEY = 'contact-list-columns'

CATALOG = EntityCatalog(
    'contact',
    fields={
        # "name" matches either part of the name
        'name': FieldSpec(TEXT, ['first_name', 'last_name']),
        'firstName': FieldSpec(TEXT, ['first_name']),
        'lastName': FieldSpec(TEXT, ['last_name']),
        'email': FieldSpec(TEXT, ['email']),
        'phone': FieldSpec(TEXT, ['phone']),
        'company': FieldSpec(TEXT, ['company']),
        'jobTitle': FieldSpec(TEXT, ['job_title']),
        'notes': FieldSpec(TEXT, ['notes']),
        'createdAt': FieldSpec(DATE, ['created_at']),
        'updatedAt': FieldSpec(DATE, ['updated_at']),
    },
    search_paths=('first_name', 'last_name', 'email', 'company'),
)

# quick search looks a little wider than the list search
QUICK_SEARCH_PATHS = CATALOG.search_paths + ('phone', 'job_title')

DEFAULT_COLUMNS = [
    ColumnConfig('name', 'Name', order=0),
    ColumnConfig('email', 'Email', order=1),
    ColumnConfig('phone', 'Phone', order=2),
    ColumnConfig('company', 'Company', order=3),
    ColumnConfig('jobTitle', 'Job Title', order=4),
    ColumnConfig('tags', 'Tags', order=5),
    ColumnConfig('createdAt', 'Created', order=6),
]
