"""
Sorting of serialized list rows by the active column sort directive.

Rows are the camelCase dicts the list endpoints return. Custom field columns
are read from the row's customFields, built-in columns from the top level.
Rows with no value for the column always go last, whichever the direction.
"""

from apps.querying import catalog as cat
from apps.querying.compiler import parse_number

ASC = 'asc'
DESC = 'desc'


def row_value(row, column_id, custom=False):
    if not custom and column_id in row:
        return row[column_id]
    return (row.get('customFields') or {}).get(column_id)


def sort_key(value, column_type):
    """Comparable key for a row value, None when it cannot take part in sorting."""
    if value is None or value == '' or value == []:
        return None
    if column_type == cat.NUMBER:
        return parse_number(value)
    if isinstance(value, (list, tuple)):
        value = ', '.join(str(item) for item in value)
    if isinstance(value, bool):
        value = 'true' if value else 'false'
    # dates are serialized as ISO strings, which sort correctly as text
    return str(value).casefold()


def sort_rows(rows, column_id, direction, column_type=cat.TEXT, custom=False):
    """
    Return rows ordered by one column

    Args:
        rows (list): serialized rows
        column_id (str): column to sort on
        direction (str): 'asc' or 'desc'; anything else keeps the input order
        column_type (str): column type from the entity catalog
        custom (bool): the column is a custom field, read from customFields
    """
    rows = list(rows)
    if direction not in (ASC, DESC):
        return rows

    keyed = []
    missing = []
    for row in rows:
        key = sort_key(row_value(row, column_id, custom), column_type)
        if key is None:
            missing.append(row)
        else:
            keyed.append((key, row))

    keyed.sort(key=lambda pair: pair[0], reverse=(direction == DESC))
    return [row for _, row in keyed] + missing
