"""
Field catalogs
==============

An EntityCatalog lists the built-in columns of one entity type (contact or
deal) that a client may filter on, with the column type the compiler must
use for them. Anything not in the catalog is looked up in the owner's custom
field definitions.

The column type of a filter always comes from here, never from the request.
"""

from apps.querying import expressions as ex


# Column types (what the UI shows and which operators apply)
TEXT = 'text'
NUMBER = 'number'
DATE = 'date'
ENUM = 'enum'

COLUMN_TYPES = (TEXT, NUMBER, DATE, ENUM)

OPERATORS = {
    TEXT: ('contains', 'equals', 'startsWith', 'endsWith'),
    NUMBER: ('gt', 'lt', 'gte', 'lte', 'eq'),
    DATE: ('before', 'after', 'on', 'between'),
    ENUM: ('equals', 'in'),
}

ALL_OPERATORS = tuple(sorted({op for ops in OPERATORS.values() for op in ops}))

DEFAULT_KINDS = {
    TEXT: ex.TEXT_KIND,
    NUMBER: ex.NUMBER_KIND,
    DATE: ex.DATETIME_KIND,
    ENUM: ex.ENUM_KIND,
}

# Custom field value type -> (column type, value kind, enum options)
CUSTOM_FIELD_COLUMNS = {
    'text': (TEXT, ex.TEXT_KIND, ()),
    'number': (NUMBER, ex.NUMBER_KIND, ()),
    'date': (DATE, ex.DATE_TEXT_KIND, ()),
    'boolean': (ENUM, ex.BOOLEAN_KIND, ('true', 'false')),
}


class FieldSpec:
    """A filterable built-in column: its type and the model paths behind it."""

    def __init__(self, column_type, paths, kind=None, options=()):
        if column_type not in COLUMN_TYPES:
            raise ValueError(f"Unknown column type: {column_type}")
        self.column_type = column_type
        self.paths = tuple(paths)
        self.kind = kind or DEFAULT_KINDS[column_type]
        self.options = tuple(options)

    def refs(self):
        return tuple(ex.FieldRef(path, self.kind) for path in self.paths)


class ResolvedColumn:
    """A column id resolved against the catalog and the custom definitions."""

    def __init__(self, column_id, column_type, refs, options=(), custom=False):
        self.column_id = column_id
        self.column_type = column_type
        self.refs = tuple(refs)
        self.options = tuple(options)
        self.custom = custom

    def __repr__(self):
        return f"<ResolvedColumn {self.column_id} ({self.column_type})>"


class EntityCatalog:
    """
    Built-in filterable columns of one entity type

    Args:
        entity_type (str): 'contact' or 'deal'
        fields (dict): column id -> FieldSpec
        search_paths (tuple): model paths the free-text search looks at
        owner_path (str): model path holding the owner id
    """

    def __init__(self, entity_type, fields, search_paths, owner_path='owner_id'):
        self.entity_type = entity_type
        self.fields = dict(fields)
        self.search_paths = tuple(search_paths)
        self.owner_path = owner_path

    def __contains__(self, column_id):
        return column_id in self.fields

    def column_ids(self):
        return tuple(self.fields)

    def resolve(self, column_id, definitions=()):
        """
        Resolve a column id to its type and the field references behind it

        Built-in columns win. Otherwise the id is matched against the owner's
        custom field definitions by field key. Unknown ids resolve to None.
        """
        spec = self.fields.get(column_id)
        if spec is not None:
            return ResolvedColumn(column_id, spec.column_type, spec.refs(), spec.options)

        for definition in definitions:
            if definition.field_key != column_id:
                continue
            mapping = CUSTOM_FIELD_COLUMNS.get(definition.field_type)
            if mapping is None:
                return None
            column_type, kind, options = mapping
            ref = ex.FieldRef(definition.field_key, kind, custom=True)
            return ResolvedColumn(column_id, column_type, (ref,), options, custom=True)

        return None
