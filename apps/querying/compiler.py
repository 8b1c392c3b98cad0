"""
Dynamic filter compiler
=======================

Turns an owner id, a free-text search term and a list of column filters into
one expression tree (see apps.querying.expressions):

    AllOf(owner == id, AnyOf(search...), filter_1, filter_2, ...)

The compiler does no I/O. Filters it cannot use (unknown column, operator
that does not fit the column type, empty or unparseable value) are left out
of the tree and returned in `skipped`, so a bad filter widens the result
instead of failing the whole list request.

Usage:
    compiled = compile_filters(CATALOG, owner_id=user.id, search='acme',
                               filters=[ColumnFilter('company', 'startsWith', 'Acme')],
                               definitions=definitions)
    queryset.filter(to_q(compiled.predicate))
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.querying import catalog as cat
from apps.querying import expressions as ex

logger = logging.getLogger(__name__)

NUMBER_PATTERN = r'^ *[-+]?([0-9]+\.?[0-9]*|\.[0-9]+) *$'
NUMBER_RE = re.compile(NUMBER_PATTERN)

TEXT_OPERATOR_MAP = {
    'contains': 'contains',
    'equals': 'iexact',
    'startsWith': 'startswith',
    'endsWith': 'endswith',
}

NUMBER_OPERATOR_MAP = {
    'gt': 'gt',
    'lt': 'lt',
    'gte': 'gte',
    'lte': 'lte',
    'eq': 'exact',
}

BOOLEAN_VALUES = {'true': True, 'false': False}


@dataclass
class ColumnFilter:
    """One filter clause as sent by the client."""

    column_id: str
    operator: str
    value: str = ''
    value2: str = None
    column_type: str = None
    enum_options: tuple = ()

    def to_dict(self):
        data = {
            'columnId': self.column_id,
            'operator': self.operator,
            'value': self.value,
        }
        if self.value2 is not None:
            data['value2'] = self.value2
        if self.column_type:
            data['columnType'] = self.column_type
        if self.enum_options:
            data['enumOptions'] = list(self.enum_options)
        return data


@dataclass
class CompiledQuery:
    predicate: ex.AllOf
    skipped: list = field(default_factory=list)


def parse_number(value):
    """Parse a plain decimal number; None for anything else (incl. NaN, inf, 1e5)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = str(value)
    if not NUMBER_RE.match(text):
        return None
    return float(text)


def parse_filter_date(value):
    """Day a date filter refers to. Accepts YYYY-MM-DD or a full ISO datetime."""
    if not value:
        return None
    text = str(value).strip()
    try:
        day = parse_date(text)
        if day is None:
            moment = parse_datetime(text)
            day = moment.date() if moment else None
    except ValueError:
        # well formed but impossible, e.g. 2024-02-30
        return None
    return day


def day_start(day, kind):
    """Lower bound of a calendar day in the form the backend compares against."""
    if kind == ex.DATE_TEXT_KIND:
        return day.isoformat()
    start = datetime.combine(day, time.min)
    if settings.USE_TZ:
        return timezone.make_aware(start)
    return start


class FilterCompiler:
    """
    Compiles column filters for one entity catalog

    Args:
        catalog (EntityCatalog): built-in columns of the entity type
        definitions: the owner's custom field definitions for that entity type
                     (anything with field_key / field_type attributes)
    """

    def __init__(self, catalog, definitions=()):
        self.catalog = catalog
        self.definitions = list(definitions)

    def compile(self, owner_id, search='', filters=()):
        skipped = []
        nodes = [ex.Condition(ex.FieldRef(self.catalog.owner_path, ex.ENUM_KIND), 'exact', owner_id)]

        search_node = self.compile_search(search)
        if search_node is not None:
            nodes.append(search_node)

        for column_filter in filters:
            node = self.compile_filter(column_filter)
            if node is None:
                skipped.append(column_filter)
            else:
                nodes.append(node)

        return CompiledQuery(ex.all_of(*nodes), skipped)

    def compile_search(self, search):
        term = (search or '').strip()
        if not term:
            return None
        refs = [ex.FieldRef(path, ex.TEXT_KIND) for path in self.catalog.search_paths]
        return ex.any_of(*[ex.Condition(ref, 'contains', term) for ref in refs])

    def compile_filter(self, column_filter):
        """Expression for one filter, or None when it has to be skipped."""
        column = self.catalog.resolve(column_filter.column_id, self.definitions)
        if column is None:
            logger.debug(f"Skipping filter on unknown column {column_filter.column_id!r}")
            return None

        if column_filter.operator not in cat.OPERATORS[column.column_type]:
            logger.debug(
                f"Skipping filter: operator {column_filter.operator!r} "
                f"does not apply to {column.column_type} column {column.column_id!r}"
            )
            return None

        builder = getattr(self, f'_compile_{column.column_type}')
        return builder(column, column_filter)

    def _compile_text(self, column, column_filter):
        term = (column_filter.value or '').strip()
        if not term:
            return None
        op = TEXT_OPERATOR_MAP[column_filter.operator]
        return ex.any_of(*[ex.Condition(ref, op, term) for ref in column.refs])

    def _compile_number(self, column, column_filter):
        number = parse_number(column_filter.value)
        if number is None:
            return None
        op = NUMBER_OPERATOR_MAP[column_filter.operator]
        return ex.any_of(*[ex.Condition(ref, op, number) for ref in column.refs])

    def _compile_date(self, column, column_filter):
        day = parse_filter_date(column_filter.value)
        if day is None:
            return None

        operator = column_filter.operator
        if operator == 'between':
            last_day = parse_filter_date(column_filter.value2)
            if last_day is None:
                return None
            lower, upper = day, last_day + timedelta(days=1)
        elif operator == 'before':
            lower, upper = None, day
        elif operator == 'after':
            # strictly later than the moment day d starts
            return ex.any_of(*[ex.Condition(ref, 'gt', day_start(day, ref.kind)) for ref in column.refs])
        else:
            lower, upper = day, day + timedelta(days=1)

        branches = []
        for ref in column.refs:
            bounds = []
            if lower is not None:
                bounds.append(ex.Condition(ref, 'gte', day_start(lower, ref.kind)))
            if upper is not None:
                bounds.append(ex.Condition(ref, 'lt', day_start(upper, ref.kind)))
            branches.append(ex.all_of(*bounds))
        return ex.any_of(*branches)

    def _compile_enum(self, column, column_filter):
        if column_filter.operator == 'in':
            values = [part.strip() for part in (column_filter.value or '').split(',')]
            values = [value for value in values if value]
        else:
            value = (column_filter.value or '').strip()
            values = [value] if value else []
        if not values:
            return None

        branches = []
        for ref in column.refs:
            literals = values
            if ref.kind == ex.BOOLEAN_KIND:
                literals = [BOOLEAN_VALUES[v.lower()] for v in values if v.lower() in BOOLEAN_VALUES]
                if not literals:
                    return None
            if column_filter.operator == 'in':
                branches.append(ex.Condition(ref, 'in', tuple(literals)))
            else:
                branches.append(ex.Condition(ref, 'exact', literals[0]))
        return ex.any_of(*branches)


def compile_filters(catalog, owner_id, search='', filters=(), definitions=()):
    return FilterCompiler(catalog, definitions).compile(owner_id, search, filters)
