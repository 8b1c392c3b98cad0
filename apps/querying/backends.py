"""
Query backends
==============

Two ways to run a compiled expression tree:

1. to_q(node) / QuerysetBackend - lower the tree to a Django Q object and let
   the database do the work (PostgreSQL or SQLite).
2. evaluate(node, record) / MemoryBackend - check plain records in Python.
   Records are dicts (or model instances) keyed by model path, with the
   custom field bag under 'custom_fields'.

Both backends share the same semantics:
    - text operators are case-insensitive
    - number columns are compared as floats; a stored value that is not a
      plain decimal number never matches
    - custom date values are ISO strings compared as text
    - a missing value never matches
"""

from datetime import date, datetime, time

from django.conf import settings
from django.db.models import Case, F, FloatField, Q, Value, When
from django.db.models.fields.json import KeyTextTransform
from django.db.models.functions import Cast
from django.db.models.lookups import (
    Exact, GreaterThan, GreaterThanOrEqual, LessThan, LessThanOrEqual, Regex,
)
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from apps.querying import expressions as ex
from apps.querying.compiler import NUMBER_PATTERN, parse_number

CUSTOM_FIELDS_PATH = 'custom_fields'

ORDERED_LOOKUPS = {
    'gt': GreaterThan,
    'gte': GreaterThanOrEqual,
    'lt': LessThan,
    'lte': LessThanOrEqual,
    'exact': Exact,
}

KWARG_LOOKUPS = {
    'contains': 'icontains',
    'iexact': 'iexact',
    'startswith': 'istartswith',
    'endswith': 'iendswith',
    'gt': 'gt',
    'gte': 'gte',
    'lt': 'lt',
    'lte': 'lte',
    'exact': 'exact',
    'in': 'in',
}


# ==============================================================================
# DJANGO Q
# ==============================================================================

def _source(ref):
    if ref.custom:
        return KeyTextTransform(ref.path, CUSTOM_FIELDS_PATH)
    return F(ref.path)


def numeric_value(ref):
    """Stored value as a float, NULL when it is not a plain decimal number."""
    source = _source(ref)
    return Case(
        When(Regex(source, NUMBER_PATTERN), then=Cast(source, FloatField())),
        default=Value(None),
        output_field=FloatField(),
    )


def _condition_q(condition):
    ref = condition.ref

    if ref.kind == ex.NUMBER_KIND:
        return Q(ORDERED_LOOKUPS[condition.op](numeric_value(ref), condition.value))

    if ref.custom and ref.kind == ex.DATE_TEXT_KIND:
        return Q(ORDERED_LOOKUPS[condition.op](_source(ref), condition.value))

    path = f'{CUSTOM_FIELDS_PATH}__{ref.path}' if ref.custom else ref.path
    value = list(condition.value) if condition.op == 'in' else condition.value
    return Q(**{f'{path}__{KWARG_LOOKUPS[condition.op]}': value})


def to_q(node):
    """Lower an expression tree to a Q object."""
    if isinstance(node, ex.AllOf):
        q = Q()
        for child in node.children:
            q &= to_q(child)
        return q

    if isinstance(node, ex.AnyOf):
        if not node.children:
            return Q(pk__in=[])
        q = Q()
        for child in node.children:
            q |= to_q(child)
        return q

    if isinstance(node, ex.Condition):
        return _condition_q(node)

    raise TypeError(f"Cannot lower {type(node).__name__} to Q")


# ==============================================================================
# IN-MEMORY
# ==============================================================================

def read_value(record, ref):
    if ref.custom:
        bag = _get(record, CUSTOM_FIELDS_PATH) or {}
        return bag.get(ref.path)
    return _get(record, ref.path)


def _get(record, path):
    if isinstance(record, dict):
        return record.get(path)
    return getattr(record, path, None)


def _as_datetime(value):
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time.min)
    elif isinstance(value, str):
        moment = parse_datetime(value)
        if moment is None:
            day = parse_date(value)
            moment = datetime.combine(day, time.min) if day else None
    else:
        moment = None

    if moment is not None and settings.USE_TZ and timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _compare(op, left, right):
    if op == 'gt':
        return left > right
    if op == 'gte':
        return left >= right
    if op == 'lt':
        return left < right
    if op == 'lte':
        return left <= right
    return left == right


def _match_text(op, value, term):
    if isinstance(value, bool):
        value = 'true' if value else 'false'
    text = str(value).casefold()
    term = str(term).casefold()
    if op == 'contains':
        return term in text
    if op == 'iexact':
        return text == term
    if op == 'startswith':
        return text.startswith(term)
    if op == 'endswith':
        return text.endswith(term)
    return False


def _match_condition(condition, record):
    ref = condition.ref
    value = read_value(record, ref)
    if value is None:
        return False

    op = condition.op

    if op in ex.TEXT_OPERATORS:
        return _match_text(op, value, condition.value)

    if ref.kind == ex.NUMBER_KIND:
        number = parse_number(value)
        if number is None:
            return False
        return _compare(op, number, condition.value)

    if ref.kind == ex.DATETIME_KIND:
        moment = _as_datetime(value)
        if moment is None:
            return False
        return _compare(op, moment, condition.value)

    if ref.kind == ex.DATE_TEXT_KIND:
        return _compare(op, str(value), condition.value)

    if op == 'in':
        return value in condition.value
    return value == condition.value


def evaluate(node, record):
    """True when the record satisfies the expression tree."""
    if isinstance(node, ex.AllOf):
        return all(evaluate(child, record) for child in node.children)
    if isinstance(node, ex.AnyOf):
        return any(evaluate(child, record) for child in node.children)
    if isinstance(node, ex.Condition):
        return _match_condition(node, record)
    raise TypeError(f"Cannot evaluate {type(node).__name__}")


# ==============================================================================
# STORAGE COLLABORATORS
# ==============================================================================

class QuerysetBackend:
    """Runs compiled predicates against a Django queryset."""

    def __init__(self, queryset):
        self.queryset = queryset

    def filter(self, predicate):
        return self.queryset.filter(to_q(predicate))

    def query(self, predicate, limit, offset=0):
        """
        Returns:
            tuple: (list of matching records for the page, total match count)
        """
        matches = self.filter(predicate)
        total = matches.count()
        records = list(matches[offset:offset + limit])
        return records, total


class MemoryBackend:
    """Runs compiled predicates against records held in a list."""

    def __init__(self, records=()):
        self.records = list(records)

    def filter(self, predicate):
        return [record for record in self.records if evaluate(predicate, record)]

    def query(self, predicate, limit, offset=0):
        matches = self.filter(predicate)
        return matches[offset:offset + limit], len(matches)
