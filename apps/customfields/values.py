"""
Custom field values
===================

A record's custom_fields bag is stored as plain JSON, but it is never trusted
as such. On read, each entry is coerced against the owner's definitions into
one of the value types below; on write, the incoming bag is validated against
the same definitions.

    TextValue     - 'text' fields
    NumberValue   - 'number' fields (float)
    DateValue     - 'date' fields (datetime.date, stored as YYYY-MM-DD)
    BooleanValue  - 'boolean' fields
    UnknownValue  - no definition, or a stored value that does not fit the
                    definition; shown as raw JSON text
"""

import json
from dataclasses import dataclass
from datetime import date

from apps.querying.compiler import parse_filter_date, parse_number

TEXT = 'text'
NUMBER = 'number'
DATE = 'date'
BOOLEAN = 'boolean'

FIELD_TYPE_CHOICES = [
    (TEXT, 'Text'),
    (NUMBER, 'Number'),
    (DATE, 'Date'),
    (BOOLEAN, 'Boolean'),
]


@dataclass(frozen=True)
class TextValue:
    value: str

    def to_json(self):
        return self.value


@dataclass(frozen=True)
class NumberValue:
    value: float

    def to_json(self):
        return int(self.value) if self.value.is_integer() else self.value


@dataclass(frozen=True)
class DateValue:
    value: date

    def to_json(self):
        return self.value.isoformat()


@dataclass(frozen=True)
class BooleanValue:
    value: bool

    def to_json(self):
        return self.value


@dataclass(frozen=True)
class UnknownValue:
    raw: object

    def to_json(self):
        if isinstance(self.raw, str):
            return self.raw
        return json.dumps(self.raw)


def _as_boolean(raw):
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in ('true', 'false'):
        return raw.strip().lower() == 'true'
    return None


def coerce(raw, field_type):
    """
    Typed value for one stored entry

    Returns:
        a value object, or None when raw is None
    """
    if raw is None:
        return None

    if field_type == TEXT:
        if isinstance(raw, str):
            return TextValue(raw)
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return TextValue(str(raw))

    elif field_type == NUMBER:
        number = parse_number(raw)
        if number is not None:
            return NumberValue(number)

    elif field_type == DATE:
        if isinstance(raw, str):
            day = parse_filter_date(raw)
            if day is not None:
                return DateValue(day)

    elif field_type == BOOLEAN:
        flag = _as_boolean(raw)
        if flag is not None:
            return BooleanValue(flag)

    return UnknownValue(raw)


def read_bag(bag, definitions):
    """
    Coerce a stored bag

    Args:
        bag (dict): record.custom_fields
        definitions: the owner's definitions for the record's entity type

    Returns:
        dict: field key -> value object (keys with None values are left out)
    """
    types = {definition.field_key: definition.field_type for definition in definitions}
    values = {}
    for key, raw in (bag or {}).items():
        value = coerce(raw, types.get(key))
        if value is not None:
            values[key] = value
    return values


def serialize_bag(bag, definitions):
    return {key: value.to_json() for key, value in read_bag(bag, definitions).items()}


def clean_bag(data, definitions):
    """
    Validate an incoming bag before it is written

    A None value removes the key. Unknown keys and values that do not fit the
    field type are errors.

    Returns:
        tuple: (cleaned dict of key -> JSON value or None, errors dict)
    """
    if not isinstance(data, dict):
        return {}, {'customFields': ['Must be an object']}

    types = {definition.field_key: definition.field_type for definition in definitions}
    cleaned = {}
    errors = {}

    for key, raw in data.items():
        field_type = types.get(key)
        if field_type is None:
            errors[key] = ['Unknown custom field']
            continue

        if raw is None or raw == '':
            cleaned[key] = None
            continue

        value = coerce(raw, field_type)
        if isinstance(value, UnknownValue):
            errors[key] = [f'Not a valid {field_type} value']
            continue

        cleaned[key] = value.to_json()

    return cleaned, errors


def apply_bag(bag, cleaned):
    """Merge cleaned values into a stored bag; None removes the key."""
    merged = dict(bag or {})
    for key, value in cleaned.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged
