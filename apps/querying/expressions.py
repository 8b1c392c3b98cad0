"""
Filter expression tree
======================

The compiler never produces SQL or Q objects directly. It produces a small
tree of these nodes, and each backend (apps.querying.backends) lowers the
tree for its own storage.

    FieldRef   - which value to read (a model path or a custom field key)
    Condition  - FieldRef + operator + literal
    AllOf      - every child must match
    AnyOf      - at least one child must match

Condition operators:
    contains, iexact, startswith, endswith  (case-insensitive text)
    gt, gte, lt, lte                        (ordered comparison)
    exact, in                               (enum / boolean / owner)
"""

from dataclasses import dataclass


# Value kinds a FieldRef can carry
TEXT_KIND = 'text'
NUMBER_KIND = 'number'
DATETIME_KIND = 'datetime'    # real datetime column
DATE_TEXT_KIND = 'date_text'  # ISO date string inside the custom fields bag
ENUM_KIND = 'enum'
BOOLEAN_KIND = 'boolean'

TEXT_OPERATORS = ('contains', 'iexact', 'startswith', 'endswith')
ORDERED_OPERATORS = ('gt', 'gte', 'lt', 'lte')
EXACT_OPERATORS = ('exact', 'in')

CONDITION_OPERATORS = TEXT_OPERATORS + ORDERED_OPERATORS + EXACT_OPERATORS


@dataclass(frozen=True)
class FieldRef:
    path: str
    kind: str = TEXT_KIND
    custom: bool = False


@dataclass(frozen=True)
class Condition:
    ref: FieldRef
    op: str
    value: object

    def __post_init__(self):
        if self.op not in CONDITION_OPERATORS:
            raise ValueError(f"Unknown condition operator: {self.op}")


@dataclass(frozen=True)
class AllOf:
    children: tuple = ()


@dataclass(frozen=True)
class AnyOf:
    children: tuple = ()


def all_of(*nodes):
    """AND the given nodes together, dropping None and flattening nested AllOf."""
    children = []
    for node in nodes:
        if node is None:
            continue
        if isinstance(node, AllOf):
            children.extend(node.children)
        else:
            children.append(node)
    return AllOf(tuple(children))


def any_of(*nodes):
    children = [node for node in nodes if node is not None]
    if len(children) == 1:
        return children[0]
    return AnyOf(tuple(children))
