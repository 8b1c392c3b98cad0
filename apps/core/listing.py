"""
Shared list pipeline for the contact and deal list endpoints

    request params -> column filters (validated) -> compiled predicate
    -> queryset page + total -> serialized rows -> rows ordered by the
    list's active column sort -> payload

Query params:
    search    free-text search term
    filters   JSON list of {columnId, operator, value, value2?}
    limit     page size, 1..CRM_LIST_MAX_PAGE_SIZE
    offset    rows to skip
    seq       opaque token echoed back so the client keeps only the
              response to its latest request
"""

import logging

from apps.columns.registry import store_for_request
from apps.core.utils import BadRequest, get_paging
from apps.customfields.models import CustomFieldDefinition
from apps.querying import catalog as cat
from apps.querying.backends import QuerysetBackend
from apps.querying.compiler import compile_filters
from apps.querying.forms import parse_column_filters
from apps.querying.sorting import sort_rows

logger = logging.getLogger(__name__)


def sort_by_column(rows, catalog, column_config, definitions):
    """Order rows by a column config's sort direction, typed through the catalog."""
    column = catalog.resolve(column_config.id, definitions)
    return sort_rows(
        rows,
        column_config.id,
        column_config.sort_direction,
        column.column_type if column else cat.TEXT,
        custom=bool(column and column.custom),
    )


def build_predicate(request, catalog, definitions):
    """
    Returns:
        tuple: (CompiledQuery, ignored filters)

    Raises:
        BadRequest: filters param is not a JSON list
    """
    try:
        filters, ignored = parse_column_filters(request.GET.get('filters'), catalog, definitions)
    except ValueError as e:
        raise BadRequest(str(e))

    compiled = compile_filters(
        catalog,
        owner_id=request.user.id,
        search=request.GET.get('search', ''),
        filters=filters,
        definitions=definitions,
    )

    for skipped in compiled.skipped:
        ignored.append({'filter': skipped.to_dict(), 'errors': ['Filter value could not be used']})

    if ignored:
        logger.info(f"Ignored {len(ignored)} filter(s) for {request.user.email} on {catalog.entity_type} list")

    return compiled, ignored


def run_list_query(request, queryset, catalog, list_key, serialize, result_key):
    """
    Run a list request end to end

    Args:
        queryset: base queryset (already narrowed by endpoint-specific params)
        catalog (EntityCatalog): entity's filterable columns
        list_key (str): column layout key, e.g. 'contact-list-columns'
        serialize: callable(record, definitions) -> dict
        result_key (str): payload key for the rows, e.g. 'contacts'

    Returns:
        dict: JSON payload

    Raises:
        BadRequest: malformed filters param
    """
    definitions = list(CustomFieldDefinition.objects.for_entity(request.user, catalog.entity_type))
    compiled, ignored = build_predicate(request, catalog, definitions)
    limit, offset = get_paging(request.GET)

    records, total = QuerysetBackend(queryset).query(compiled.predicate, limit, offset)
    rows = [serialize(record, definitions) for record in records]

    active_sort = store_for_request(request, list_key).active_sort
    if active_sort is not None:
        rows = sort_by_column(rows, catalog, active_sort, definitions)

    return {
        'success': True,
        result_key: rows,
        'total': total,
        'limit': limit,
        'offset': offset,
        'seq': request.GET.get('seq'),
        'sort': active_sort.to_dict() if active_sort else None,
        'ignoredFilters': ignored,
    }


def run_export_query(request, queryset, catalog, list_key, serialize):
    """
    Same filtering and sorting as run_list_query, without paging

    Returns:
        tuple: (visible ColumnConfigs in display order, serialized rows,
                custom field keys of the entity type)
    """
    definitions = list(CustomFieldDefinition.objects.for_entity(request.user, catalog.entity_type))
    compiled, _ = build_predicate(request, catalog, definitions)

    rows = [serialize(record, definitions) for record in QuerysetBackend(queryset).filter(compiled.predicate)]

    store = store_for_request(request, list_key)
    active_sort = store.active_sort
    if active_sort is not None:
        rows = sort_by_column(rows, catalog, active_sort, definitions)

    return store.visible_columns, rows, {definition.field_key for definition in definitions}
