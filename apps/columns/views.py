import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.accounts.decorators import api_login_required, json_post_required
from apps.core.utils import BadRequest, error_response, not_found, parse_json_body
from apps.customfields.models import CustomFieldDefinition
from .registry import UnknownListError, entity_type_for, store_for_request
from .store import SORT_DIRECTIONS, ColumnConfig

logger = logging.getLogger(__name__)


def _state(store):
    return {
        'success': True,
        'listKey': store.storage_key,
        'columns': store.to_list(),
        'visibleColumns': [column.id for column in store.visible_columns],
        'sortedColumns': [column.to_dict() for column in store.sorted_columns],
    }


@api_login_required
@require_GET
def column_config_view(request, list_key):
    try:
        store = store_for_request(request, list_key)
    except UnknownListError:
        return not_found('List')

    return JsonResponse(_state(store))


def _toggle(request, store, data):
    store.toggle_visibility(data.get('id'))


def _rename(request, store, data):
    label = str(data.get('label') or '').strip()
    if not label:
        raise BadRequest('Label is required')
    store.rename(data.get('id'), label)


def _reorder(request, store, data):
    order = data.get('order')
    if not isinstance(order, list):
        raise BadRequest('order must be a list of {id, order}')
    try:
        pairs = [(str(item['id']), int(item['order'])) for item in order]
    except (KeyError, TypeError, ValueError):
        raise BadRequest('order must be a list of {id, order}')
    store.reorder(pairs)


def _sort(request, store, data):
    direction = data.get('direction')
    if direction not in SORT_DIRECTIONS + (None,):
        raise BadRequest('direction must be "asc", "desc" or null')
    store.set_sort_direction(data.get('id'), direction)


def _clear_sort(request, store, data):
    store.clear_sort()


def _reset(request, store, data):
    store.reset_to_defaults()


def _add(request, store, data):
    # only columns backed by one of the owner's custom fields can be added
    entity_type = entity_type_for(store.storage_key)
    definition = CustomFieldDefinition.objects.for_entity(request.user, entity_type).filter(field_key=data.get('id')).first()
    if definition is None:
        raise CustomFieldDefinition.DoesNotExist()

    label = str(data.get('label') or definition.label)
    store.add_column(ColumnConfig(definition.field_key, label, visible=bool(data.get('visible', True))))


def _remove(request, store, data):
    column_id = data.get('id')
    if store.is_default(column_id):
        raise BadRequest('Default columns cannot be removed')
    store.remove_column(column_id)


ACTIONS = {
    'toggle': _toggle,
    'rename': _rename,
    'reorder': _reorder,
    'sort': _sort,
    'clear-sort': _clear_sort,
    'reset': _reset,
    'add': _add,
    'remove': _remove,
}


@api_login_required
@json_post_required
def column_action_view(request, list_key, action):
    """
    Apply one layout change and return the new state

    Body by action:
        toggle      {id}
        rename      {id, label}
        reorder     {order: [{id, order}, ...]}
        sort        {id, direction: "asc" | "desc" | null}
        clear-sort  {}
        reset       {}
        add         {id, label?, visible?}  (id of a custom field)
        remove      {id}                    (custom columns only)
    """
    handler = ACTIONS.get(action)
    if handler is None:
        return not_found('Action')

    try:
        store = store_for_request(request, list_key)
    except UnknownListError:
        return not_found('List')

    try:
        data = parse_json_body(request)
        handler(request, store, data)
    except BadRequest as e:
        return error_response(str(e))
    except CustomFieldDefinition.DoesNotExist:
        return not_found('Custom field')

    logger.debug(f"Column action {action} on {list_key} by {request.user.email}")

    return JsonResponse(_state(store))
