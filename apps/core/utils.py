"""
Helper utilities shared by the JSON views
"""
import json

from django.conf import settings
from django.http import JsonResponse


class BadRequest(Exception):
    """Raised by helpers when the request itself is malformed (-> 400)."""


def error_response(error, status=400, **extra):
    """
    The error body every view returns:
        {'success': False, 'error': ..., **extra}
    """
    payload = {'success': False, 'error': error}
    payload.update(extra)
    return JsonResponse(payload, status=status)


def not_found(label='Record'):
    return error_response(f'{label} not found', status=404)


def parse_json_body(request):
    """
    Decode a JSON object body

    Returns:
        dict: the decoded body ({} for an empty body)

    Raises:
        BadRequest: invalid JSON or not an object
    """
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise BadRequest('Invalid JSON')
    if not isinstance(data, dict):
        raise BadRequest('JSON body must be an object')
    return data


def parse_int(value, default, minimum=None, maximum=None):
    """Parse a query-string integer, clamped to [minimum, maximum]."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if minimum is not None and number < minimum:
        number = minimum
    if maximum is not None and number > maximum:
        number = maximum
    return number


def get_paging(params, default_limit=None):
    """
    Read limit/offset from query params

    limit: 1..CRM_LIST_MAX_PAGE_SIZE (default CRM_LIST_PAGE_SIZE)
    offset: >= 0 (default 0)
    """
    if default_limit is None:
        default_limit = settings.CRM_LIST_PAGE_SIZE
    limit = parse_int(params.get('limit'), default_limit, 1, settings.CRM_LIST_MAX_PAGE_SIZE)
    offset = parse_int(params.get('offset'), 0, 0)
    return limit, offset


def get_owned_object(queryset, owner, pk):
    """
    Owner-scoped lookup

    Returns:
        the object, or None when it does not exist or belongs to someone else
    """
    try:
        return queryset.get(pk=pk, owner=owner)
    except queryset.model.DoesNotExist:
        return None


def form_errors(form):
    """Flatten form errors into {'field': ['message', ...]}."""
    return {field: [str(error) for error in errors] for field, errors in form.errors.items()}
