import logging

from django.db import IntegrityError, transaction
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.accounts.decorators import api_login_required, json_post_required
from apps.core.entities import ENTITIES
from apps.core.utils import BadRequest, error_response, form_errors, get_owned_object, not_found, parse_json_body
from .forms import CustomFieldCreateForm, CustomFieldUpdateForm
from .models import CustomFieldDefinition

logger = logging.getLogger(__name__)


@api_login_required
@require_GET
def custom_field_list_view(request):
    entity_type = request.GET.get('entityType', '')
    if entity_type not in ENTITIES:
        return error_response('entityType must be "contact" or "deal"')

    definitions = CustomFieldDefinition.objects.for_entity(request.user, entity_type)

    return JsonResponse({
        'success': True,
        'entityType': entity_type,
        'customFields': [definition.to_dict() for definition in definitions],
    })


@api_login_required
@json_post_required
def custom_field_create_view(request):
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return error_response(str(e))

    form = CustomFieldCreateForm({
        'entity_type': data.get('entityType'),
        'field_key': data.get('fieldKey'),
        'label': data.get('label'),
        'field_type': data.get('fieldType') or 'text',
    }, owner=request.user)

    if not form.is_valid():
        return error_response('Invalid custom field', errors=form_errors(form))

    try:
        with transaction.atomic():
            definition = form.save()
    except IntegrityError:
        # lost a race with a concurrent create of the same key
        return error_response('Invalid custom field', errors={'field_key': ['A custom field with this key already exists']})

    logger.info(f"Custom field {definition.field_key!r} ({definition.entity_type}) created by {request.user.email}")

    return JsonResponse({
        'success': True,
        'id': definition.id,
        'customField': definition.to_dict(),
    }, status=201)


@api_login_required
@require_GET
def custom_field_detail_view(request, pk):
    definition = get_owned_object(CustomFieldDefinition.objects.all(), request.user, pk)
    if definition is None:
        return not_found('Custom field')

    return JsonResponse({'success': True, 'customField': definition.to_dict()})


@api_login_required
@json_post_required
def custom_field_update_view(request, pk):
    definition = get_owned_object(CustomFieldDefinition.objects.all(), request.user, pk)
    if definition is None:
        return not_found('Custom field')

    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return error_response(str(e))

    form = CustomFieldUpdateForm({
        'label': data.get('label', definition.label),
        'field_type': data.get('fieldType', definition.field_type),
    }, instance=definition)

    if not form.is_valid():
        return error_response('Invalid custom field', errors=form_errors(form))

    definition = form.save()

    return JsonResponse({'success': True, 'customField': definition.to_dict()})


@api_login_required
@json_post_required
def custom_field_delete_view(request, pk):
    definition = get_owned_object(CustomFieldDefinition.objects.all(), request.user, pk)
    if definition is None:
        return not_found('Custom field')

    try:
        field_key = definition.field_key
        definition.delete()
        logger.info(f"Custom field {field_key!r} deleted by {request.user.email}")

        return JsonResponse({'success': True, 'message': f'Custom field "{field_key}" deleted'})

    except Exception as e:
        logger.error(f"Error deleting custom field {pk}: {str(e)}")

        return JsonResponse({
            'success': False,
            'error': str(e)
        }, status=500)
