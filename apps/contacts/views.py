import logging
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET

from apps.accounts.decorators import api_login_required, json_post_required
from apps.core.export import build_workbook, workbook_response
from apps.core.listing import run_export_query, run_list_query
from apps.core.utils import (
    BadRequest, error_response, form_errors, get_owned_object, not_found, parse_int, parse_json_body,
)
from apps.customfields.models import CustomFieldDefinition
from apps.customfields.values import apply_bag, clean_bag
from apps.querying.backends import QuerysetBackend
from apps.querying.catalog import EntityCatalog
from apps.querying.compiler import compile_filters
from .catalog import CATALOG, LIST_KEY, QUICK_SEARCH_PATHS
from .forms import ContactForm, clean_tags, contact_form_data
from .models import Contact
from .serializers import serialize_contact

logger = logging.getLogger(__name__)

QUICK_SEARCH_CATALOG = EntityCatalog('contact', {}, QUICK_SEARCH_PATHS)


def _contacts(user):
    return Contact.objects.owned_by(user).prefetch_related('tags')


def _definitions(user):
    return list(CustomFieldDefinition.objects.for_entity(user, 'contact'))


def _save_contact(request, data, instance=None):
    """
    Validate and save a contact payload (create when instance is None)

    Returns:
        tuple: (contact, None) on success, (None, errors dict) otherwise
    """
    form = ContactForm(contact_form_data(data, instance), instance=instance)
    errors = {} if form.is_valid() else form_errors(form)

    tags = None
    if 'tags' in data:
        try:
            tags = clean_tags(data['tags'] or [])
        except ValidationError as e:
            errors['tags'] = e.messages

    definitions = _definitions(request.user)
    custom_values = {}
    if 'customFields' in data:
        custom_values, bag_errors = clean_bag(data['customFields'] or {}, definitions)
        if bag_errors:
            errors['customFields'] = bag_errors

    if errors:
        return None, errors

    with transaction.atomic():
        contact = form.save(commit=False)
        if instance is None:
            contact.owner = request.user
        contact.custom_fields = apply_bag(contact.custom_fields, custom_values)
        contact.save()
        if tags is not None:
            contact.tags.set(tags)

    return contact, None


@api_login_required
@require_GET
def contact_list_view(request):
    try:
        payload = run_list_query(
            request,
            queryset=_contacts(request.user),
            catalog=CATALOG,
            list_key=LIST_KEY,
            serialize=serialize_contact,
            result_key='contacts',
        )
    except BadRequest as e:
        return error_response(str(e))

    return JsonResponse(payload)


@api_login_required
@require_GET
def contact_search_view(request):
    """
    Quick search (e.g. contact picker on the deal form)

    Looks at name, email, phone, company and job title; newest first.
    """
    query = request.GET.get('q', '').strip()
    if not query:
        return error_response('Search query is required')

    limit = parse_int(request.GET.get('limit'), settings.CRM_SEARCH_LIMIT, 1, settings.CRM_LIST_MAX_PAGE_SIZE)
    compiled = compile_filters(QUICK_SEARCH_CATALOG, owner_id=request.user.id, search=query)

    contacts, total = QuerysetBackend(_contacts(request.user)).query(compiled.predicate, limit)
    definitions = _definitions(request.user)

    return JsonResponse({
        'success': True,
        'contacts': [serialize_contact(contact, definitions) for contact in contacts],
        'total': total,
    })


@api_login_required
@require_GET
def contact_stats_view(request):
    contacts = Contact.objects.owned_by(request.user)
    recent_since = timezone.now() - timedelta(days=settings.CRM_RECENT_DAYS)

    return JsonResponse({
        'success': True,
        'totalContacts': contacts.count(),
        'companiesCount': contacts.exclude(company='').values('company').distinct().count(),
        'recentContacts': contacts.filter(created_at__gte=recent_since).count(),
    })


@api_login_required
@json_post_required
def contact_create_view(request):
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return error_response(str(e))

    try:
        contact, errors = _save_contact(request, data)
    except Exception as e:
        logger.error(f"Error creating contact for {request.user.email}: {str(e)}")
        return JsonResponse({'success': False, 'error': str(e)}, status=500)

    if errors:
        return error_response('Invalid contact', errors=errors)

    logger.info(f"Contact {contact.pk} created by {request.user.email}")

    return JsonResponse({
        'success': True,
        'contact': serialize_contact(contact, _definitions(request.user)),
    }, status=201)


@api_login_required
@require_GET
def contact_detail_view(request, pk):
    contact = get_owned_object(_contacts(request.user), request.user, pk)
    if contact is None:
        return not_found('Contact')

    return JsonResponse({
        'success': True,
        'contact': serialize_contact(contact, _definitions(request.user)),
    })


@api_login_required
@json_post_required
def contact_update_view(request, pk):
    contact = get_owned_object(_contacts(request.user), request.user, pk)
    if contact is None:
        return not_found('Contact')

    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return error_response(str(e))

    try:
        contact, errors = _save_contact(request, data, instance=contact)
    except Exception as e:
        logger.error(f"Error updating contact {pk}: {str(e)}")
        return JsonResponse({'success': False, 'error': str(e)}, status=500)

    if errors:
        return error_response('Invalid contact', errors=errors)

    contact = _contacts(request.user).get(pk=contact.pk)

    return JsonResponse({
        'success': True,
        'contact': serialize_contact(contact, _definitions(request.user)),
    })


@api_login_required
@json_post_required
def contact_delete_view(request, pk):
    contact = get_owned_object(Contact.objects.all(), request.user, pk)
    if contact is None:
        return not_found('Contact')

    contact_name = str(contact)
    contact.delete()
    logger.info(f"Contact {pk} deleted by {request.user.email}")

    return JsonResponse({'success': True, 'message': f'Contact "{contact_name}" deleted'})


@api_login_required
@require_GET
def contact_export_view(request):
    try:
        columns, rows, custom_ids = run_export_query(
            request,
            queryset=_contacts(request.user),
            catalog=CATALOG,
            list_key=LIST_KEY,
            serialize=serialize_contact,
        )
    except BadRequest as e:
        return error_response(str(e))

    return workbook_response(build_workbook("Contacts", columns, rows, custom_ids), 'contacts')
