import logging
from functools import partial

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q, Sum
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.accounts.decorators import api_login_required, json_post_required
from apps.core.export import build_workbook, workbook_response
from apps.core.listing import run_export_query, run_list_query
from apps.core.utils import BadRequest, error_response, form_errors, get_owned_object, not_found, parse_json_body
from apps.customfields.models import CustomFieldDefinition
from apps.customfields.values import apply_bag, clean_bag
from apps.querying import expressions as ex
from apps.querying.backends import numeric_value
from .catalog import CATALOG, LIST_KEY
from .forms import DealForm, DealStageForm, clean_contact_ids, deal_form_data
from .models import Deal
from .serializers import serialize_deal

logger = logging.getLogger(__name__)


def _deals(user, with_contacts=True):
    deals = Deal.objects.owned_by(user)
    if with_contacts:
        deals = deals.prefetch_related('contacts')
    return deals


def _definitions(user):
    return list(CustomFieldDefinition.objects.for_entity(user, 'deal'))


def _include_contacts(request):
    return request.GET.get('includeContacts', 'true').lower() not in ('false', '0', 'no')


def _save_deal(request, data, instance=None):
    """
    Validate and save a deal payload (create when instance is None)

    contactIds, when given, replaces the deal's linked contacts.

    Returns:
        tuple: (deal, None) on success, (None, errors dict) otherwise
    """
    form = DealForm(deal_form_data(data, instance), instance=instance)
    errors = {} if form.is_valid() else form_errors(form)

    contacts = None
    if 'contactIds' in data:
        try:
            contacts = clean_contact_ids(data['contactIds'] or [], request.user)
        except ValidationError as e:
            errors['contactIds'] = e.messages

    custom_values = {}
    if 'customFields' in data:
        custom_values, bag_errors = clean_bag(data['customFields'] or {}, _definitions(request.user))
        if bag_errors:
            errors['customFields'] = bag_errors

    if errors:
        return None, errors

    with transaction.atomic():
        deal = form.save(commit=False)
        if instance is None:
            deal.owner = request.user
        deal.custom_fields = apply_bag(deal.custom_fields, custom_values)
        deal.save()
        if contacts is not None:
            deal.contacts.set(contacts)

    return deal, None


@api_login_required
@require_GET
def deal_list_view(request):
    deals = _deals(request.user, with_contacts=_include_contacts(request))

    stage = request.GET.get('stage', '')
    if stage:
        if stage not in Deal.STAGES:
            return error_response(f'Unknown stage: {stage}')
        deals = deals.filter(stage=stage)

    try:
        payload = run_list_query(
            request,
            queryset=deals,
            catalog=CATALOG,
            list_key=LIST_KEY,
            serialize=partial(serialize_deal, include_contacts=_include_contacts(request)),
            result_key='deals',
        )
    except BadRequest as e:
        return error_response(str(e))

    return JsonResponse(payload)


@api_login_required
@require_GET
def deal_pipeline_view(request):
    """All deals grouped by stage, for the kanban board."""
    definitions = _definitions(request.user)
    columns = {stage: [] for stage in Deal.STAGES}

    total = 0
    for deal in _deals(request.user):
        if deal.stage not in columns:
            logger.warning(f"Deal {deal.pk} has unknown stage '{deal.stage}', left off the pipeline")
            continue
        columns[deal.stage].append(serialize_deal(deal, definitions))
        total += 1

    return JsonResponse({
        'success': True,
        'stages': [
            {'stage': stage, 'label': label, 'deals': columns[stage]}
            for stage, label in Deal.STAGE_CHOICES
        ],
        'total': total,
    })


@api_login_required
@require_GET
def deal_stats_view(request):
    deals = Deal.objects.owned_by(request.user)

    deals_by_stage = {stage: 0 for stage in Deal.STAGES}
    for row in deals.order_by().values('stage').annotate(count=Count('id')):
        deals_by_stage[row['stage']] = row['count']

    amount = numeric_value(ex.FieldRef('value', ex.NUMBER_KIND))
    totals = deals.aggregate(
        total_value=Sum(amount),
        won_value=Sum(amount, filter=Q(stage=Deal.WON_STAGE)),
    )

    return JsonResponse({
        'success': True,
        'totalDeals': sum(deals_by_stage.values()),
        'dealsByStage': deals_by_stage,
        'totalValue': totals['total_value'] or 0,
        'wonValue': totals['won_value'] or 0,
    })


@api_login_required
@json_post_required
def deal_create_view(request):
    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return error_response(str(e))

    try:
        deal, errors = _save_deal(request, data)
    except Exception as e:
        logger.error(f"Error creating deal for {request.user.email}: {str(e)}")
        return JsonResponse({'success': False, 'error': str(e)}, status=500)

    if errors:
        return error_response('Invalid deal', errors=errors)

    logger.info(f"Deal {deal.pk} created by {request.user.email}")

    return JsonResponse({
        'success': True,
        'deal': serialize_deal(deal, _definitions(request.user)),
    }, status=201)


@api_login_required
@require_GET
def deal_detail_view(request, pk):
    deal = get_owned_object(_deals(request.user), request.user, pk)
    if deal is None:
        return not_found('Deal')

    return JsonResponse({
        'success': True,
        'deal': serialize_deal(deal, _definitions(request.user)),
    })


@api_login_required
@json_post_required
def deal_update_view(request, pk):
    deal = get_owned_object(_deals(request.user), request.user, pk)
    if deal is None:
        return not_found('Deal')

    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return error_response(str(e))

    try:
        deal, errors = _save_deal(request, data, instance=deal)
    except Exception as e:
        logger.error(f"Error updating deal {pk}: {str(e)}")
        return JsonResponse({'success': False, 'error': str(e)}, status=500)

    if errors:
        return error_response('Invalid deal', errors=errors)

    deal = _deals(request.user).get(pk=deal.pk)

    return JsonResponse({
        'success': True,
        'deal': serialize_deal(deal, _definitions(request.user)),
    })


@api_login_required
@json_post_required
def deal_update_stage_view(request, pk):
    """Card dropped on another kanban column."""
    deal = get_owned_object(Deal.objects.all(), request.user, pk)
    if deal is None:
        return not_found('Deal')

    try:
        data = parse_json_body(request)
    except BadRequest as e:
        return error_response(str(e))

    form = DealStageForm({'stage': data.get('stage')})
    if not form.is_valid():
        return error_response('Invalid stage', errors=form_errors(form))

    old_stage = deal.stage
    deal.stage = form.cleaned_data['stage']
    deal.save(update_fields=['stage', 'updated_at'])

    logger.info(f"Deal {deal.pk} moved from {old_stage} to {deal.stage} by {request.user.email}")

    return JsonResponse({
        'success': True,
        'deal': serialize_deal(deal, _definitions(request.user), include_contacts=False),
    })


@api_login_required
@json_post_required
def deal_delete_view(request, pk):
    deal = get_owned_object(Deal.objects.all(), request.user, pk)
    if deal is None:
        return not_found('Deal')

    deal_name = deal.name
    deal.delete()
    logger.info(f"Deal {pk} deleted by {request.user.email}")

    return JsonResponse({'success': True, 'message': f'Deal "{deal_name}" deleted'})


@api_login_required
@require_GET
def deal_export_view(request):
    deals = _deals(request.user)

    stage = request.GET.get('stage', '')
    if stage:
        deals = deals.filter(stage=stage)

    try:
        columns, rows, custom_ids = run_export_query(
            request,
            queryset=deals,
            catalog=CATALOG,
            list_key=LIST_KEY,
            serialize=serialize_deal,
        )
    except BadRequest as e:
        return error_response(str(e))

    return workbook_response(build_workbook("Deals", columns, rows, custom_ids), 'deals')
