from apps.contacts.serializers import serialize_contact_brief
from apps.customfields.values import serialize_bag

# every top-level key of a serialized deal; custom field keys may not reuse them
ROW_KEYS = (
    'id', 'name', 'stage', 'stageLabel', 'value', 'currency', 'expectedCloseDate',
    'notes', 'contacts', 'customFields', 'createdAt', 'updatedAt',
)

# JSON key -> model field, for create/update payloads
FIELD_MAP = {
    'name': 'name',
    'stage': 'stage',
    'value': 'value',
    'currency': 'currency',
    'expectedCloseDate': 'expected_close_date',
    'notes': 'notes',
}


def serialize_deal(deal, definitions=(), include_contacts=True):
    data = {
        'id': deal.id,
        'name': deal.name,
        'stage': deal.stage,
        'stageLabel': deal.get_stage_display(),
        'value': deal.value,
        'currency': deal.currency,
        'expectedCloseDate': deal.expected_close_date.isoformat() if deal.expected_close_date else None,
        'notes': deal.notes,
        'customFields': serialize_bag(deal.custom_fields, definitions),
        'createdAt': deal.created_at.isoformat() if deal.created_at else None,
        'updatedAt': deal.updated_at.isoformat() if deal.updated_at else None,
    }
    if include_contacts:
        data['contacts'] = [serialize_contact_brief(contact) for contact in deal.contacts.all()]
    return data
