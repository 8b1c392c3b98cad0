"""
JSON shape of a contact. Keys match the column ids of the contact list.
"""
from apps.customfields.values import serialize_bag

# every top-level key of a serialized contact; custom field keys may not reuse them
ROW_KEYS = (
    'id', 'name', 'firstName', 'lastName', 'email', 'phone', 'company', 'jobTitle',
    'notes', 'tags', 'customFields', 'createdAt', 'updatedAt',
)

# JSON key -> model field, for create/update payloads
FIELD_MAP = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'email': 'email',
    'phone': 'phone',
    'company': 'company',
    'jobTitle': 'job_title',
    'notes': 'notes',
}


def serialize_contact(contact, definitions=()):
    return {
        'id': contact.id,
        'name': contact.full_name,
        'firstName': contact.first_name,
        'lastName': contact.last_name,
        'email': contact.email,
        'phone': contact.phone,
        'company': contact.company,
        'jobTitle': contact.job_title,
        'notes': contact.notes,
        'tags': contact.get_tag_names(),
        'customFields': serialize_bag(contact.custom_fields, definitions),
        'createdAt': contact.created_at.isoformat() if contact.created_at else None,
        'updatedAt': contact.updated_at.isoformat() if contact.updated_at else None,
    }


def serialize_contact_brief(contact):
    """Shape used when contacts are embedded in a deal."""
    return {
        'id': contact.id,
        'name': contact.full_name,
        'email': contact.email,
        'company': contact.company,
    }
