import logging

from celery import shared_task
from django.db import transaction

from apps.core.entities import ENTITIES, get_entity_model
from .models import CustomFieldDefinition

logger = logging.getLogger(__name__)


@shared_task
def prune_custom_field_values(owner_id, entity_type, field_key):
    """Remove one key from the custom field bags of an owner's records."""
    model = get_entity_model(entity_type)
    records = model.objects.filter(owner_id=owner_id, custom_fields__has_key=field_key)

    pruned = 0
    with transaction.atomic():
        for record in records.select_for_update():
            record.custom_fields.pop(field_key, None)
            record.save(update_fields=['custom_fields', 'updated_at'])
            pruned += 1

    logger.info(f"Pruned custom field {field_key!r} from {pruned} {entity_type} record(s) of owner {owner_id}")
    return f'{pruned} {entity_type} record(s) pruned.'


@shared_task
def prune_orphaned_custom_field_values():
    """Drop bag keys that no longer have a definition (periodic clean-up)."""
    pruned = 0

    for entity_type in ENTITIES:
        model = get_entity_model(entity_type)
        known = {}

        for record in model.objects.exclude(custom_fields={}).iterator():
            if record.owner_id not in known:
                known[record.owner_id] = set(
                    CustomFieldDefinition.objects.filter(owner_id=record.owner_id, entity_type=entity_type)
                    .values_list('field_key', flat=True)
                )

            orphaned = set(record.custom_fields or {}) - known[record.owner_id]
            if not orphaned:
                continue

            for key in orphaned:
                record.custom_fields.pop(key)
            record.save(update_fields=['custom_fields', 'updated_at'])
            pruned += 1

    logger.info(f"Removed orphaned custom field values from {pruned} record(s)")
    return f'{pruned} record(s) cleaned.'
