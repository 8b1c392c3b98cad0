from django.db import transaction
from django.db.models.signals import post_delete
from django.dispatch import receiver

from .models import CustomFieldDefinition
from .tasks import prune_custom_field_values


@receiver(post_delete, sender=CustomFieldDefinition)
def schedule_value_pruning(sender, instance, **kwargs):
    # Queue only once the delete is committed, so the worker never sees the definition
    owner_id, entity_type, field_key = instance.owner_id, instance.entity_type, instance.field_key
    transaction.on_commit(lambda: prune_custom_field_values.delay(owner_id, entity_type, field_key))
