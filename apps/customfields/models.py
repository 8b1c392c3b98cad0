from django.conf import settings
from django.db import models

from apps.core.entities import ENTITY_TYPE_CHOICES
from apps.customfields.values import FIELD_TYPE_CHOICES, TEXT


class CustomFieldDefinitionQuerySet(models.QuerySet):

    def for_entity(self, owner, entity_type):
        """Definitions of one owner for one entity type, oldest first."""
        return self.filter(owner=owner, entity_type=entity_type).order_by('created_at', 'id')


class CustomFieldDefinition(models.Model):
    """
    A user-declared field on contacts or deals

    Values live in each record's custom_fields JSON under field_key. Deleting
    a definition schedules removal of that key from the owner's records
    (see apps.customfields.signals).
    """

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='custom_field_definitions', help_text="User who defined this field")
    entity_type = models.CharField(max_length=20, choices=ENTITY_TYPE_CHOICES, help_text="Record kind this field belongs to")
    field_key = models.CharField(max_length=100, help_text="Key in the record's custom_fields bag, also the column id")
    label = models.CharField(max_length=100, help_text="Display name")
    field_type = models.CharField(max_length=20, choices=FIELD_TYPE_CHOICES, default=TEXT, help_text="Value type")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomFieldDefinitionQuerySet.as_manager()

    class Meta:
        verbose_name = "Custom Field"
        verbose_name_plural = "Custom Fields"
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['owner', 'entity_type', 'field_key'], name='unique_custom_field_key'),
        ]
        indexes = [
            models.Index(fields=['owner', 'entity_type'], name='customfield_owner_entity_idx'),
        ]

    def __str__(self):
        return f"{self.label} ({self.get_entity_type_display()})"

    def to_dict(self):
        return {
            'id': self.id,
            'entityType': self.entity_type,
            'fieldKey': self.field_key,
            'label': self.label,
            'fieldType': self.field_type,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
