from django.conf import settings
from django.db import models


class OwnedQuerySet(models.QuerySet):

    def owned_by(self, owner):
        return self.filter(owner=owner)


class OwnedRecord(models.Model):
    """
    Base for every CRM record (contacts, deals)

    Each record belongs to exactly one user and carries a bag of custom field
    values keyed by CustomFieldDefinition.field_key.
    """

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='%(class)ss', help_text="User who owns this record")
    custom_fields = models.JSONField(default=dict, blank=True, help_text="Custom field values keyed by field key")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OwnedQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ['-created_at']
