from django.db import models
from taggit.managers import TaggableManager

from apps.core.models import OwnedRecord


class Contact(OwnedRecord):
    """
    A person in the owner's address book

    Deals link to contacts through DealContact (apps.deals).
    """

    # Basic Information
    first_name = models.CharField(max_length=100, blank=True, help_text="Given name")
    last_name = models.CharField(max_length=100, blank=True, help_text="Family name")
    email = models.EmailField(blank=True, help_text="Email address")
    phone = models.CharField(max_length=50, blank=True, help_text="Phone number")

    # Work
    company = models.CharField(max_length=200, blank=True, help_text="Company the contact works for")
    job_title = models.CharField(max_length=200, blank=True, help_text="Role at the company")

    notes = models.TextField(blank=True, help_text="Free-form notes")
    tags = TaggableManager(blank=True)

    class Meta(OwnedRecord.Meta):
        verbose_name = "Contact"
        verbose_name_plural = "Contacts"
        indexes = [
            models.Index(fields=['owner', '-created_at'], name='contact_owner_created_idx'),
            models.Index(fields=['owner', 'email'], name='contact_owner_email_idx'),
            models.Index(fields=['owner', 'company'], name='contact_owner_company_idx'),
        ]

    def __str__(self):
        return self.full_name or self.email or f"Contact #{self.pk}"

    @property
    def full_name(self):
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def get_tag_names(self):
        # uses prefetch_related('tags') when present
        return sorted(tag.name for tag in self.tags.all())
