from django.conf import settings
from django.db import models

from apps.core.models import OwnedRecord


def default_currency():
    return settings.CRM_DEFAULT_CURRENCY


class Deal(OwnedRecord):
    """
    A sales opportunity, shown as a card on the pipeline board

    value is kept as text (whatever the user typed, validated to be a plain
    number on write); filters and stats cast it with a guarded float cast.
    """

    STAGE_CHOICES = [
        ('lead', 'Lead'),
        ('qualified', 'Qualified'),
        ('proposal', 'Proposal'),
        ('negotiation', 'Negotiation'),
        ('closed-won', 'Closed Won'),
        ('closed-lost', 'Closed Lost'),
    ]
    STAGES = [stage for stage, _ in STAGE_CHOICES]
    WON_STAGE = 'closed-won'

    name = models.CharField(max_length=200, help_text="Deal name")
    stage = models.CharField(max_length=20, choices=STAGE_CHOICES, default='lead', help_text="Pipeline stage")
    value = models.CharField(max_length=50, blank=True, help_text="Deal value as entered, e.g. 12500.00")
    currency = models.CharField(max_length=3, default=default_currency, help_text="ISO currency code")
    expected_close_date = models.DateTimeField(null=True, blank=True, help_text="When the deal is expected to close")
    notes = models.TextField(blank=True, help_text="Free-form notes")

    contacts = models.ManyToManyField('contacts.Contact', through='DealContact', related_name='deals', blank=True)

    class Meta(OwnedRecord.Meta):
        verbose_name = "Deal"
        verbose_name_plural = "Deals"
        indexes = [
            models.Index(fields=['owner', '-created_at'], name='deal_owner_created_idx'),
            models.Index(fields=['owner', 'stage'], name='deal_owner_stage_idx'),
        ]

    def __str__(self):
        return self.name


class DealContact(models.Model):
    deal = models.ForeignKey(Deal, on_delete=models.CASCADE, related_name='deal_contacts')
    contact = models.ForeignKey('contacts.Contact', on_delete=models.CASCADE, related_name='deal_links')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Deal Contact"
        verbose_name_plural = "Deal Contacts"
        ordering = ['created_at', 'id']
        constraints = [
            models.UniqueConstraint(fields=['deal', 'contact'], name='unique_deal_contact'),
        ]

    def __str__(self):
        return f"{self.deal} - {self.contact}"
