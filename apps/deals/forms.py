from django import forms
from django.core.exceptions import ValidationError

from apps.contacts.models import Contact
from apps.querying.compiler import parse_number
from .models import Deal
from .serializers import FIELD_MAP


class DealForm(forms.ModelForm):
    class Meta:
        model = Deal
        fields = ['name', 'stage', 'value', 'currency', 'expected_close_date', 'notes']

        error_messages = {
            'name': {'required': 'Name is required', 'max_length': 'Name is too long (max 200 characters)'},
            'stage': {'invalid_choice': 'Unknown stage'},
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # stage and currency fall back to the model defaults when left out
        self.fields['stage'].required = False
        self.fields['currency'].required = False

    def clean_name(self):
        name = self.cleaned_data.get('name', '').strip()
        if not name:
            raise ValidationError('Name is required')
        return name

    def clean_stage(self):
        return self.cleaned_data.get('stage') or self.instance.stage

    def clean_value(self):
        value = (self.cleaned_data.get('value') or '').strip()
        if value and parse_number(value) is None:
            raise ValidationError('Value must be a number, e.g. 12500.00')
        return value

    def clean_currency(self):
        currency = (self.cleaned_data.get('currency') or '').strip().upper()
        if not currency:
            return self.instance.currency
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError('Currency must be a 3-letter code, e.g. NZD')
        return currency


class DealStageForm(forms.Form):
    stage = forms.ChoiceField(choices=Deal.STAGE_CHOICES, error_messages={'invalid_choice': 'Unknown stage'})


def deal_form_data(data, instance=None):
    """
    Map a camelCase JSON payload onto DealForm data

    For updates, fields missing from the payload keep the instance's values.
    """
    form_data = {}
    for key, field in FIELD_MAP.items():
        if key in data:
            value = data[key]
            form_data[field] = '' if value is None else value
        elif instance is not None:
            form_data[field] = getattr(instance, field)
    return form_data


def clean_contact_ids(value, owner):
    """
    Returns:
        list: Contact objects, in the given order

    Raises:
        ValidationError: not a list of ids, or an id the owner does not have
    """
    if not isinstance(value, list):
        raise ValidationError('contactIds must be a list')

    ids = []
    for item in value:
        try:
            contact_id = int(item)
        except (TypeError, ValueError):
            raise ValidationError(f'Invalid contact id: {item}')
        if contact_id not in ids:
            ids.append(contact_id)

    contacts = Contact.objects.owned_by(owner).in_bulk(ids)
    missing = [contact_id for contact_id in ids if contact_id not in contacts]
    if missing:
        raise ValidationError(f'Contact(s) not found: {", ".join(str(i) for i in missing)}')

    return [contacts[contact_id] for contact_id in ids]
