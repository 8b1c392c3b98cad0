import re

from django import forms
from django.core.exceptions import ValidationError

from apps.core.entities import reserved_column_ids
from .models import CustomFieldDefinition

FIELD_KEY_RE = re.compile(r'^[A-Za-z][A-Za-z0-9_]*$')


class CustomFieldCreateForm(forms.ModelForm):
    class Meta:
        model = CustomFieldDefinition
        fields = ['entity_type', 'field_key', 'label', 'field_type']

        error_messages = {
            'field_key': {'required': 'Field key is required', 'max_length': 'Field key is too long (max 100 characters)'},
            'label': {'required': 'Label is required'},
        }

    def __init__(self, *args, **kwargs):
        self.owner = kwargs.pop('owner')
        super().__init__(*args, **kwargs)

    def clean_field_key(self):
        field_key = self.cleaned_data.get('field_key', '').strip()

        if not FIELD_KEY_RE.match(field_key):
            raise ValidationError('Field key must start with a letter and contain only letters, digits and underscores')

        if '__' in field_key:
            raise ValidationError('Field key cannot contain a double underscore')

        return field_key

    def clean_label(self):
        return self.cleaned_data.get('label', '').strip()

    def clean(self):
        cleaned_data = super().clean()
        entity_type = cleaned_data.get('entity_type')
        field_key = cleaned_data.get('field_key')

        if not entity_type or not field_key:
            return cleaned_data

        if field_key in reserved_column_ids(entity_type):
            self.add_error('field_key', f'"{field_key}" is a built-in column')
        elif CustomFieldDefinition.objects.filter(owner=self.owner, entity_type=entity_type, field_key=field_key).exists():
            self.add_error('field_key', 'A custom field with this key already exists')

        return cleaned_data

    def save(self, commit=True):
        definition = super().save(commit=False)
        definition.owner = self.owner
        if commit:
            definition.save()
        return definition


class CustomFieldUpdateForm(forms.ModelForm):
    """Label and type only; key and entity type are fixed once created."""

    class Meta:
        model = CustomFieldDefinition
        fields = ['label', 'field_type']

    def clean_label(self):
        label = self.cleaned_data.get('label', '').strip()
        if not label:
            raise ValidationError('Label is required')
        return label
