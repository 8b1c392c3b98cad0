from django import forms
from django.core.exceptions import ValidationError

from .models import Contact
from .serializers import FIELD_MAP

MAX_TAGS = 50
MAX_TAG_LENGTH = 100


class ContactForm(forms.ModelForm):
    class Meta:
        model = Contact
        fields = ['first_name', 'last_name', 'email', 'phone', 'company', 'job_title', 'notes']

        error_messages = {
            'first_name': {'max_length': 'First name is too long (max 100 characters)'},
            'last_name': {'max_length': 'Last name is too long (max 100 characters)'},
            'email': {'invalid': 'Enter a valid email address'},
        }

    def clean_email(self):
        email = self.cleaned_data.get('email')
        if email:
            return email.strip().lower()
        return ''

    def clean(self):
        cleaned_data = super().clean()
        if not any(cleaned_data.get(field) for field in ('first_name', 'last_name', 'email')):
            raise ValidationError('A contact needs a first name, a last name or an email')
        return cleaned_data


def contact_form_data(data, instance=None):
    """
    Map a camelCase JSON payload onto ContactForm data

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


def clean_tags(value):
    """
    Returns:
        list: tag names, stripped, empty ones dropped

    Raises:
        ValidationError: not a list of strings, too many or too long
    """
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        raise ValidationError('Tags must be a list of strings')

    tags = []
    for tag in value:
        tag = tag.strip()
        if not tag or tag in tags:
            continue
        if len(tag) > MAX_TAG_LENGTH:
            raise ValidationError(f'Tag is too long (max {MAX_TAG_LENGTH} characters)')
        tags.append(tag)

    if len(tags) > MAX_TAGS:
        raise ValidationError(f'Too many tags (max {MAX_TAGS})')

    return tags
