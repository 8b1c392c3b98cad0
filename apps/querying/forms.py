import json

from django import forms

from apps.querying import catalog as cat
from apps.querying.compiler import ColumnFilter


class ColumnFilterForm(forms.Form):
    """
    Validates one filter clause at the API boundary

    Field names follow the JSON keys the front end sends. The column type is
    resolved from the catalog and the owner's custom field definitions; a
    columnType sent by the client is ignored.
    """

    columnId = forms.CharField(max_length=100)
    operator = forms.ChoiceField(choices=[(op, op) for op in cat.ALL_OPERATORS])
    value = forms.CharField(required=False, max_length=500)
    value2 = forms.CharField(required=False, max_length=500)

    def __init__(self, *args, **kwargs):
        self.catalog = kwargs.pop('catalog')
        self.definitions = kwargs.pop('definitions', ())
        self.column = None
        super().__init__(*args, **kwargs)

    def clean(self):
        cleaned_data = super().clean()
        column_id = cleaned_data.get('columnId')
        operator = cleaned_data.get('operator')

        if not column_id or not operator:
            return cleaned_data

        self.column = self.catalog.resolve(column_id, self.definitions)
        if self.column is None:
            raise forms.ValidationError(f"Unknown column: {column_id}")

        if operator not in cat.OPERATORS[self.column.column_type]:
            raise forms.ValidationError(
                f"Operator '{operator}' is not available for {self.column.column_type} columns"
            )

        if not (cleaned_data.get('value') or '').strip():
            raise forms.ValidationError("A filter value is required")

        if operator == 'between' and not (cleaned_data.get('value2') or '').strip():
            raise forms.ValidationError("A second value is required for 'between'")

        return cleaned_data

    def to_filter(self):
        return ColumnFilter(
            column_id=self.cleaned_data['columnId'],
            operator=self.cleaned_data['operator'],
            value=self.cleaned_data.get('value') or '',
            value2=self.cleaned_data.get('value2') or None,
            column_type=self.column.column_type,
            enum_options=self.column.options,
        )


def parse_column_filters(raw, catalog, definitions=()):
    """
    Parse the `filters` list parameter

    Args:
        raw: JSON text or an already decoded list of filter dicts
        catalog (EntityCatalog): built-in columns of the entity type
        definitions: custom field definitions of the owner

    Returns:
        tuple: (list of ColumnFilter, list of {'filter': ..., 'errors': ...})

    Raises:
        ValueError: when raw is not a JSON list
    """
    if raw in (None, ''):
        return [], []

    data = raw
    if isinstance(raw, (str, bytes)):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid filters JSON: {e}") from e

    if not isinstance(data, list):
        raise ValueError("filters must be a JSON list")

    filters = []
    ignored = []
    for item in data:
        if not isinstance(item, dict):
            ignored.append({'filter': item, 'errors': ['Filter must be an object']})
            continue

        form = ColumnFilterForm(
            {key: item.get(key) for key in ('columnId', 'operator', 'value', 'value2') if item.get(key) is not None},
            catalog=catalog,
            definitions=definitions,
        )
        if form.is_valid():
            filters.append(form.to_filter())
        else:
            errors = [str(error) for field_errors in form.errors.values() for error in field_errors]
            ignored.append({'filter': item, 'errors': errors})

    return filters, ignored
