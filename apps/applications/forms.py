import json

from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError

from .models import EDUCATION_CHOICES, STATUS_CHOICES


# Fields that may never be blanked once provided
REQUIRED_FIELDS = ('client_name', 'phone_number', 'completed_course', 'planned_courses', 'preferred_locations')


def parse_list_value(value):
    """
    Turn a list-valued input into a list of non-empty strings

    Accepts a real list, a JSON array string or a comma-separated string:
        '["Nursing", "IT"]' -> ['Nursing', 'IT']
        'Nursing, IT'       -> ['Nursing', 'IT']
        '[Nursing, IT'      -> ['[Nursing', 'IT']
        '[Nursing, IT]'     -> ['Nursing', 'IT']  (not valid JSON: brackets dropped, comma split)
    """
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]

    if not isinstance(value, str):
        # Spreadsheet cells can hold numbers
        value = str(value)

    value = value.strip()
    if not value:
        return []

    if value.startswith('[') and value.endswith(']'):
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            value = value[1:-1]
        else:
            if isinstance(parsed, list):
                return parse_list_value(parsed)
            value = value[1:-1]

    return [item.strip() for item in value.split(',') if item.strip()]


class StringListField(forms.Field):
    """Form field for the ordered free-text lists (courses, locations, colleges)"""

    default_error_messages = {
        'invalid': 'Enter a list of values or a comma-separated string.',
    }

    def to_python(self, value):
        if isinstance(value, dict):
            raise ValidationError(self.error_messages['invalid'], code='invalid')
        return parse_list_value(value)


class ApplicationForm(forms.Form):
    client_name = forms.CharField(max_length=200, error_messages={'required': 'Client name is required', 'max_length': 'Name is too long (max 200 characters)'})
    client_email = forms.EmailField(required=False)
    phone_number = forms.CharField(max_length=20, error_messages={'required': 'Phone number is required'})
    completed_course = forms.ChoiceField(choices=EDUCATION_CHOICES, error_messages={'required': 'Completed course is required'})
    planned_courses = StringListField(error_messages={'required': 'At least one planned course is required'})
    preferred_locations = StringListField(error_messages={'required': 'At least one preferred location is required'})
    preferred_colleges = StringListField(required=False)

    def clean_client_email(self):
        email = self.cleaned_data.get('client_email')
        if email:
            return email.strip().lower()
        return None


class ApplicationPatchForm(ApplicationForm):
    """
    Partial update: only the keys present in the data are validated

    A key that is present must still satisfy its create-time rule, so
    ``{'client_name': ''}`` is rejected while ``{}`` is fine.
    """

    application_status = forms.ChoiceField(choices=STATUS_CHOICES, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name, field in self.fields.items():
            field.required = name in REQUIRED_FIELDS and name in self.data

    def changed_values(self):
        return {name: value for name, value in self.cleaned_data.items() if name in self.data}


class NoteForm(forms.Form):
    text = forms.CharField(widget=forms.Textarea, error_messages={'required': 'Note text is required'})


class ApplicationImportForm(forms.Form):
    file = forms.FileField(label='Data File', help_text='CSV (.csv) or Excel (.xlsx) - Max 5MB')

    def clean_file(self):
        file = self.cleaned_data.get('file')
        if file:
            file_name = file.name.lower()
            valid_extensions = ['.csv', '.xlsx']
            if not any(file_name.endswith(ext) for ext in valid_extensions):
                raise ValidationError('Unsupported file type. Please upload CSV (.csv) or Excel (.xlsx) file')

            max_size = getattr(settings, 'APPLICATION_IMPORT_MAX_FILE_SIZE', 5 * 1024 * 1024)
            if file.size > max_size:
                max_mb = max_size / (1024 * 1024)
                raise ValidationError(f'File size is too large. Maximum {max_mb:.0f}MB allowed')
        return file
