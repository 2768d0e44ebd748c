"""
Application Forms Tests
=======================

Test Coverage:
1. parse_list_value - list inputs (JSON, comma-separated, real lists)
2. ApplicationForm - create-time validation
3. ApplicationPatchForm - partial validation
4. ApplicationImportForm - file type & size

Run tests:
    python manage.py test apps.applications.tests.test_forms
"""

from django.test import TestCase, override_settings
from django.core.files.uploadedfile import SimpleUploadedFile

from apps.applications.forms import (
    parse_list_value,
    ApplicationForm,
    ApplicationPatchForm,
    NoteForm,
    ApplicationImportForm,
)


class ParseListValueTest(TestCase):

    def test_json_array(self):
        self.assertEqual(parse_list_value('["Nursing", "IT"]'), ['Nursing', 'IT'])

    def test_comma_separated(self):
        self.assertEqual(parse_list_value('Nursing, IT ,, '), ['Nursing', 'IT'])

    def test_malformed_json_falls_back(self):
        self.assertEqual(parse_list_value('[Nursing, IT]'), ['Nursing', 'IT'])

    def test_real_list(self):
        self.assertEqual(parse_list_value([' Nursing ', '', None, 'IT']), ['Nursing', 'IT'])

    def test_empty(self):
        self.assertEqual(parse_list_value(None), [])
        self.assertEqual(parse_list_value(''), [])
        self.assertEqual(parse_list_value('[]'), [])

    def test_number(self):
        self.assertEqual(parse_list_value(101), ['101'])


class ApplicationFormTest(TestCase):

    def _data(self, **kwargs):
        data = {
            'client_name': 'Ali Hassan',
            'phone_number': '+15550001',
            'completed_course': 'science',
            'planned_courses': 'Nursing',
            'preferred_locations': ['Toronto'],
        }
        data.update(kwargs)
        return data

    def test_valid_form(self):
        form = ApplicationForm(data=self._data(client_email=' Ali@Mail.COM '))

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['client_email'], 'ali@mail.com')
        self.assertEqual(form.cleaned_data['preferred_colleges'], [])

    def test_blank_email_becomes_none(self):
        form = ApplicationForm(data=self._data(client_email=''))

        self.assertTrue(form.is_valid())
        self.assertIsNone(form.cleaned_data['client_email'])

    def test_required_fields(self):
        form = ApplicationForm(data={})

        self.assertFalse(form.is_valid())
        for field in ('client_name', 'phone_number', 'completed_course', 'planned_courses', 'preferred_locations'):
            self.assertIn(field, form.errors)
        self.assertNotIn('preferred_colleges', form.errors)

    def test_empty_list_rejected(self):
        form = ApplicationForm(data=self._data(planned_courses='[]'))

        self.assertFalse(form.is_valid())
        self.assertIn('planned_courses', form.errors)

    def test_invalid_course(self):
        form = ApplicationForm(data=self._data(completed_course='medicine'))

        self.assertFalse(form.is_valid())
        self.assertIn('completed_course', form.errors)


class ApplicationPatchFormTest(TestCase):

    def test_empty_patch_is_valid(self):
        form = ApplicationPatchForm(data={})

        self.assertTrue(form.is_valid())
        self.assertEqual(form.changed_values(), {})

    def test_only_present_keys_change(self):
        form = ApplicationPatchForm(data={'phone_number': '+1999'})

        self.assertTrue(form.is_valid())
        self.assertEqual(form.changed_values(), {'phone_number': '+1999'})

    def test_present_required_key_cannot_be_blank(self):
        form = ApplicationPatchForm(data={'client_name': ''})

        self.assertFalse(form.is_valid())
        self.assertIn('client_name', form.errors)

    def test_optional_list_can_be_cleared(self):
        form = ApplicationPatchForm(data={'preferred_colleges': ''})

        self.assertTrue(form.is_valid())
        self.assertEqual(form.changed_values(), {'preferred_colleges': []})


class NoteFormTest(TestCase):

    def test_blank_note(self):
        self.assertFalse(NoteForm(data={'text': '  '}).is_valid())
        self.assertTrue(NoteForm(data={'text': 'Called'}).is_valid())


class ApplicationImportFormTest(TestCase):

    def test_valid_csv(self):
        upload = SimpleUploadedFile('data.CSV', b'client_name\n')
        form = ApplicationImportForm(data={}, files={'file': upload})

        self.assertTrue(form.is_valid(), form.errors)

    def test_invalid_extension(self):
        upload = SimpleUploadedFile('data.pdf', b'%PDF')
        form = ApplicationImportForm(data={}, files={'file': upload})

        self.assertFalse(form.is_valid())
        self.assertIn('file', form.errors)

    @override_settings(APPLICATION_IMPORT_MAX_FILE_SIZE=10)
    def test_file_too_large(self):
        upload = SimpleUploadedFile('data.csv', b'x' * 20)
        form = ApplicationImportForm(data={}, files={'file': upload})

        self.assertFalse(form.is_valid())
        self.assertIn('file', form.errors)
