"""
Bulk import of applications from CSV or Excel files

Rows are inserted one at a time through ``repository.create_application``.
A failing row is reported and skipped; rows already inserted stay inserted.
"""

import csv
import io
import logging
import zipfile
from dataclasses import dataclass, field

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from django.db import transaction

from apps.core import exceptions
from . import repository
from .forms import parse_list_value

logger = logging.getLogger(__name__)

COLUMNS = (
    'client_name',
    'client_email',
    'phone_number',
    'completed_course',
    'planned_courses',
    'preferred_locations',
    'preferred_colleges',
    'counselor_id',
)

LIST_COLUMNS = ('planned_courses', 'preferred_locations', 'preferred_colleges')


@dataclass
class ImportReport:
    success: int = 0
    failed: int = 0
    errors: list = field(default_factory=list)  # [(row_number or None, message)]
    created_ids: list = field(default_factory=list)

    def add_success(self, application):
        self.success += 1
        self.created_ids.append(str(application.pk))

    def add_row_error(self, row_number, message):
        self.failed += 1
        self.errors.append((row_number, message))

    def add_file_error(self, message):
        self.errors.append((None, message))

    @property
    def messages(self):
        return [
            f"Row {row_number}: {message}" if row_number is not None else message
            for row_number, message in self.errors
        ]

    def as_dict(self):
        return {
            'success': self.success,
            'failed': self.failed,
            'errors': self.messages,
            'created_ids': self.created_ids,
        }


# CELL HELPERS

def cell_text(value):
    """Cell value as a stripped string ('' for empty)"""
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        # Excel stores phone numbers typed without "+" as floats
        value = int(value)
    return str(value).strip()


def is_blank_row(row):
    return not any(cell_text(value) for value in row.values())


def _normalize_headers(headers):
    return [cell_text(header).lower() for header in headers]


# READERS

def read_csv_rows(stream):
    content = stream.read()
    if isinstance(content, bytes):
        content = content.decode('utf-8-sig')

    reader = csv.reader(io.StringIO(content))
    headers = _normalize_headers(next(reader, []))

    rows = []
    for values in reader:
        row = dict(zip(headers, values))
        if not is_blank_row(row):
            rows.append(row)
    return rows


def read_xlsx_rows(stream):
    wb = openpyxl.load_workbook(stream, read_only=True, data_only=True)
    try:
        ws = wb.active
        values = ws.iter_rows(values_only=True)
        headers = _normalize_headers(next(values, ()))

        rows = []
        for cells in values:
            row = dict(zip(headers, cells))
            if not is_blank_row(row):
                rows.append(row)
        return rows
    finally:
        wb.close()


def read_rows(uploaded_file):
    """
    Parse an uploaded .csv / .xlsx file into header-keyed dicts

    Blank rows are dropped, so the n-th returned row is data row n.
    """
    file_name = uploaded_file.name.lower()

    if file_name.endswith('.xlsx'):
        return read_xlsx_rows(uploaded_file)
    if file_name.endswith('.csv'):
        return read_csv_rows(uploaded_file)

    raise exceptions.ValidationError(
        'Unsupported file type. Please upload CSV (.csv) or Excel (.xlsx) file',
        errors={'file': ['Unsupported file type.']},
    )


# IMPORT

def row_to_data(row):
    data = {column: cell_text(row.get(column)) for column in COLUMNS if column not in LIST_COLUMNS}
    data['completed_course'] = data['completed_course'].lower()
    data['counselor_id'] = data['counselor_id'] or None
    for column in LIST_COLUMNS:
        data[column] = parse_list_value(row.get(column))
    return data


def import_rows(actor, rows):
    """
    Create one application per row

    Args:
        actor: who the applications are submitted by
        rows: iterable of dicts keyed by column name, data rows only

    Returns:
        ImportReport: counts plus "Row N: ..." errors (N is 1-based, header excluded)
    """
    if not actor.has_role(*repository.CREATE_ROLES):
        raise exceptions.Forbidden('Only agents and admins can import applications')

    report = ImportReport()

    for row_number, row in enumerate(rows, start=1):
        data = row_to_data(row)

        if not data['client_name'] or not data['phone_number']:
            report.add_row_error(row_number, 'Missing required fields (client_name or phone_number)')
            continue

        try:
            # Savepoint per row: a failed insert must not poison the next one
            with transaction.atomic():
                application = repository.create_application(actor, data)
        except exceptions.ApplicationError as exc:
            report.add_row_error(row_number, exc.message)
            continue

        report.add_success(application)

    logger.info(f"Import by user {actor.id}: {report.success} created, {report.failed} failed")

    return report


def import_file(actor, uploaded_file):
    report = ImportReport()

    try:
        rows = read_rows(uploaded_file)
    except (csv.Error, UnicodeDecodeError) as exc:
        logger.warning(f"CSV parsing failed for {uploaded_file.name}: {exc}")
        report.add_file_error(f'CSV parsing failed: {exc}')
        return report
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError) as exc:
        logger.warning(f"Excel parsing failed for {uploaded_file.name}: {exc}")
        report.add_file_error(f'Excel parsing failed: {exc}')
        return report

    return import_rows(actor, rows)
