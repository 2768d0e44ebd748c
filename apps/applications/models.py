import uuid
from collections import Counter

from django.conf import settings
from django.db import models
from django.db.models import Count

# Workflow states, in the order the UI walks through them
STARTED = 'started'
PROCESSING = 'processing'
DOCUMENTS_SUBMITTED = 'documents_submitted'
PAYMENTS_PROCESSED = 'payments_processed'
COMPLETED = 'completed'

STATUS_CHOICES = [
    (STARTED, 'Started'),
    (PROCESSING, 'Processing'),
    (DOCUMENTS_SUBMITTED, 'Documents Submitted'),
    (PAYMENTS_PROCESSED, 'Payments Processed'),
    (COMPLETED, 'Completed'),
]

INITIAL_STATUS = STARTED

EDUCATION_CHOICES = [
    ('science', 'Science'),
    ('commerce', 'Commerce'),
    ('arts', 'Arts'),
    ('vocational', 'Vocational'),
    ('other', 'Other'),
]


class ApplicationQuerySet(models.QuerySet):

    def for_counselor(self, user_id):
        return self.filter(counselor_id=user_id)

    def for_agent(self, user_id):
        return self.filter(agent_id=user_id)

    def status_counts(self):
        """
        Per-status row counts computed by the database (GROUP BY)

        Returns:
            dict: {'started': 2, 'processing': 1, ...}
        """
        rows = self.order_by().values('application_status').annotate(count=Count('pk'))
        return {row['application_status']: row['count'] for row in rows}

    def tally_statuses(self):
        """Same result as status_counts(), counted in Python from the raw rows"""
        return dict(Counter(self.order_by().values_list('application_status', flat=True)))


class Application(models.Model):

    application_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, help_text='Opaque identifier, never reused')

    # Client contact
    client_name = models.CharField(max_length=200, help_text="Prospective student's full name")
    client_email = models.EmailField(blank=True, null=True, help_text='Email address (optional)')
    phone_number = models.CharField(max_length=20, db_index=True, help_text='Phone number')

    # Education
    completed_course = models.CharField(max_length=20, choices=EDUCATION_CHOICES, help_text='Prior education category')
    planned_courses = models.JSONField(default=list, help_text='Courses of interest, in order')
    preferred_locations = models.JSONField(default=list, help_text='Preferred study locations, in order')
    preferred_colleges = models.JSONField(default=list, blank=True, help_text='Preferred colleges (optional)')

    # Assignment
    counselor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='counseled_applications',
                                  limit_choices_to={'role': 'counselor'}, help_text='Counselor responsible for this application')
    agent = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='submitted_applications',
                              help_text='Who submitted this application')

    application_status = models.CharField(max_length=30, choices=STATUS_CHOICES, default=INITIAL_STATUS, db_index=True, help_text='Current workflow state')

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ApplicationQuerySet.as_manager()

    class Meta:
        verbose_name = 'Application'
        verbose_name_plural = 'Applications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['counselor', 'application_status'], name='app_counselor_status_idx'),
            models.Index(fields=['agent', 'application_status'], name='app_agent_status_idx'),
        ]

    def __str__(self):
        """String representation: Name (Phone) - Status"""
        return f"{self.client_name} ({self.phone_number}) - {self.get_application_status_display()}"


class ApplicationNote(models.Model):
    """
    One annotation on an application

    Appended with a single INSERT; ordering (newest first, insert order as
    tie-break) is assigned by the database.
    """

    application = models.ForeignKey(Application, on_delete=models.CASCADE, related_name='notes', help_text='Which application this note belongs to')
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, related_name='application_notes', help_text='Who wrote this note')
    author_name = models.CharField(max_length=255, blank=True, help_text='Author display name at the time of writing')
    text = models.TextField(help_text='Note text')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Note'
        verbose_name_plural = 'Notes'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['application', '-created_at'], name='note_application_created_idx'),
        ]

    def __str__(self):
        preview = self.text[:50] + '...' if len(self.text) > 50 else self.text
        return f"Note by {self.author_name or 'Unknown'}: {preview}"
