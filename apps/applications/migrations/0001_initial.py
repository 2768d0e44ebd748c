import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Application',
            fields=[
                ('application_id', models.UUIDField(default=uuid.uuid4, editable=False, help_text='Opaque identifier, never reused', primary_key=True, serialize=False)),
                ('client_name', models.CharField(help_text="Prospective student's full name", max_length=200)),
                ('client_email', models.EmailField(blank=True, help_text='Email address (optional)', max_length=254, null=True)),
                ('phone_number', models.CharField(db_index=True, help_text='Phone number', max_length=20)),
                ('completed_course', models.CharField(choices=[('science', 'Science'), ('commerce', 'Commerce'), ('arts', 'Arts'), ('vocational', 'Vocational'), ('other', 'Other')], help_text='Prior education category', max_length=20)),
                ('planned_courses', models.JSONField(default=list, help_text='Courses of interest, in order')),
                ('preferred_locations', models.JSONField(default=list, help_text='Preferred study locations, in order')),
                ('preferred_colleges', models.JSONField(blank=True, default=list, help_text='Preferred colleges (optional)')),
                ('application_status', models.CharField(choices=[('started', 'Started'), ('processing', 'Processing'), ('documents_submitted', 'Documents Submitted'), ('payments_processed', 'Payments Processed'), ('completed', 'Completed')], db_index=True, default='started', help_text='Current workflow state', max_length=30)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('agent', models.ForeignKey(blank=True, help_text='Who submitted this application', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='submitted_applications', to=settings.AUTH_USER_MODEL)),
                ('counselor', models.ForeignKey(blank=True, help_text='Counselor responsible for this application', limit_choices_to={'role': 'counselor'}, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='counseled_applications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Application',
                'verbose_name_plural': 'Applications',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ApplicationNote',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('author_name', models.CharField(blank=True, help_text='Author display name at the time of writing', max_length=255)),
                ('text', models.TextField(help_text='Note text')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('application', models.ForeignKey(help_text='Which application this note belongs to', on_delete=django.db.models.deletion.CASCADE, related_name='notes', to='applications.application')),
                ('author', models.ForeignKey(help_text='Who wrote this note', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='application_notes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Note',
                'verbose_name_plural': 'Notes',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.AddIndex(
            model_name='application',
            index=models.Index(fields=['counselor', 'application_status'], name='app_counselor_status_idx'),
        ),
        migrations.AddIndex(
            model_name='application',
            index=models.Index(fields=['agent', 'application_status'], name='app_agent_status_idx'),
        ),
        migrations.AddIndex(
            model_name='applicationnote',
            index=models.Index(fields=['application', '-created_at'], name='note_application_created_idx'),
        ),
    ]
