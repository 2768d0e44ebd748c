"""
Dashboard Statistics Tests
==========================

Run tests:
    python manage.py test apps.core.tests.test_stats
"""

from unittest import mock

from django.test import TestCase
from django.contrib.auth import get_user_model
from django.db import DatabaseError

from apps.applications.models import Application, ApplicationQuerySet
from apps.core.stats import compute_stats, bucket_counts, counselor_stats, DashboardStats

User = get_user_model()


def make_application(**kwargs):
    data = {
        'client_name': 'Ali Hassan',
        'phone_number': '+15550001',
        'completed_course': 'science',
        'planned_courses': ['Nursing'],
        'preferred_locations': ['Toronto'],
    }
    data.update(kwargs)
    return Application.objects.create(**data)


class ComputeStatsTest(TestCase):

    def setUp(self):
        self.admin = User.objects.create_user(email='admin@test.com', password='testpass123', username='Admin', role='admin')
        self.counselor = User.objects.create_counselor(email='mona@test.com', password='testpass123', username='Mona')
        self.agent = User.objects.create_user(email='sara@test.com', password='testpass123', username='Sara', role='agent')
        User.objects.create_user(email='omar@test.com', password='testpass123', username='Omar', role='agent')

        make_application(counselor=self.counselor, agent=self.agent)
        make_application(agent=self.agent)
        make_application(application_status='processing', counselor=self.counselor)
        make_application(application_status='completed')

    def test_admin_stats(self):
        stats = compute_stats(self.admin.as_actor())

        self.assertEqual(stats, DashboardStats(
            total=4,
            new=2,
            in_progress=1,
            completed=1,
            rejected=0,
            total_counselors=1,
            total_agents=2,
        ))

    def test_counselor_stats_are_scoped(self):
        stats = compute_stats(self.counselor.as_actor())

        self.assertEqual(stats.total, 2)
        self.assertEqual(stats.new, 1)
        self.assertEqual(stats.in_progress, 1)
        self.assertEqual(stats.completed, 0)
        # Profile counts are for admins only
        self.assertEqual(stats.total_counselors, 0)
        self.assertEqual(stats.total_agents, 0)

    def test_agent_stats_are_scoped(self):
        stats = compute_stats(self.agent.as_actor())

        self.assertEqual(stats.total, 2)
        self.assertEqual(stats.new, 2)

    def test_unmapped_status_lands_in_no_bucket(self):
        extra = make_application()
        Application.objects.filter(pk=extra.pk).update(application_status='on_hold')

        with self.assertLogs('apps.core.stats', level='WARNING') as logs:
            stats = compute_stats(self.admin.as_actor())

        self.assertEqual(stats.total, 5)
        self.assertEqual(stats.new + stats.in_progress + stats.completed + stats.rejected, 4)
        self.assertIn('on_hold', logs.output[0])

    def test_legacy_statuses_are_bucketed(self):
        for status in ('pending', 'interview', 'accepted', 'rejected'):
            extra = make_application()
            Application.objects.filter(pk=extra.pk).update(application_status=status)

        stats = compute_stats(self.admin.as_actor())

        self.assertEqual(stats.new, 3)
        self.assertEqual(stats.in_progress, 2)
        self.assertEqual(stats.completed, 2)
        self.assertEqual(stats.rejected, 1)

    def test_fallback_when_aggregate_fails(self):
        expected = compute_stats(self.admin.as_actor())

        with mock.patch.object(ApplicationQuerySet, 'status_counts', side_effect=DatabaseError('function missing')):
            with self.assertLogs('apps.core.stats', level='WARNING'):
                stats = compute_stats(self.admin.as_actor())

        self.assertEqual(stats, expected)

    def test_fallback_skips_unmapped_status(self):
        extra = make_application()
        Application.objects.filter(pk=extra.pk).update(application_status='on_hold')

        with mock.patch.object(ApplicationQuerySet, 'status_counts', side_effect=DatabaseError('function missing')):
            with self.assertLogs('apps.core.stats', level='WARNING') as logs:
                stats = compute_stats(self.admin.as_actor())

        self.assertEqual(stats.total, 5)
        self.assertEqual(stats.new + stats.in_progress + stats.completed + stats.rejected, 4)
        self.assertTrue(any('on_hold' in line for line in logs.output))

    def test_idempotent(self):
        actor = self.admin.as_actor()
        self.assertEqual(compute_stats(actor), compute_stats(actor))

    def test_empty_database(self):
        Application.objects.all().delete()

        stats = compute_stats(self.counselor.as_actor())
        self.assertEqual(stats.as_dict(), DashboardStats().as_dict())


class BucketCountsTest(TestCase):

    def test_bucket_counts(self):
        buckets = bucket_counts({'started': 2, 'documents_submitted': 3, 'payments_processed': 1, 'mystery': 7})

        self.assertEqual(buckets, {'new': 2, 'in_progress': 4, 'completed': 0, 'rejected': 0})


class CounselorStatsTest(TestCase):

    def test_per_counselor_breakdown(self):
        mona = User.objects.create_counselor(email='mona@test.com', password='testpass123', username='Mona')
        User.objects.create_counselor(email='hana@test.com', password='testpass123', username='Hana')
        make_application(counselor=mona)
        make_application(counselor=mona, application_status='completed')

        rows = {row['username']: row for row in counselor_stats()}

        self.assertEqual(rows['Mona']['total'], 2)
        self.assertEqual(rows['Mona']['started'], 1)
        self.assertEqual(rows['Mona']['completed'], 1)
        self.assertEqual(rows['Mona']['processing'], 0)
        self.assertEqual(rows['Hana']['total'], 0)
        self.assertEqual(list(rows), ['Hana', 'Mona'])
