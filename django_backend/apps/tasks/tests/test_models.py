from datetime import timedelta

from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone

from apps.tasks.models import Platform, RequestType, Task, TaskStatus


def make_task(**overrides):
    fields = {
        "job_name": "Acme Site",
        "site_id": "S1",
        "platform": Platform.WP,
        "developer": "Jane",
        "type_of_request": RequestType.BUG_FIX,
        "number_of_pages": 3,
        "salesforce_link": "https://sf/x",
    }
    fields.update(overrides)
    return Task.objects.create(**fields)


class TaskModelTest(TestCase):
    """Test cases for Task model"""

    def test_create_basic_task(self):
        """Test creating a basic task"""
        task = make_task()

        self.assertEqual(task.status, TaskStatus.PENDING)
        self.assertFalse(task.comments_required)
        self.assertIsNotNone(task.created_at)
        self.assertIsNone(task.dev_start_time)

    def test_task_ids_are_unique_uuids(self):
        """Test ids are opaque and distinct"""
        a = make_task()
        b = make_task()

        self.assertNotEqual(a.pk, b.pk)
        self.assertEqual(len(str(a.pk)), 36)

    def test_task_string_representation(self):
        """Test task string representation"""
        task = make_task()

        self.assertEqual(str(task), "Acme Site (S1)")

    def test_status_outside_enum_rejected_by_database(self):
        """Test the status check constraint"""
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                make_task(status="archived")

    def test_zero_pages_rejected_by_database(self):
        """Test the page count check constraint"""
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                make_task(number_of_pages=0)

    def test_timestamps_round_trip_with_microseconds(self):
        """Test stored timestamps keep sub-second precision"""
        task = make_task()
        stamp = task.created_at.replace(microsecond=123456)
        Task.objects.filter(pk=task.pk).update(dev_start_time=stamp)

        task.refresh_from_db()

        self.assertEqual(task.dev_start_time, stamp)

    def test_tasks_ordered_newest_first(self):
        """Test default ordering"""
        now = timezone.now()
        first = make_task(job_name="First", created_at=now - timedelta(minutes=5))
        second = make_task(job_name="Second", created_at=now)

        self.assertEqual(list(Task.objects.all()), [second, first])


class TaskChoicesTest(TestCase):
    """Test the choice catalogs"""

    def test_exactly_seven_statuses(self):
        """Test the workflow has seven statuses"""
        self.assertEqual(
            TaskStatus.values,
            ["pending", "in_progress", "dev_complete", "in_qc", "qc_passed", "qc_failed", "completed"],
        )

    def test_status_labels(self):
        """Test human labels of statuses"""
        self.assertEqual(TaskStatus.IN_QC.label, "In QC")
        self.assertEqual(TaskStatus.DEV_COMPLETE.label, "Dev Complete")

    def test_platforms(self):
        """Test supported platforms"""
        self.assertEqual(Platform.values, ["WP", "DUDA"])

    def test_request_types(self):
        """Test request type catalog"""
        self.assertIn("Bug Fix", RequestType.values)
        self.assertIn("SEO Optimization", RequestType.values)
        self.assertEqual(len(RequestType.values), 6)
