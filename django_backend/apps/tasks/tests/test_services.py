import uuid
from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone

from apps.tasks import lifecycle, services
from apps.tasks.exceptions import (
    ActorNotPermitted,
    InvalidTransition,
    TaskNotFound,
    TaskValidationError,
)
from apps.tasks.models import Actor, Task, TaskStatus


def acme_form(**overrides):
    form = {
        "job_name": "Acme Site",
        "site_id": "S1",
        "platform": "WP",
        "developer": "Jane",
        "type_of_request": "Bug Fix",
        "number_of_pages": 3,
        "salesforce_link": "https://sf/x",
        "comments_required": False,
    }
    form.update(overrides)
    return form


class CreateTaskServiceTest(TestCase):
    """Test cases for creating tasks through the store"""

    def test_create_persists_pending_task(self):
        """Test a created task is stored in pending with createdAt"""
        now = timezone.now()
        task = services.create_task(acme_form(), now=now)

        stored = Task.objects.get(pk=task.pk)
        self.assertEqual(stored.status, TaskStatus.PENDING)
        self.assertEqual(stored.created_at, now)
        self.assertEqual(stored.job_name, "Acme Site")
        self.assertEqual(stored.number_of_pages, 3)

    def test_invalid_form_stores_nothing(self):
        """Test validation failure leaves the store empty"""
        with self.assertRaises(TaskValidationError):
            services.create_task(acme_form(number_of_pages=0))

        self.assertEqual(Task.objects.count(), 0)

    def test_list_tasks_newest_first(self):
        """Test listing returns every task, newest first"""
        now = timezone.now()
        old = services.create_task(acme_form(job_name="Old"), now=now - timedelta(days=1))
        new = services.create_task(acme_form(job_name="New"), now=now)

        self.assertEqual(list(services.list_tasks()), [new, old])


class UpdateTaskStatusServiceTest(TestCase):
    """Test cases for transitions through the store"""

    def setUp(self):
        """Set up test data"""
        self.t0 = timezone.now()
        self.task = services.create_task(acme_form(), now=self.t0)

    def test_transition_is_persisted(self):
        """Test a valid transition is written to the database"""
        later = self.t0 + timedelta(minutes=5)
        task = services.update_task_status(self.task.pk, TaskStatus.IN_PROGRESS, now=later)

        self.assertEqual(task.status, TaskStatus.IN_PROGRESS)
        stored = Task.objects.get(pk=self.task.pk)
        self.assertEqual(stored.status, TaskStatus.IN_PROGRESS)
        self.assertEqual(stored.dev_start_time, later)

    def test_task_id_may_be_a_string(self):
        """Test ids arriving as text are accepted"""
        task = services.update_task_status(str(self.task.pk), "in_progress")

        self.assertEqual(task.status, TaskStatus.IN_PROGRESS)

    def test_notes_are_persisted(self):
        """Test dev notes travel with the transition"""
        services.update_task_status(self.task.pk, TaskStatus.IN_PROGRESS)
        task = services.update_task_status(self.task.pk, TaskStatus.DEV_COMPLETE, note="fixed css")

        self.assertEqual(Task.objects.get(pk=task.pk).dev_notes, "fixed css")

    def test_invalid_transition_leaves_row_unchanged(self):
        """Test a rejected transition writes nothing"""
        before = Task.objects.get(pk=self.task.pk)

        with self.assertRaises(InvalidTransition):
            services.update_task_status(self.task.pk, TaskStatus.IN_QC)

        after = Task.objects.get(pk=self.task.pk)
        self.assertEqual(after.status, TaskStatus.PENDING)
        self.assertEqual(after.updated_at, before.updated_at)
        self.assertIsNone(after.qc_start_time)

    def test_wrong_actor_leaves_row_unchanged(self):
        """Test actor checks happen before writing"""
        with self.assertRaises(ActorNotPermitted):
            services.update_task_status(self.task.pk, TaskStatus.IN_PROGRESS, actor=Actor.QC)

        self.assertEqual(Task.objects.get(pk=self.task.pk).status, TaskStatus.PENDING)

    def test_unknown_and_malformed_ids(self):
        """Test missing tasks raise TaskNotFound"""
        for task_id in (uuid.uuid4(), "not-a-uuid", 42):
            with self.subTest(task_id=task_id):
                with self.assertRaises(TaskNotFound):
                    services.update_task_status(task_id, TaskStatus.IN_PROGRESS)
                with self.assertRaises(TaskNotFound):
                    services.get_task(task_id)

    def test_concurrent_change_is_detected(self):
        """Test the guarded update refuses to overwrite a status that moved meanwhile"""
        original = lifecycle.plan_transition

        def racing_plan(task, *args, **kwargs):
            changes = original(task, *args, **kwargs)
            Task.objects.filter(pk=task.pk).update(status=TaskStatus.IN_PROGRESS)
            return changes

        with patch("apps.tasks.lifecycle.plan_transition", side_effect=racing_plan):
            with self.assertRaises(InvalidTransition) as ctx:
                services.update_task_status(self.task.pk, TaskStatus.IN_PROGRESS)

        self.assertEqual(ctx.exception.current, "in_progress")
        self.assertEqual(ctx.exception.allowed, ["dev_complete"])
        self.assertIsNone(Task.objects.get(pk=self.task.pk).dev_start_time)

    def test_full_workflow_keeps_timeline_ordered(self):
        """Test the stored timeline is ordered after the Acme scenario"""
        pk = self.task.pk
        services.update_task_status(pk, "in_progress", actor="developer")
        services.update_task_status(pk, "dev_complete", note="fixed css", actor="developer")
        with self.assertRaises(InvalidTransition):
            services.update_task_status(pk, "qc_passed", actor="qc")
        services.update_task_status(pk, "in_qc", actor="qc")
        services.update_task_status(pk, "qc_failed", note="missing footer", actor="qc")
        task = services.update_task_status(pk, "dev_complete", actor="developer")

        self.assertEqual(task.status, TaskStatus.DEV_COMPLETE)
        self.assertEqual(task.qc_notes, "missing footer")
        self.assertIsNone(task.qc_completed_time)
        self.assertTrue(lifecycle.timeline_is_ordered(task))


class MarkCompletedServiceTest(TestCase):
    """Test cases for out-of-band completion"""

    def setUp(self):
        """Set up test data"""
        self.task = services.create_task(acme_form())

    def walk_to(self, *statuses):
        for status in statuses:
            services.update_task_status(self.task.pk, status)

    def test_passed_task_can_be_completed(self):
        """Test qc_passed tasks move to completed without new stamps"""
        self.walk_to("in_progress", "dev_complete", "in_qc", "qc_passed")
        before = Task.objects.get(pk=self.task.pk)

        task = services.mark_completed(self.task.pk)

        self.assertEqual(task.status, TaskStatus.COMPLETED)
        self.assertEqual(task.qc_completed_time, before.qc_completed_time)
        self.assertTrue(lifecycle.is_terminal(task.status))

    def test_unfinished_task_cannot_be_completed(self):
        """Test only qc_passed tasks may be completed"""
        self.walk_to("in_progress")

        with self.assertRaises(InvalidTransition) as ctx:
            services.mark_completed(self.task.pk)

        self.assertEqual(ctx.exception.current, "in_progress")
        self.assertEqual(Task.objects.get(pk=self.task.pk).status, TaskStatus.IN_PROGRESS)

    def test_completed_task_has_no_transitions(self):
        """Test completed is a dead end for the workflow"""
        self.walk_to("in_progress", "dev_complete", "in_qc", "qc_passed")
        services.mark_completed(self.task.pk)

        with self.assertRaises(InvalidTransition):
            services.update_task_status(self.task.pk, "in_progress")
