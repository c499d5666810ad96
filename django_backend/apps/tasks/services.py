"""
Task store.

All writes to ``Task`` go through here. Status changes are planned by the
lifecycle engine and persisted inside one transaction, with the row locked
and the UPDATE guarded on the status the plan was made from.
"""

import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from apps.tasks import lifecycle
from apps.tasks.exceptions import InvalidTransition, TaskNotFound, TaskWorkflowError
from apps.tasks.models import Task, TaskStatus

logger = logging.getLogger(__name__)


def list_tasks():
    return Task.objects.all().order_by("-created_at")


def _lookup(task_id, for_update=False) -> Task:
    qs = Task.objects.select_for_update() if for_update else Task.objects.all()
    try:
        return qs.get(pk=task_id)
    except (Task.DoesNotExist, DjangoValidationError, ValueError):
        raise TaskNotFound(task_id)


def get_task(task_id) -> Task:
    return _lookup(task_id)


def create_task(form: Mapping[str, Any], now: Optional[datetime] = None) -> Task:
    fields = lifecycle.new_task_fields(form, now=now)
    task = Task.objects.create(**fields)
    logger.info(
        "Task created id=%s job=%r developer=%r type=%r",
        task.id, task.job_name, task.developer, task.type_of_request,
    )
    return task


def update_task_status(
    task_id,
    new_status: Any,
    note: Optional[str] = None,
    actor: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Task:
    with transaction.atomic():
        task = _lookup(task_id, for_update=True)
        previous = task.status
        try:
            changes = lifecycle.plan_transition(task, new_status, note=note, actor=actor, now=now)
        except TaskWorkflowError as e:
            logger.warning("Rejected transition on task %s: %s", task.pk, e)
            raise

        updated = Task.objects.filter(pk=task.pk, status=previous).update(
            updated_at=timezone.now(), **changes
        )
        if updated != 1:
            current = Task.objects.filter(pk=task.pk).values_list("status", flat=True).first()
            logger.warning(
                "Task %s changed under us (%s -> %s); refusing %s",
                task.pk, previous, current, new_status,
            )
            raise InvalidTransition(
                current or previous,
                new_status,
                [s.value for s in lifecycle.allowed_targets(current or previous)],
            )

    task.refresh_from_db()
    logger.info("Task %s moved %s -> %s", task.pk, previous, task.status)
    return task


def mark_completed(task_id) -> Task:
    """
    Close a task that passed QC.

    This is the out-of-band write used by external processes; it is not part
    of the developer/QC transition table and records no timestamps.
    """
    with transaction.atomic():
        task = _lookup(task_id, for_update=True)
        if task.status != TaskStatus.QC_PASSED:
            raise InvalidTransition(task.status, TaskStatus.COMPLETED)
        Task.objects.filter(pk=task.pk, status=TaskStatus.QC_PASSED).update(
            status=TaskStatus.COMPLETED, updated_at=timezone.now()
        )
    task.refresh_from_db()
    logger.info("Task %s marked completed", task.pk)
    return task
