"""
Task lifecycle engine.

Owns the transition table of the build/QC workflow, validation of new tasks
and the timestamp and note stamping done by every transition. Nothing here
touches the database: callers pass in a task (a model instance or any object
with the same attributes) and get back the field changes to persist.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from django.utils import timezone

from apps.tasks.exceptions import ActorNotPermitted, InvalidTransition, TaskValidationError
from apps.tasks.models import Actor, Platform, RequestType, Task, TaskStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Edge:
    actor: str
    stamp: str
    notes: Optional[str] = None
    clears: Tuple[str, ...] = ()


TRANSITIONS: Dict[Tuple[str, str], Edge] = {
    (TaskStatus.PENDING, TaskStatus.IN_PROGRESS): Edge(Actor.DEVELOPER, "dev_start_time"),
    (TaskStatus.IN_PROGRESS, TaskStatus.DEV_COMPLETE): Edge(
        Actor.DEVELOPER, "dev_completed_time", notes="dev_notes"
    ),
    # Rework closes the failed QC round; qc_notes stay so the reason is visible.
    (TaskStatus.QC_FAILED, TaskStatus.DEV_COMPLETE): Edge(
        Actor.DEVELOPER,
        "dev_completed_time",
        notes="dev_notes",
        clears=("qc_start_time", "qc_completed_time"),
    ),
    (TaskStatus.DEV_COMPLETE, TaskStatus.IN_QC): Edge(Actor.QC, "qc_start_time"),
    (TaskStatus.IN_QC, TaskStatus.QC_PASSED): Edge(Actor.QC, "qc_completed_time", notes="qc_notes"),
    (TaskStatus.IN_QC, TaskStatus.QC_FAILED): Edge(Actor.QC, "qc_completed_time", notes="qc_notes"),
}

TERMINAL_STATUSES = frozenset({TaskStatus.QC_PASSED, TaskStatus.COMPLETED})

# Workflow order of the recorded timestamps.
TIMELINE_FIELDS = (
    "created_at",
    "dev_start_time",
    "dev_completed_time",
    "qc_start_time",
    "qc_completed_time",
)

REQUIRED_TEXT_FIELDS = ("job_name", "site_id", "developer", "salesforce_link")

REQUIRED = "This field is required."

# Largest value a PositiveIntegerField holds on every supported backend.
MAX_PAGES = 2147483647


def _clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_status(value: Any) -> Optional[TaskStatus]:
    try:
        return TaskStatus(value)
    except ValueError:
        return None


def _clean_pages(value: Any, errors: Dict[str, str]) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        errors["number_of_pages"] = REQUIRED
        return None
    if isinstance(value, bool):
        errors["number_of_pages"] = "Must be a whole number."
        return None
    if isinstance(value, int):
        pages = value
    else:
        try:
            pages = int(str(value).strip())
        except ValueError:
            errors["number_of_pages"] = "Must be a whole number."
            return None
    if pages < 1:
        errors["number_of_pages"] = "Must be at least 1."
        return None
    if pages > MAX_PAGES:
        errors["number_of_pages"] = f"Must be at most {MAX_PAGES}."
        return None
    return pages


def validate_new_task(form: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check the creation form and return its cleaned values.

    Every problem is collected before raising so the caller can report all
    offending fields at once.
    """
    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}

    for field in REQUIRED_TEXT_FIELDS:
        value = _clean_text(form.get(field))
        max_length = Task._meta.get_field(field).max_length
        if value is None:
            errors[field] = REQUIRED
        elif len(value) > max_length:
            errors[field] = f"Must be at most {max_length} characters."
        cleaned[field] = value

    platform = _clean_text(form.get("platform"))
    if platform is None:
        errors["platform"] = REQUIRED
    elif platform not in Platform.values:
        errors["platform"] = f"'{platform}' is not a supported platform."
    cleaned["platform"] = platform

    request_type = _clean_text(form.get("type_of_request"))
    if request_type is None:
        errors["type_of_request"] = REQUIRED
    elif request_type not in RequestType.values:
        errors["type_of_request"] = f"'{request_type}' is not a known request type."
    cleaned["type_of_request"] = request_type

    cleaned["number_of_pages"] = _clean_pages(form.get("number_of_pages"), errors)

    comments_required = form.get("comments_required", False)
    if comments_required is None:
        comments_required = False
    if not isinstance(comments_required, bool):
        errors["comments_required"] = "Must be true or false."
    cleaned["comments_required"] = comments_required

    comments = _clean_text(form.get("comments"))
    if comments_required is True and comments is None:
        errors["comments"] = "Comments are required for this task."
    cleaned["comments"] = comments
    cleaned["additional_comments"] = _clean_text(form.get("additional_comments"))

    if errors:
        raise TaskValidationError(errors)
    return cleaned


def new_task_fields(form: Mapping[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Field values of a freshly created task, always in ``pending``."""
    fields = validate_new_task(form)
    fields["status"] = TaskStatus.PENDING
    fields["created_at"] = now or timezone.now()
    return fields


def allowed_targets(status: Any, actor: Optional[str] = None) -> List[TaskStatus]:
    current = _coerce_status(status)
    targets = [
        target
        for (source, target), edge in TRANSITIONS.items()
        if source == current and (actor is None or edge.actor == actor)
    ]
    return sorted(set(targets), key=TaskStatus.values.index)


def is_terminal(status: Any) -> bool:
    return _coerce_status(status) in TERMINAL_STATUSES


def latest_timestamp(task) -> Optional[datetime]:
    stamps = [getattr(task, field, None) for field in TIMELINE_FIELDS]
    stamps = [s for s in stamps if s is not None]
    return max(stamps) if stamps else None


def timeline_is_ordered(task) -> bool:
    """True when the recorded timestamps never go backwards in workflow order."""
    stamps = [getattr(task, field, None) for field in TIMELINE_FIELDS]
    stamps = [s for s in stamps if s is not None]
    return all(a <= b for a, b in zip(stamps, stamps[1:]))


def plan_transition(
    task,
    target: Any,
    note: Optional[str] = None,
    actor: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Work out the field changes that move ``task`` to ``target``.

    Raises InvalidTransition when the edge is not in the table and
    ActorNotPermitted when ``actor`` is given and the edge belongs to a
    different role. ``task`` is left untouched.
    """
    current = str(task.status)
    requested = _coerce_status(target)
    edge = TRANSITIONS.get((current, requested)) if requested is not None else None
    if edge is None:
        raise InvalidTransition(
            current, target, [s.value for s in allowed_targets(current)]
        )

    if actor is not None and str(actor) != edge.actor:
        raise ActorNotPermitted(actor, edge.actor, current, requested.value)

    stamp = now or timezone.now()
    latest = latest_timestamp(task)
    if latest is not None and stamp < latest:
        logger.warning(
            "Clock behind task timeline (%s < %s); stamping %s with %s",
            stamp, latest, edge.stamp, latest,
        )
        stamp = latest

    changes: Dict[str, Any] = {"status": requested, edge.stamp: stamp}
    if edge.notes:
        changes[edge.notes] = _clean_text(note)
    for field in edge.clears:
        changes[field] = None
    return changes


def apply_transition(
    task,
    target: Any,
    note: Optional[str] = None,
    actor: Optional[str] = None,
    now: Optional[datetime] = None,
):
    changes = plan_transition(task, target, note=note, actor=actor, now=now)
    for field, value in changes.items():
        setattr(task, field, value)
    return task
