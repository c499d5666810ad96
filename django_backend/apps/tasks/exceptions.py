from typing import Dict, Iterable, Optional


class TaskWorkflowError(Exception):
    """Base class for errors raised by the task workflow."""


class TaskValidationError(TaskWorkflowError):
    """A new task is missing a required field or carries an invalid value."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid task fields: {fields}")

    @property
    def fields(self):
        return sorted(self.errors)


class InvalidTransition(TaskWorkflowError):
    """The requested status is not reachable from the task's current status."""

    def __init__(self, current: str, requested: str, allowed: Optional[Iterable[str]] = None):
        self.current = str(current)
        self.requested = str(requested)
        self.allowed = [str(s) for s in (allowed or [])]
        message = f"Cannot move task from '{self.current}' to '{self.requested}'"
        if self.allowed:
            message += f" (allowed: {', '.join(self.allowed)})"
        elif allowed is not None:
            message += f" ('{self.current}' has no outgoing transitions)"
        super().__init__(message)


class ActorNotPermitted(TaskWorkflowError):
    def __init__(self, actor: str, required: str, current: str, requested: str):
        self.actor = str(actor)
        self.required = str(required)
        self.current = str(current)
        self.requested = str(requested)
        super().__init__(
            f"'{self.actor}' may not move a task from '{self.current}' to "
            f"'{self.requested}'; only '{self.required}' can"
        )


class TaskNotFound(TaskWorkflowError):
    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")
