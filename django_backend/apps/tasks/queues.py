from apps.tasks.models import TaskStatus

DEVELOPER_QUEUE_STATUSES = (
    TaskStatus.PENDING,
    TaskStatus.IN_PROGRESS,
    TaskStatus.DEV_COMPLETE,
    TaskStatus.QC_FAILED,
)

QC_QUEUE_STATUSES = (
    TaskStatus.DEV_COMPLETE,
    TaskStatus.IN_QC,
)


def developer_queue(tasks, developer):
    """Tasks a developer still has to pick up, finish or rework."""
    return tasks.filter(developer=developer, status__in=DEVELOPER_QUEUE_STATUSES)


def qc_queue(tasks):
    """Tasks waiting for, or currently under, quality control."""
    return tasks.filter(status__in=QC_QUEUE_STATUSES)
