import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class TaskStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    IN_PROGRESS = "in_progress", "In Progress"
    DEV_COMPLETE = "dev_complete", "Dev Complete"
    IN_QC = "in_qc", "In QC"
    QC_PASSED = "qc_passed", "QC Passed"
    QC_FAILED = "qc_failed", "QC Failed"
    COMPLETED = "completed", "Completed"


class Platform(models.TextChoices):
    WP = "WP", "WordPress"
    DUDA = "DUDA", "DUDA"


class RequestType(models.TextChoices):
    FULL_REDESIGN = "Full Redesign", "Full Redesign"
    CONTENT_UPDATE = "Content Update", "Content Update"
    NEW_FEATURE = "New Feature", "New Feature"
    BUG_FIX = "Bug Fix", "Bug Fix"
    SEO_OPTIMIZATION = "SEO Optimization", "SEO Optimization"
    PERFORMANCE_OPTIMIZATION = "Performance Optimization", "Performance Optimization"


class Actor(models.TextChoices):
    ADMIN = "admin", "Admin"
    DEVELOPER = "developer", "Developer"
    QC = "qc", "Quality Control"


class Task(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    job_name = models.CharField(max_length=200)
    site_id = models.CharField(max_length=100)
    salesforce_link = models.CharField(max_length=500)
    platform = models.CharField(max_length=8, choices=Platform.choices)
    developer = models.CharField(max_length=150)
    type_of_request = models.CharField(max_length=64, choices=RequestType.choices)
    number_of_pages = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    comments_required = models.BooleanField(default=False)
    comments = models.TextField(null=True, blank=True)
    additional_comments = models.TextField(null=True, blank=True)

    status = models.CharField(
        max_length=32,
        choices=TaskStatus.choices,
        default=TaskStatus.PENDING,
    )

    dev_notes = models.TextField(null=True, blank=True)
    qc_notes = models.TextField(null=True, blank=True)

    dev_start_time = models.DateTimeField(null=True, blank=True)
    dev_completed_time = models.DateTimeField(null=True, blank=True)
    qc_start_time = models.DateTimeField(null=True, blank=True)
    qc_completed_time = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=["status"], name="tasks_task_status_4a0a95_idx"),
            models.Index(fields=["developer", "status"], name="tasks_task_develop_6b1c2e_idx"),
            models.Index(fields=["created_at"], name="tasks_task_created_be2d8f_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(status__in=TaskStatus.values),
                name="task_status_valid",
            ),
            models.CheckConstraint(
                condition=models.Q(number_of_pages__gte=1),
                name="task_pages_at_least_one",
            ),
        ]
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.job_name} ({self.site_id})"
