from django.db import models

from apps.tasks.models import Task
from apps.tasks.queues import developer_queue


class Developer(models.Model):
    name = models.CharField(max_length=150, unique=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def open_tasks(self):
        """Tasks still sitting in this developer's queue."""
        return developer_queue(Task.objects.all(), self.name)
