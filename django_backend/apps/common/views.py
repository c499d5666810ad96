from django.db.models import Count
from django.http import HttpResponse
from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.tasks.models import Task, TaskStatus


def healthz(_):
    return HttpResponse("ok", content_type="text/plain")


@api_view(["GET"])
def workflow_summary(request):
    """Task counts per status, every status listed even when empty."""
    counts = dict(
        Task.objects.order_by()
        .values("status")
        .annotate(n=Count("id"))
        .values_list("status", "n")
    )
    by_status = {s.value: counts.get(s.value, 0) for s in TaskStatus}
    return Response({"total": sum(by_status.values()), "byStatus": by_status})
