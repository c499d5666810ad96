from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.common.views import healthz, workflow_summary
from apps.developers.api.views import DeveloperViewSet
from apps.tasks.api.views import TaskViewSet

router = DefaultRouter()
router.register(r"tasks", TaskViewSet, basename="tasks")
router.register(r"developers", DeveloperViewSet, basename="developers")

urlpatterns = [
    path("healthz/", healthz),
    path(
        "api/",
        include([
            path("summary/", workflow_summary, name="workflow-summary"),
            path("", include(router.urls)),
        ])
    ),
]
