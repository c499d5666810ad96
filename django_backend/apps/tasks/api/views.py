from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.response import Response

from apps.tasks import queues, services
from .serializers import StatusUpdateSerializer, TaskCreateSerializer, TaskSerializer


class TaskViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = TaskSerializer
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_fields = ["status", "platform", "developer", "type_of_request"]
    search_fields = ["job_name", "site_id"]
    ordering_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]

    def get_queryset(self):
        return services.list_tasks()

    def get_object(self):
        return services.get_task(self.kwargs["pk"])

    def create(self, request, *args, **kwargs):
        form = TaskCreateSerializer(data=request.data)
        form.is_valid(raise_exception=True)
        task = services.create_task(form.validated_data)
        return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="status")
    def update_status(self, request, pk=None):
        ser = StatusUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        task = services.update_task_status(
            pk,
            ser.validated_data["status"],
            note=ser.validated_data.get("notes"),
            actor=ser.validated_data.get("actor"),
        )
        return Response(TaskSerializer(task).data)

    @action(detail=False, methods=["get"], url_path="developer-queue")
    def developer_queue(self, request):
        developer = (request.query_params.get("developer") or "").strip()
        if not developer:
            raise ValidationError({"developer": ["This query parameter is required."]})
        qs = queues.developer_queue(self.get_queryset(), developer)
        return Response(TaskSerializer(qs, many=True).data)

    @action(detail=False, methods=["get"], url_path="qc-queue")
    def qc_queue(self, request):
        qs = queues.qc_queue(self.get_queryset())
        return Response(TaskSerializer(qs, many=True).data)
