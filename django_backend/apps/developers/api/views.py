from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.developers.models import Developer
from apps.tasks.api.serializers import TaskSerializer
from .serializers import DeveloperSerializer


class DeveloperViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = Developer.objects.filter(is_active=True).order_by("name")
    serializer_class = DeveloperSerializer

    @action(detail=True, methods=["get"])
    def tasks(self, request, pk=None):
        developer = self.get_object()
        return Response(TaskSerializer(developer.open_tasks(), many=True).data)
