from rest_framework import serializers

from apps.tasks import lifecycle
from apps.tasks.exceptions import TaskValidationError
from apps.tasks.models import Actor, Task, TaskStatus


class TaskSerializer(serializers.ModelSerializer):
    jobName = serializers.CharField(source="job_name", read_only=True)
    siteId = serializers.CharField(source="site_id", read_only=True)
    salesforceLink = serializers.CharField(source="salesforce_link", read_only=True)
    typeOfRequest = serializers.CharField(source="type_of_request", read_only=True)
    numberOfPages = serializers.IntegerField(source="number_of_pages", read_only=True)
    commentsRequired = serializers.BooleanField(source="comments_required", read_only=True)
    additionalComments = serializers.CharField(source="additional_comments", read_only=True)
    statusLabel = serializers.CharField(source="get_status_display", read_only=True)
    devNotes = serializers.CharField(source="dev_notes", read_only=True)
    qcNotes = serializers.CharField(source="qc_notes", read_only=True)
    devStartTime = serializers.DateTimeField(source="dev_start_time", read_only=True)
    devCompletedTime = serializers.DateTimeField(source="dev_completed_time", read_only=True)
    qcStartTime = serializers.DateTimeField(source="qc_start_time", read_only=True)
    qcCompletedTime = serializers.DateTimeField(source="qc_completed_time", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Task
        fields = [
            "id",
            "jobName",
            "siteId",
            "platform",
            "developer",
            "typeOfRequest",
            "numberOfPages",
            "salesforceLink",
            "commentsRequired",
            "comments",
            "additionalComments",
            "status",
            "statusLabel",
            "devNotes",
            "qcNotes",
            "devStartTime",
            "devCompletedTime",
            "qcStartTime",
            "qcCompletedTime",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = ["id", "platform", "developer", "comments", "status"]


class TaskCreateSerializer(serializers.Serializer):
    """
    Creation form. Field shapes are loose on purpose: the lifecycle engine
    decides what is required so every entry point reports the same errors.
    """

    jobName = serializers.CharField(source="job_name", required=False, allow_blank=True, allow_null=True)
    siteId = serializers.CharField(source="site_id", required=False, allow_blank=True, allow_null=True)
    platform = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    developer = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    typeOfRequest = serializers.CharField(
        source="type_of_request", required=False, allow_blank=True, allow_null=True
    )
    numberOfPages = serializers.IntegerField(source="number_of_pages", required=False, allow_null=True)
    salesforceLink = serializers.CharField(
        source="salesforce_link", required=False, allow_blank=True, allow_null=True
    )
    commentsRequired = serializers.BooleanField(source="comments_required", required=False, default=False)
    comments = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    additionalComments = serializers.CharField(
        source="additional_comments", required=False, allow_blank=True, allow_null=True
    )

    def validate(self, attrs):
        try:
            return lifecycle.validate_new_task(attrs)
        except TaskValidationError as e:
            wire_names = {field.source: name for name, field in self.fields.items()}
            raise serializers.ValidationError(
                {wire_names.get(field, field): [msg] for field, msg in e.errors.items()}
            )


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=TaskStatus.choices)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    actor = serializers.ChoiceField(choices=Actor.choices, required=False)
