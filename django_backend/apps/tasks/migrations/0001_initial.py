import uuid

import django.core.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Task',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('job_name', models.CharField(max_length=200)),
                ('site_id', models.CharField(max_length=100)),
                ('salesforce_link', models.CharField(max_length=500)),
                ('platform', models.CharField(choices=[('WP', 'WordPress'), ('DUDA', 'DUDA')], max_length=8)),
                ('developer', models.CharField(max_length=150)),
                ('type_of_request', models.CharField(choices=[('Full Redesign', 'Full Redesign'), ('Content Update', 'Content Update'), ('New Feature', 'New Feature'), ('Bug Fix', 'Bug Fix'), ('SEO Optimization', 'SEO Optimization'), ('Performance Optimization', 'Performance Optimization')], max_length=64)),
                ('number_of_pages', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('comments_required', models.BooleanField(default=False)),
                ('comments', models.TextField(blank=True, null=True)),
                ('additional_comments', models.TextField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('in_progress', 'In Progress'), ('dev_complete', 'Dev Complete'), ('in_qc', 'In QC'), ('qc_passed', 'QC Passed'), ('qc_failed', 'QC Failed'), ('completed', 'Completed')], default='pending', max_length=32)),
                ('dev_notes', models.TextField(blank=True, null=True)),
                ('qc_notes', models.TextField(blank=True, null=True)),
                ('dev_start_time', models.DateTimeField(blank=True, null=True)),
                ('dev_completed_time', models.DateTimeField(blank=True, null=True)),
                ('qc_start_time', models.DateTimeField(blank=True, null=True)),
                ('qc_completed_time', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='tasks_task_status_4a0a95_idx'),
                    models.Index(fields=['developer', 'status'], name='tasks_task_develop_6b1c2e_idx'),
                    models.Index(fields=['created_at'], name='tasks_task_created_be2d8f_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('status__in', ['pending', 'in_progress', 'dev_complete', 'in_qc', 'qc_passed', 'qc_failed', 'completed'])), name='task_status_valid'),
                    models.CheckConstraint(condition=models.Q(('number_of_pages__gte', 1)), name='task_pages_at_least_one'),
                ],
            },
        ),
    ]
