from django.core.management.base import BaseCommand, CommandError

from apps.tasks import services
from apps.tasks.exceptions import TaskWorkflowError
from apps.tasks.models import Task, TaskStatus


class Command(BaseCommand):
    help = 'Close tasks that passed QC by moving them to "completed"'

    def add_arguments(self, parser):
        parser.add_argument('task_ids', nargs='*', help='Ids of the tasks to close')
        parser.add_argument(
            '--all-passed',
            action='store_true',
            help='Close every task currently in qc_passed'
        )

    def handle(self, *args, **options):
        task_ids = list(options['task_ids'])
        if options['all_passed']:
            task_ids += [
                str(pk) for pk in
                Task.objects.filter(status=TaskStatus.QC_PASSED).values_list('pk', flat=True)
            ]
        if not task_ids:
            raise CommandError('Give one or more task ids, or --all-passed')

        failures = 0
        for task_id in task_ids:
            try:
                task = services.mark_completed(task_id)
            except TaskWorkflowError as e:
                failures += 1
                self.stderr.write(self.style.ERROR(str(e)))
                continue
            self.stdout.write(f'Completed {task.pk} ({task.job_name})')

        if failures:
            raise CommandError(f'{failures} task(s) could not be completed')
        self.stdout.write(self.style.SUCCESS(f'{len(task_ids)} task(s) completed'))
