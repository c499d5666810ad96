from django.core.management.base import BaseCommand
from django.utils import timezone
from apps.developers.models import Developer
from apps.tasks import services
from apps.tasks.models import Actor, Platform, RequestType, TaskStatus
import random
from datetime import timedelta

DEVELOPER_NAMES = [
    'John Doe', 'Jane Smith', 'Alice Johnson', 'Bob Williams', 'Diana Garcia',
    'Frank Miller', 'Grace Davis', 'Henry Martinez', 'Ivy Wilson', 'Liam Moore',
]

SITE_WORDS = [
    'Acme', 'Blue Ridge', 'Cedar', 'Harbor', 'Maple', 'Northwind', 'Oakwood',
    'Pinecrest', 'Riverside', 'Summit',
]

# Status paths walked from pending; each step is (target, actor, note).
WORKFLOW_PATHS = [
    [],
    [(TaskStatus.IN_PROGRESS, Actor.DEVELOPER, None)],
    [
        (TaskStatus.IN_PROGRESS, Actor.DEVELOPER, None),
        (TaskStatus.DEV_COMPLETE, Actor.DEVELOPER, 'Ready for review'),
    ],
    [
        (TaskStatus.IN_PROGRESS, Actor.DEVELOPER, None),
        (TaskStatus.DEV_COMPLETE, Actor.DEVELOPER, 'All pages built'),
        (TaskStatus.IN_QC, Actor.QC, None),
    ],
    [
        (TaskStatus.IN_PROGRESS, Actor.DEVELOPER, None),
        (TaskStatus.DEV_COMPLETE, Actor.DEVELOPER, 'Done, mobile checked'),
        (TaskStatus.IN_QC, Actor.QC, None),
        (TaskStatus.QC_PASSED, Actor.QC, 'Looks good'),
    ],
    [
        (TaskStatus.IN_PROGRESS, Actor.DEVELOPER, None),
        (TaskStatus.DEV_COMPLETE, Actor.DEVELOPER, None),
        (TaskStatus.IN_QC, Actor.QC, None),
        (TaskStatus.QC_FAILED, Actor.QC, 'Footer links broken'),
    ],
    [
        (TaskStatus.IN_PROGRESS, Actor.DEVELOPER, None),
        (TaskStatus.DEV_COMPLETE, Actor.DEVELOPER, None),
        (TaskStatus.IN_QC, Actor.QC, None),
        (TaskStatus.QC_FAILED, Actor.QC, 'Missing contact form'),
        (TaskStatus.DEV_COMPLETE, Actor.DEVELOPER, 'Contact form added'),
    ],
]


class Command(BaseCommand):
    help = 'Seed the database with sample developers and tasks'

    def add_arguments(self, parser):
        parser.add_argument(
            '--developers',
            type=int,
            default=5,
            help='Number of developers to create'
        )
        parser.add_argument(
            '--tasks',
            type=int,
            default=30,
            help='Number of tasks to create'
        )
        parser.add_argument(
            '--random-seed',
            type=int,
            default=None,
            help='Seed for the random generator, for repeatable data'
        )

    def handle(self, *args, **options):
        if options['random_seed'] is not None:
            random.seed(options['random_seed'])

        self.stdout.write('Starting database seeding...')

        developers = self.create_developers(options['developers'])
        tasks = self.create_tasks(developers, options['tasks'])

        by_status = {}
        for task in tasks:
            by_status[task.status] = by_status.get(task.status, 0) + 1

        self.stdout.write(
            self.style.SUCCESS(
                f'\nSeed data created successfully!\n'
                f'Developers: {len(developers)}\n'
                f'Tasks: {len(tasks)}\n' +
                '\n'.join(f'- {status}: {n}' for status, n in sorted(by_status.items()))
            )
        )

    def create_developers(self, num_developers):
        self.stdout.write('Creating developers...')

        developers = []
        for name in DEVELOPER_NAMES[:max(1, min(num_developers, len(DEVELOPER_NAMES)))]:
            developer, created = Developer.objects.get_or_create(name=name)
            if created:
                self.stdout.write(f'Created developer: {developer.name}')
            developers.append(developer)
        return developers

    def create_tasks(self, developers, num_tasks):
        self.stdout.write('Creating tasks...')

        tasks = []
        for i in range(num_tasks):
            now = timezone.now()
            started = now - timedelta(days=random.randint(1, 30))
            comments_required = random.random() > 0.7
            site = random.choice(SITE_WORDS)

            task = services.create_task(
                {
                    'job_name': f'{site} Site {i + 1}',
                    'site_id': f'S{1000 + i}',
                    'platform': random.choice(Platform.values),
                    'developer': random.choice(developers).name,
                    'type_of_request': random.choice(RequestType.values),
                    'number_of_pages': random.randint(1, 25),
                    'salesforce_link': f'https://salesforce.example.com/opp/{1000 + i}',
                    'comments_required': comments_required,
                    'comments': 'Client wants the new brand colours' if comments_required else None,
                },
                now=started,
            )

            moment = started
            for target, actor, note in random.choice(WORKFLOW_PATHS):
                moment = min(moment + timedelta(hours=random.randint(1, 48)), now)
                task = services.update_task_status(task.pk, target, note=note, actor=actor, now=moment)

            tasks.append(task)
        return tasks
