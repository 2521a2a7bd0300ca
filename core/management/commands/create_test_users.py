import random

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from profiles.models import DEAL_BREAKER_CHOICES, SLEEP_SCHEDULE_EXAMPLES, UserProfile

User = get_user_model()

FIRST_NAMES = ['Alice', 'Bob', 'Carol', 'Alex', 'Sam', 'Jordan', 'Taylor', 'Morgan', 'Riley', 'Casey']
LOCATIONS = ['Boston', 'Cambridge', 'Somerville', 'Brookline', 'Back Bay, Boston', 'Allston']
OCCUPATIONS = ['Engineer', 'Student', 'Nurse', 'Designer', 'Barista', 'Researcher']
TAGS = ['yoga', 'reading', 'cooking', 'hiking', 'music', 'gaming', 'fitness', 'art', 'tech', 'travel']
BIOS = [
    "Love cats and coffee.",
    "Quiet during the week, up for a board game on weekends.",
    "Grad student looking for an easy-going place near campus.",
    "Early riser, tidy, happy to split chores fairly.",
    "Musician and night owl, respectful of shared spaces.",
]


class Command(BaseCommand):
    help = 'Create demo users with randomised roommate profiles'

    def add_arguments(self, parser):
        parser.add_argument('--count', type=int, default=5, help='Number of users to create (default: 5)')
        parser.add_argument('--seed', type=int, help='Random seed, for the same profiles on every run')
        parser.add_argument(
            '--email-prefix',
            default='testuser',
            help='Users get <prefix><n>@example.com addresses (default: testuser)',
        )

    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        created = 0

        for number in range(1, options['count'] + 1):
            email = f"{options['email_prefix']}{number}@example.com"
            if User.objects.filter(email=email).exists():
                self.stdout.write(self.style.WARNING(f'{email} already exists, skipping'))
                continue

            with transaction.atomic():
                first_name = rng.choice(FIRST_NAMES)
                user = User.objects.create_user(
                    email=email,
                    password='testpass123',
                    first_name=first_name,
                    last_name='Demo',
                )
                profile = UserProfile.objects.create(user=user, **self.random_profile(rng, first_name, number))

            created += 1
            self.stdout.write(
                f'{email}: {profile.display_name}, {profile.age}, {profile.location} '
                f'({profile.completion_percentage}% complete)'
            )

        if not created:
            self.stdout.write(self.style.WARNING('No new users were created'))
            return

        self.stdout.write(self.style.SUCCESS(f'Successfully created {created} test users'))
        self.stdout.write('All of them log in with the password "testpass123"')

    def random_profile(self, rng, first_name, number):
        budget_min = rng.randrange(600, 1400, 50)
        deal_breaker_keys = [key for key, _ in DEAL_BREAKER_CHOICES]
        return {
            'display_name': f'{first_name} {number}',
            'age': rng.randint(19, 40),
            'location': rng.choice(LOCATIONS),
            'occupation': rng.choice(OCCUPATIONS),
            'bio': rng.choice(BIOS),
            'cleanliness': rng.randint(1, 5),
            'social_level': rng.randint(1, 5),
            'sleep_schedule': rng.choice(SLEEP_SCHEDULE_EXAMPLES),
            'smoking': rng.random() < 0.2,
            'pets': rng.random() < 0.3,
            'deal_breakers': rng.sample(deal_breaker_keys, rng.randint(0, 2)),
            'budget_min': budget_min,
            'budget_max': budget_min + rng.randrange(200, 800, 50),
            'tags': rng.sample(TAGS, rng.randint(2, 5)),
        }
