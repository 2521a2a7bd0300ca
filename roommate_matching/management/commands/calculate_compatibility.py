from django.core.management.base import BaseCommand, CommandError
from django.contrib.auth import get_user_model
from roommate_matching.compatibility import compatibility_level
from roommate_matching.services import MatchingService
from roommate_matching.models import Match

User = get_user_model()


class Command(BaseCommand):
    help = 'Show top candidates for a user, recalculate stored match scores, or list the top matches'

    def add_arguments(self, parser):
        parser.add_argument(
            '--user-id',
            type=int,
            help='Show the best candidates for a specific user ID',
        )
        parser.add_argument(
            '--matches',
            action='store_true',
            help='Recalculate compatibility scores of stored matches',
        )
        parser.add_argument(
            '--limit',
            type=int,
            default=10,
            help='Number of candidates or matches to show',
        )

    def handle(self, *args, **options):
        matching_service = MatchingService()

        if options['user_id']:
            try:
                user = User.objects.get(id=options['user_id'])
            except User.DoesNotExist:
                raise CommandError(f"User {options['user_id']} does not exist")

            self.stdout.write(f"Processing user: {user.get_short_name()} ({user.email})")
            candidates = matching_service.get_discover_users(user, limit=options['limit'])
            for candidate in candidates:
                self.stdout.write(
                    f"  {user.get_short_name()} ↔ {candidate.user.get_short_name()}: "
                    f"{candidate.score:.1f}% ({compatibility_level(candidate.score)})"
                )
            self.stdout.write(f"Scored {len(candidates)} candidates")

        elif options['matches']:
            matches = Match.objects.filter(is_active=True)
            self.stdout.write(f"Recalculating {matches.count()} matches...")

            recalculated = matching_service.refresh_match_scores(matches)
            self.stdout.write(f"Recalculated {recalculated} compatibility scores")
        else:
            # Show existing scores
            matches = Match.objects.filter(
                compatibility_score__isnull=False
            ).select_related(
                'user1', 'user2'
            ).order_by('-compatibility_score')[:options['limit']]

            self.stdout.write(f"Top {options['limit']} matches by compatibility:")
            for match in matches:
                self.stdout.write(
                    f"  {match.user1.get_short_name()} ↔ {match.user2.get_short_name()}: "
                    f"{match.compatibility_score:.1f}% ({match.compatibility_level})"
                )

        self.stdout.write(self.style.SUCCESS('Done!'))
