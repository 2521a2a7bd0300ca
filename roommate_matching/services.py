from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional
import logging
import time

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Avg, Q
from django.utils import timezone

from notifications.services import NotificationService
from profiles.models import UserProfile
from .compatibility import CompatibilityCalculator, CompatibilityResult, ProfileSnapshot, compatibility_flags
from .models import Match, MatchingActivity, Swipe

User = get_user_model()
logger = logging.getLogger(__name__)


class MatchingError(Exception):
    """Base error for matching operations"""


class InvalidSwipeError(MatchingError):
    """Raised for swipes that can't be recorded"""


@dataclass
class SwipeOutcome:
    swipe: Swipe
    match: Optional[Match] = None
    is_new_match: bool = False


@dataclass
class RankedCandidate:
    user: User
    result: CompatibilityResult

    @property
    def score(self) -> float:
        return self.result.score


def _matching_setting(name: str) -> int:
    return settings.ROOMO_MATCHING[name]


class MatchingService:
    """Service for recording swipes, detecting matches and ranking candidates"""

    def __init__(self, notification_service: Optional[NotificationService] = None):
        self.calculator = CompatibilityCalculator()
        self.notification_service = notification_service or NotificationService()

    def get_profile_snapshot(self, user: User) -> Optional[ProfileSnapshot]:
        try:
            profile = user.profile
        except UserProfile.DoesNotExist:
            return None
        return profile.to_snapshot()

    def calculate_compatibility(self, user1: User, user2: User) -> CompatibilityResult:
        """Score two users' current profiles; 0 if either has no profile"""
        return self.calculator.calculate_breakdown(
            self.get_profile_snapshot(user1),
            self.get_profile_snapshot(user2)
        )

    def record_swipe(self, swiper: User, swiped: User, action: str) -> SwipeOutcome:
        """
        Store a like or pass and create a match on a mutual like.

        A repeated swipe on the same user replaces the earlier action. When
        the swipe is a like and ``swiped`` already likes ``swiper``, a Match
        is created, scored once and both users are notified. An existing
        match is returned as-is and never re-scored here.
        """
        if action not in (Swipe.LIKE, Swipe.PASS):
            raise InvalidSwipeError(f"Invalid action '{action}'. Must be 'like' or 'pass'")
        if swiper.id == swiped.id:
            raise InvalidSwipeError("Users cannot swipe on themselves")
        if not swiped.is_active:
            raise InvalidSwipeError("This user is no longer available")

        with transaction.atomic():
            # Serialize swipes within a pair: the second of two concurrent
            # likes waits here and then sees the first one committed
            list(
                User.objects.select_for_update().filter(
                    id__in=[swiper.id, swiped.id]
                ).order_by('id').values_list('id', flat=True)
            )

            swipe, _ = Swipe.objects.update_or_create(
                swiper=swiper,
                swiped=swiped,
                defaults={'action': action}
            )
            logger.debug(f"User {swiper.id} swiped {action} on user {swiped.id}")

            if action != Swipe.LIKE:
                return SwipeOutcome(swipe=swipe)

            reverse_like = Swipe.objects.select_for_update().filter(
                swiper=swiped,
                swiped=swiper,
                action=Swipe.LIKE
            ).first()
            if reverse_like is None:
                return SwipeOutcome(swipe=swipe)

            user1, user2 = Match.ordered_pair(swiper, swiped)
            match, created = Match.objects.get_or_create(user1=user1, user2=user2)
            if not created:
                return SwipeOutcome(swipe=swipe, match=match)

            logger.info(f"Match {match.id} created between users {user1.id} and {user2.id}")
            self._score_match(match, activity_type='match_created')

            score = float(match.compatibility_score) if match.compatibility_score is not None else None
            self.notification_service.create_match_notification(swiper, swiped, score)
            self.notification_service.create_match_notification(swiped, swiper, score)

        return SwipeOutcome(swipe=swipe, match=match, is_new_match=True)

    def refresh_match_score(self, match: Match) -> Match:
        """Recompute a match's score from the users' current profiles"""
        with transaction.atomic():
            self._score_match(match, activity_type='score_calculation')
        return match

    def refresh_match_scores(self, matches=None) -> int:
        """Re-score the given matches (all active ones by default); returns how many were processed"""
        if matches is None:
            matches = Match.objects.filter(is_active=True)
        start_time = time.time()

        processed = 0
        failed = 0
        for match in matches.select_related('user1__profile', 'user2__profile'):
            with transaction.atomic():
                if not self._score_match(match, activity_type='score_calculation'):
                    failed += 1
            processed += 1

        MatchingActivity.objects.create(
            activity_type='batch_processing',
            details={'matches_processed': processed, 'failures': failed},
            execution_time_ms=int((time.time() - start_time) * 1000),
            scores_calculated=processed - failed,
            success=failed == 0
        )
        logger.info(f"Recalculated {processed} match scores ({failed} failed)")
        return processed

    def deactivate_match(self, match: Match) -> bool:
        """End an active match and tell both users; False if it was already inactive"""
        with transaction.atomic():
            updated = Match.objects.filter(id=match.id, is_active=True).update(is_active=False)
            match.is_active = False
            if not updated:
                return False

            for user, other in ((match.user1, match.user2), (match.user2, match.user1)):
                self.notification_service.create_system_notification(
                    user,
                    'Match ended',
                    f"Your match with {other.display_name} is no longer active.",
                    action_url='/matches',
                )

        logger.info(f"Match {match.id} deactivated")
        return True

    def _score_match(self, match: Match, activity_type: str) -> bool:
        start_time = time.time()

        try:
            with transaction.atomic():
                result = self.calculate_compatibility(match.user1, match.user2)

                match.compatibility_score = Decimal(str(result.score))
                match.score_breakdown = {
                    **result.to_dict(),
                    **compatibility_flags(result),
                }
                match.score_calculated_at = timezone.now()
                match.save(update_fields=['compatibility_score', 'score_breakdown', 'score_calculated_at'])

                MatchingActivity.objects.create(
                    activity_type=activity_type,
                    user=match.user1,
                    details={
                        'match_id': match.id,
                        'user1_id': match.user1_id,
                        'user2_id': match.user2_id,
                        'overall_score': result.score,
                    },
                    execution_time_ms=int((time.time() - start_time) * 1000),
                    scores_calculated=1,
                    success=True
                )
            return True
        except Exception as e:
            # Keep the match; it stays unscored until recalculated
            logger.error(f"Error calculating compatibility for match {match.id}: {str(e)}")
            match.refresh_from_db(fields=['compatibility_score', 'score_breakdown', 'score_calculated_at'])

            MatchingActivity.objects.create(
                activity_type=activity_type,
                user=match.user1,
                details={
                    'match_id': match.id,
                    'user1_id': match.user1_id,
                    'user2_id': match.user2_id,
                    'error': str(e)
                },
                execution_time_ms=int((time.time() - start_time) * 1000),
                success=False,
                error_message=str(e)
            )
            return False

    def _candidate_queryset(self, user: User):
        # Staff accounts run the platform and are never offered as roommates
        return User.objects.filter(
            is_active=True,
            is_staff=False,
            profile__is_active=True
        ).exclude(
            id=user.id
        ).select_related('profile').order_by('-profile__updated_at', 'id')

    def _rank(self, user: User, candidates, limit: int) -> List[RankedCandidate]:
        user_snapshot = self.get_profile_snapshot(user)

        # Only the most recently updated profiles are scored; see SCORING_POOL
        ranked = [
            RankedCandidate(
                user=candidate,
                result=self.calculator.calculate_breakdown(user_snapshot, candidate.profile.to_snapshot())
            )
            for candidate in candidates[:_matching_setting('SCORING_POOL')]
        ]
        ranked.sort(key=lambda item: (-item.score, item.user.id))
        return ranked[:limit]

    def get_swipe_candidates(self, user: User, limit: Optional[int] = None) -> List[RankedCandidate]:
        """Users not yet swiped on, best compatibility first"""
        already_swiped = Swipe.objects.filter(swiper=user).values_list('swiped_id', flat=True)
        candidates = self._candidate_queryset(user).exclude(id__in=already_swiped)
        return self._rank(user, candidates, limit or _matching_setting('CANDIDATE_LIMIT'))

    def get_discover_users(self, user: User, limit: Optional[int] = None) -> List[RankedCandidate]:
        """Every other active profile, best compatibility first"""
        return self._rank(user, self._candidate_queryset(user), limit or _matching_setting('DISCOVER_LIMIT'))

    def get_user_matches(self, user: User) -> List[Match]:
        return list(
            Match.objects.filter(
                Q(user1=user) | Q(user2=user),
                is_active=True
            ).select_related(
                'user1__profile', 'user2__profile'
            ).order_by('-created_at', '-id')
        )

    def get_user_stats(self, user: User) -> Dict:
        return {
            'likes_given': Swipe.objects.filter(swiper=user, action=Swipe.LIKE).count(),
            'passes_given': Swipe.objects.filter(swiper=user, action=Swipe.PASS).count(),
            'likes_received': Swipe.objects.filter(swiped=user, action=Swipe.LIKE).count(),
            'matches': Match.objects.filter(Q(user1=user) | Q(user2=user), is_active=True).count(),
            'unread_notifications': self.notification_service.get_unread_count(user),
        }

    def get_admin_stats(self) -> Dict:
        average = Match.objects.filter(
            compatibility_score__isnull=False
        ).aggregate(avg=Avg('compatibility_score'))['avg']

        return {
            'total_users': User.objects.filter(is_staff=False).count(),
            'active_users': User.objects.filter(is_staff=False, is_active=True).count(),
            'active_profiles': UserProfile.objects.filter(is_active=True).count(),
            'completed_profiles': User.objects.filter(profile_completed=True).count(),
            'total_swipes': Swipe.objects.count(),
            'total_likes': Swipe.objects.filter(action=Swipe.LIKE).count(),
            'total_matches': Match.objects.count(),
            'active_matches': Match.objects.filter(is_active=True).count(),
            'average_compatibility': round(float(average), 2) if average is not None else None,
        }
