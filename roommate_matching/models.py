from django.db import models
from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db.models import Q, F
from django.utils import timezone

from .compatibility import compatibility_level

User = get_user_model()


class Swipe(models.Model):
    """A like or pass from one user toward another"""

    LIKE = 'like'
    PASS = 'pass'
    ACTIONS = [
        (LIKE, 'Like'),
        (PASS, 'Pass'),
    ]

    swiper = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='swipes_given'
    )
    swiped = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='swipes_received'
    )
    action = models.CharField(max_length=10, choices=ACTIONS)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'roommate_matching_swipe'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['swiper', 'swiped'], name='unique_swipe_per_pair'),
            models.CheckConstraint(condition=~Q(swiper=F('swiped')), name='swipe_not_self'),
        ]
        indexes = [
            models.Index(fields=['swiped', 'action'], name='swipe_swiped_action_idx'),
        ]

    def __str__(self):
        return f"{self.swiper.get_short_name()} -> {self.swiped.get_short_name()}: {self.get_action_display()}"

    @property
    def is_like(self):
        return self.action == self.LIKE


class Match(models.Model):
    """Created when two users have liked each other"""

    # user1 always holds the lower id so a pair has exactly one row
    user1 = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='matches_as_user1'
    )
    user2 = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='matches_as_user2'
    )

    compatibility_score = models.DecimalField(
        max_digits=5, decimal_places=2,
        null=True, blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text="Compatibility score from 0-100 at the time of matching"
    )
    score_breakdown = models.JSONField(default=dict, blank=True, help_text="Per-factor score breakdown")
    score_calculated_at = models.DateTimeField(null=True, blank=True)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'roommate_matching_match'
        verbose_name_plural = 'Matches'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['user1', 'user2'], name='unique_match_per_pair'),
        ]
        indexes = [
            models.Index(fields=['user1', 'is_active'], name='match_user1_active_idx'),
            models.Index(fields=['user2', 'is_active'], name='match_user2_active_idx'),
        ]

    def __str__(self):
        score = f"{self.compatibility_score:.1f}%" if self.compatibility_score is not None else "unscored"
        return f"{self.user1.get_short_name()} & {self.user2.get_short_name()}: {score}"

    @staticmethod
    def ordered_pair(user_a, user_b):
        return (user_a, user_b) if user_a.id < user_b.id else (user_b, user_a)

    @classmethod
    def between(cls, user_a, user_b):
        user1, user2 = cls.ordered_pair(user_a, user_b)
        return cls.objects.filter(user1=user1, user2=user2).first()

    def other_user(self, user):
        return self.user2 if user.id == self.user1_id else self.user1

    @property
    def compatibility_level(self):
        """Return compatibility level as string"""
        if self.compatibility_score is None:
            return compatibility_level(None)
        return compatibility_level(float(self.compatibility_score))


class MatchingActivity(models.Model):
    """Track matching algorithm activity and performance"""

    ACTIVITY_TYPES = [
        ('score_calculation', 'Score Calculation'),
        ('match_created', 'Match Created'),
        ('batch_processing', 'Batch Processing'),
    ]

    activity_type = models.CharField(max_length=30, choices=ACTIVITY_TYPES)
    user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='matching_activities'
    )

    # Activity details
    details = models.JSONField(default=dict)
    success = models.BooleanField(default=True)
    error_message = models.TextField(blank=True)

    # Performance metrics
    execution_time_ms = models.PositiveIntegerField(null=True, blank=True)
    scores_calculated = models.PositiveIntegerField(default=0)

    # Metadata
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'roommate_matching_matchingactivity'
        verbose_name_plural = 'Matching activities'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['activity_type', 'created_at'], name='activity_type_created_idx'),
            models.Index(fields=['user', 'created_at'], name='activity_user_created_idx'),
        ]

    def __str__(self):
        return f"{self.get_activity_type_display()} - {self.created_at.strftime('%Y-%m-%d %H:%M')}"
