from django.db import models
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from django.utils import timezone

from roommate_matching.compatibility import ProfileSnapshot

User = get_user_model()

DEAL_BREAKER_CHOICES = [
    ('smoking', 'Smoking'),
    ('pets', 'Pets'),
    ('parties', 'Parties'),
]

SLEEP_SCHEDULE_EXAMPLES = ['22:00-07:00', '00:00-08:00', 'early_bird', 'night_owl', 'flexible']


class UserProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='profile')

    # Basic information
    display_name = models.CharField(max_length=100, blank=True)
    age = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(16), MaxValueValidator(120)]
    )
    location = models.CharField(max_length=120, blank=True, help_text="Neighbourhood or city")
    occupation = models.CharField(max_length=100, blank=True)
    bio = models.TextField(max_length=1000, blank=True, help_text="Tell others about yourself")
    profile_image_url = models.URLField(blank=True)

    # Lifestyle
    cleanliness = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="1 = Relaxed, 5 = Spotless"
    )
    social_level = models.PositiveSmallIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="1 = Very private, 5 = Very social"
    )
    sleep_schedule = models.CharField(
        max_length=50, blank=True,
        help_text="Usual sleep window, e.g. 22:00-07:00"
    )
    smoking = models.BooleanField(null=True, blank=True)
    pets = models.BooleanField(null=True, blank=True)

    # Roommate preferences
    deal_breakers = models.JSONField(
        default=list, blank=True,
        help_text="Traits that rule a roommate out: smoking, pets, parties"
    )
    budget_min = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    budget_max = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    tags = models.JSONField(default=list, blank=True, help_text="Interest and lifestyle labels")

    # Status
    is_active = models.BooleanField(default=True)

    # Metadata
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'profiles_userprofile'
        verbose_name = 'User Profile'
        verbose_name_plural = 'User Profiles'

    def __str__(self):
        return f"{self.user.get_full_name() or self.user.email}'s Profile"

    def clean(self):
        errors = {}

        if self.budget_min is not None and self.budget_max is not None and self.budget_min > self.budget_max:
            errors['budget_max'] = 'Maximum budget must not be lower than the minimum budget.'

        known = {choice for choice, _ in DEAL_BREAKER_CHOICES}
        if not isinstance(self.deal_breakers, list) or any(
            not isinstance(item, str) or item.lower() not in known for item in self.deal_breakers
        ):
            errors['deal_breakers'] = f"Deal breakers must be a list drawn from: {', '.join(sorted(known))}."

        if not isinstance(self.tags, list) or any(not isinstance(tag, str) for tag in self.tags):
            errors['tags'] = 'Tags must be a list of strings.'

        if errors:
            raise ValidationError(errors)

    @property
    def budget_range(self):
        if self.budget_min is not None and self.budget_max is not None:
            return (self.budget_min, self.budget_max)
        return None

    @property
    def has_lifestyle(self):
        return any(
            value not in (None, '') for value in (
                self.cleanliness, self.social_level, self.sleep_schedule, self.smoking, self.pets
            )
        )

    @property
    def is_complete(self):
        """Check if profile has the fields matching relies on"""
        required_fields = ['age', 'location', 'cleanliness', 'social_level', 'budget_min', 'budget_max']
        return all(getattr(self, field) not in (None, '') for field in required_fields)

    @property
    def completion_percentage(self):
        """Calculate profile completion percentage"""
        fields_to_check = [
            'display_name', 'age', 'location', 'occupation', 'bio', 'profile_image_url',
            'cleanliness', 'social_level', 'sleep_schedule', 'budget_min', 'budget_max', 'tags'
        ]

        completed_fields = 0
        for field in fields_to_check:
            value = getattr(self, field)
            if isinstance(value, list):
                if value:
                    completed_fields += 1
            elif value not in (None, ''):
                completed_fields += 1

        return round((completed_fields / len(fields_to_check)) * 100)

    def as_profile_data(self):
        """Profile fields in the shape the compatibility scorer reads"""
        return {
            'age': self.age,
            'location': self.location,
            'lifestyle': {
                'cleanliness': self.cleanliness,
                'social_level': self.social_level,
                'sleep_schedule': self.sleep_schedule,
                'smoking': self.smoking,
                'pets': self.pets,
            },
            'deal_breakers': list(self.deal_breakers or []),
            'budget_range': [self.budget_min, self.budget_max] if self.budget_range else None,
            'tags': list(self.tags or []),
        }

    def to_snapshot(self):
        return ProfileSnapshot.from_mapping(self.as_profile_data())

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        # Keep the user's profile_completed flag in step with the profile
        if self.is_complete != self.user.profile_completed:
            self.user.profile_completed = self.is_complete
            self.user.save(update_fields=['profile_completed'])
