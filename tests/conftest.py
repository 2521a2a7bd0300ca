import itertools

import pytest
from django.contrib.auth import get_user_model

from profiles.models import UserProfile

User = get_user_model()

PERFECT_PROFILE = {
    'age': 25,
    'location': 'Boston',
    'cleanliness': 4,
    'social_level': 3,
    'sleep_schedule': '22:00-07:00',
    'budget_min': 1000,
    'budget_max': 1500,
    'tags': ['yoga', 'reading'],
}


@pytest.fixture
def perfect_profile_data():
    return {
        'age': 25,
        'location': 'Boston',
        'lifestyle': {'cleanliness': 4, 'socialLevel': 3, 'sleepSchedule': '22:00-07:00'},
        'budgetRange': [1000, 1500],
        'tags': ['yoga', 'reading'],
    }


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make_user(first_name='User', profile=True, is_staff=False, **profile_fields):
        number = next(counter)
        user = User.objects.create_user(
            email=f'user{number}@example.com',
            password='testpass123',
            first_name=f'{first_name}{number}',
            is_staff=is_staff,
        )
        if profile:
            UserProfile.objects.create(user=user, **profile_fields)
        return user

    return _make_user


@pytest.fixture
def perfect_pair(make_user):
    return make_user('Alex', **PERFECT_PROFILE), make_user('Sam', **PERFECT_PROFILE)
