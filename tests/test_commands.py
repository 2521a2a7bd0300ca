from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from profiles.models import UserProfile
from roommate_matching.models import Match, MatchingActivity


def test_create_test_users(db):
    out = StringIO()

    call_command('create_test_users', count=3, seed=1, stdout=out)

    assert UserProfile.objects.count() == 3
    for profile in UserProfile.objects.all():
        assert profile.budget_min < profile.budget_max
        assert 1 <= profile.cleanliness <= 5
        assert set(profile.deal_breakers) <= {'smoking', 'pets', 'parties'}
    assert 'Successfully created 3 test users' in out.getvalue()


def test_create_test_users_skips_existing(db):
    call_command('create_test_users', count=2, seed=1, stdout=StringIO())
    out = StringIO()

    call_command('create_test_users', count=2, seed=1, stdout=out)

    assert UserProfile.objects.count() == 2
    assert 'No new users were created' in out.getvalue()


def test_calculate_compatibility_for_user(perfect_pair):
    user_a, _ = perfect_pair
    out = StringIO()

    call_command('calculate_compatibility', user_id=user_a.id, stdout=out)

    assert '100.0% (Excellent)' in out.getvalue()
    assert 'Scored 1 candidates' in out.getvalue()


def test_calculate_compatibility_unknown_user(db):
    with pytest.raises(CommandError):
        call_command('calculate_compatibility', user_id=999999, stdout=StringIO())


def test_calculate_compatibility_refreshes_matches(perfect_pair):
    user_a, user_b = perfect_pair
    match = Match.objects.create(user1=user_a, user2=user_b)
    out = StringIO()

    call_command('calculate_compatibility', matches=True, stdout=out)

    match.refresh_from_db()
    assert match.compatibility_score == 100
    assert MatchingActivity.objects.filter(activity_type='score_calculation', success=True).count() == 1
    batch = MatchingActivity.objects.get(activity_type='batch_processing')
    assert batch.details == {'matches_processed': 1, 'failures': 0}
    assert 'Recalculated 1 compatibility scores' in out.getvalue()


def test_calculate_compatibility_lists_top_matches(perfect_pair):
    user_a, user_b = perfect_pair
    Match.objects.create(user1=user_a, user2=user_b, compatibility_score=87.5)
    out = StringIO()

    call_command('calculate_compatibility', stdout=out)

    assert '87.5% (Very Good)' in out.getvalue()
