import json

import pytest
from django.urls import reverse

from roommate_matching.models import Match, Swipe
from tests.conftest import PERFECT_PROFILE


def _post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type='application/json')


@pytest.fixture
def logged_in_pair(client, perfect_pair):
    user_a, user_b = perfect_pair
    client.force_login(user_a)
    return user_a, user_b


def test_endpoints_require_login(client, db):
    response = client.get(reverse('matching:swipe_candidates'))

    assert response.status_code == 302


def test_swipe_like_without_match(client, logged_in_pair):
    user_a, user_b = logged_in_pair

    response = _post_json(client, reverse('matching:swipe'), {'swiped_id': user_b.id, 'action': 'like'})

    assert response.status_code == 200
    data = response.json()
    assert data['swipe']['action'] == 'like'
    assert data['match'] is None
    assert data['is_new_match'] is False


def test_mutual_swipe_reports_new_match(client, logged_in_pair):
    user_a, user_b = logged_in_pair
    Swipe.objects.create(swiper=user_b, swiped=user_a, action=Swipe.LIKE)

    response = _post_json(client, reverse('matching:swipe'), {'swiped_id': user_b.id, 'action': 'like'})

    data = response.json()
    assert data['is_new_match'] is True
    assert data['match']['user']['id'] == user_b.id
    assert data['match']['compatibility_score'] == 100.0
    assert data['match']['compatibility_level'] == 'Excellent'


def test_swipe_accepts_form_data(client, logged_in_pair):
    user_a, user_b = logged_in_pair

    response = client.post(reverse('matching:swipe'), {'swiped_id': str(user_b.id), 'action': 'pass'})

    assert response.status_code == 200
    assert Swipe.objects.get(swiper=user_a).action == 'pass'


@pytest.mark.parametrize('payload', [
    {'action': 'like'},
    {'swiped_id': 2},
    {'swiped_id': 'abc', 'action': 'like'},
])
def test_swipe_rejects_incomplete_payload(client, logged_in_pair, payload):
    response = _post_json(client, reverse('matching:swipe'), payload)

    assert response.status_code == 400
    assert Swipe.objects.count() == 0


def test_swipe_rejects_invalid_json(client, logged_in_pair):
    response = client.post(reverse('matching:swipe'), data='{not json', content_type='application/json')

    assert response.status_code == 400
    assert response.json()['error'] == 'Invalid JSON body'


def test_swipe_rejects_invalid_action(client, logged_in_pair):
    user_a, user_b = logged_in_pair

    response = _post_json(client, reverse('matching:swipe'), {'swiped_id': user_b.id, 'action': 'maybe'})

    assert response.status_code == 400
    assert 'Invalid action' in response.json()['error']


def test_swipe_on_self_is_rejected(client, logged_in_pair):
    user_a, _ = logged_in_pair

    response = _post_json(client, reverse('matching:swipe'), {'swiped_id': user_a.id, 'action': 'like'})

    assert response.status_code == 400


def test_swipe_unknown_user_is_not_found(client, logged_in_pair):
    response = _post_json(client, reverse('matching:swipe'), {'swiped_id': 999999, 'action': 'like'})

    assert response.status_code == 404


def test_swipe_requires_post(client, logged_in_pair):
    assert client.get(reverse('matching:swipe')).status_code == 405


def test_swipe_candidates_lists_unswiped_profiles(client, logged_in_pair, make_user):
    user_a, user_b = logged_in_pair
    user_c = make_user(**PERFECT_PROFILE)
    Swipe.objects.create(swiper=user_a, swiped=user_c, action=Swipe.PASS)

    data = client.get(reverse('matching:swipe_candidates')).json()

    assert data['total_count'] == 1
    candidate = data['candidates'][0]
    assert candidate['id'] == user_b.id
    assert candidate['compatibility_score'] == 100.0
    assert candidate['profile']['budget_range'] == [1000.0, 1500.0]
    assert candidate['profile']['lifestyle']['social_level'] == 3


def test_candidate_without_lifestyle_reports_none(client, logged_in_pair, make_user):
    user_a, user_b = logged_in_pair
    Swipe.objects.create(swiper=user_a, swiped=user_b, action=Swipe.PASS)
    make_user(age=25, location='Boston')

    data = client.get(reverse('matching:swipe_candidates')).json()

    assert data['candidates'][0]['profile']['lifestyle'] is None
    assert data['candidates'][0]['profile']['age'] == 25


def test_discover_rounds_scores(client, logged_in_pair, make_user):
    make_user(**dict(PERFECT_PROFILE, tags=['yoga', 'hiking']))

    data = client.get(reverse('matching:discover_users')).json()

    # tags 3.33 of 10 leave 93.33 overall
    assert [user['compatibility_score'] for user in data['users']] == [100, 93]


def test_my_matches(client, logged_in_pair):
    user_a, user_b = logged_in_pair
    Match.objects.create(user1=user_a, user2=user_b)

    data = client.get(reverse('matching:my_matches')).json()

    assert data['total_count'] == 1
    assert data['matches'][0]['user']['id'] == user_b.id
    assert data['matches'][0]['compatibility_score'] is None
    assert data['matches'][0]['compatibility_level'] == 'Unknown'


def test_compatibility_detail(client, logged_in_pair):
    _, user_b = logged_in_pair

    data = client.get(reverse('matching:compatibility_detail', args=[user_b.id])).json()

    assert data['overall_score'] == 100.0
    assert data['compatibility_level'] == 'Excellent'
    assert data['breakdown']['factors']['budget'] == 15.0
    assert 'Compatible budgets' in data['green_flags']
    assert data['red_flags'] == []
    assert data['match'] is None


def test_compatibility_detail_reports_existing_match(client, logged_in_pair):
    user_a, user_b = logged_in_pair
    match = Match.objects.create(user1=user_a, user2=user_b, compatibility_score=100)

    data = client.get(reverse('matching:compatibility_detail', args=[user_b.id])).json()

    assert data['match']['id'] == match.id
    assert data['match']['compatibility_score'] == 100.0


def test_compatibility_with_self_is_rejected(client, logged_in_pair):
    user_a, _ = logged_in_pair

    response = client.get(reverse('matching:compatibility_detail', args=[user_a.id]))

    assert response.status_code == 400


def test_user_stats(client, logged_in_pair):
    _, user_b = logged_in_pair
    _post_json(client, reverse('matching:swipe'), {'swiped_id': user_b.id, 'action': 'like'})

    data = client.get(reverse('matching:user_stats')).json()

    assert data['likes_given'] == 1
    assert data['matches'] == 0


def test_admin_stats_requires_staff(client, logged_in_pair):
    assert client.get(reverse('matching:admin_stats')).status_code == 403


def test_admin_stats_for_staff(client, make_user, perfect_pair):
    client.force_login(make_user(is_staff=True, profile=False))

    response = client.get(reverse('matching:admin_stats'))

    assert response.status_code == 200
    assert response.json()['total_users'] == 2
