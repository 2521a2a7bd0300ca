import pytest

from roommate_matching.compatibility import (
    CompatibilityCalculator,
    Lifestyle,
    ProfileSnapshot,
    compatibility_flags,
    compatibility_level,
    compute_compatibility,
)


def _breakdown(profile_a, profile_b):
    return CompatibilityCalculator().calculate_breakdown(profile_a, profile_b)


def test_perfect_match_scores_full_marks(perfect_profile_data):
    score = compute_compatibility(perfect_profile_data, dict(perfect_profile_data))

    assert score >= 95
    assert score == 100.0


def test_empty_profiles_score_zero():
    assert compute_compatibility({}, {}) == 0
    assert _breakdown({}, {}).factors == {}


def test_missing_profile_short_circuits_to_zero(perfect_profile_data):
    assert compute_compatibility(None, perfect_profile_data) == 0
    assert compute_compatibility(perfect_profile_data, None) == 0
    assert compute_compatibility(None, None) == 0


def test_unsupported_profile_type_scores_zero(perfect_profile_data):
    assert compute_compatibility(42, perfect_profile_data) == 0


@pytest.mark.parametrize('age_b, expected', [
    (28, 10.0),
    (22, 10.0),
    (30, 7.0),
    (33, 4.0),
    (34, 0.0),
])
def test_age_factor_decays_with_age_gap(age_b, expected):
    result = _breakdown({'age': 25}, {'age': age_b})

    assert result.factors == {'age': expected}
    assert result.score == expected


def test_age_gap_of_nine_contributes_nothing():
    assert compute_compatibility({'age': 25}, {'age': 34}) == 0


def test_location_containment_is_case_insensitive_both_ways():
    assert _breakdown({'location': 'Boston'}, {'location': 'Back Bay, boston'}).factors['location'] == 15.0
    assert _breakdown({'location': 'BACK BAY, BOSTON'}, {'location': 'boston'}).factors['location'] == 15.0


def test_different_locations_still_earn_base_points():
    assert _breakdown({'location': 'Boston'}, {'location': 'Cambridge'}).factors['location'] == 5.0


def test_blank_location_is_treated_as_absent():
    assert 'location' not in _breakdown({'location': '   '}, {'location': 'Boston'}).factors


def test_lifestyle_averages_evaluated_sub_factors():
    profile_a = {'lifestyle': {'cleanliness': 5, 'socialLevel': 3, 'sleepSchedule': 'early'}}
    profile_b = {'lifestyle': {'cleanliness': 2, 'socialLevel': 3, 'sleepSchedule': 'late'}}

    result = _breakdown(profile_a, profile_b)

    # cleanliness 4, social 10, sleep 3 -> (17 / 3) * 5
    assert result.factors['lifestyle'] == 28.33
    assert result.sleep_schedule_match is False


def test_lifestyle_uses_only_sub_factors_both_sides_have():
    result = _breakdown(
        {'lifestyle': {'cleanliness': 4}},
        {'lifestyle': {'cleanliness': 3, 'socialLevel': 2}},
    )

    assert result.factors == {'lifestyle': 40.0}


def test_lifestyle_skipped_when_nothing_comparable():
    result = _breakdown({'lifestyle': {'smoking': True}}, {'lifestyle': {'cleanliness': 3}})

    assert 'lifestyle' not in result.factors


def test_deal_breaker_lowers_score():
    lifestyle = {'cleanliness': 4, 'socialLevel': 3, 'sleepSchedule': '22:00-07:00'}
    smoker = {'lifestyle': dict(lifestyle, smoking=True)}

    with_deal_breaker = compute_compatibility({'lifestyle': lifestyle, 'dealBreakers': ['smoking']}, smoker)
    without_deal_breaker = compute_compatibility({'lifestyle': lifestyle}, smoker)

    assert without_deal_breaker == 50.0
    assert with_deal_breaker == 30.0
    assert with_deal_breaker < without_deal_breaker


def test_deal_breaker_penalties_accumulate_from_both_sides():
    profile_a = {
        'lifestyle': {'socialLevel': 2, 'smoking': True},
        'dealBreakers': ['pets'],
    }
    profile_b = {
        'lifestyle': {'socialLevel': 2, 'pets': True},
        'dealBreakers': ['smoking'],
    }

    result = _breakdown(profile_a, profile_b)

    assert result.deal_breaker_penalty == 35.0
    assert sorted(result.deal_breaker_violations) == ['pets', 'smoking']
    assert result.factors['lifestyle'] == 15.0


def test_parties_deal_breaker_uses_social_level():
    quiet = {'lifestyle': {'socialLevel': 3}, 'dealBreakers': ['parties']}

    assert _breakdown(quiet, {'lifestyle': {'socialLevel': 3}}).deal_breaker_penalty == 0
    assert _breakdown(quiet, {'lifestyle': {'socialLevel': 4}}).deal_breaker_penalty == 10.0


def test_lifestyle_factor_is_floored_at_zero():
    picky = {
        'lifestyle': {'socialLevel': 1, 'sleepSchedule': 'early'},
        'dealBreakers': ['smoking', 'pets', 'parties'],
    }
    party_house = {'lifestyle': {'socialLevel': 5, 'sleepSchedule': 'late', 'smoking': True, 'pets': True}}

    result = _breakdown(picky, party_house)

    assert result.deal_breaker_penalty == 45.0
    assert result.factors['lifestyle'] == 0.0
    assert result.score == 0.0


def test_deal_breakers_only_reduce_the_lifestyle_factor():
    picky = {
        'age': 25,
        'location': 'Boston',
        'lifestyle': {'socialLevel': 1},
        'dealBreakers': ['smoking', 'pets', 'parties'],
    }
    party_house = {'age': 25, 'location': 'Boston', 'lifestyle': {'socialLevel': 5, 'smoking': True, 'pets': True}}

    result = _breakdown(picky, party_house)

    assert result.factors['lifestyle'] == 0.0
    assert result.score == 25.0


def test_budget_without_overlap_contributes_nothing():
    result = _breakdown({'budgetRange': [500, 800]}, {'budgetRange': [2000, 3000]})

    assert result.factors == {'budget': 0.0}


def test_budget_partial_overlap_is_relative_to_wider_range():
    result = _breakdown({'budgetRange': [1000, 1500]}, {'budgetRange': [1250, 2000]})

    # overlap 250 of the wider 750 range
    assert result.factors['budget'] == 5.0


def test_zero_width_budgets_contribute_nothing():
    assert _breakdown({'budgetRange': [1000, 1000]}, {'budgetRange': [1000, 1000]}).factors['budget'] == 0.0


def test_shared_tags_use_jaccard_similarity():
    result = _breakdown({'tags': ['yoga', 'reading']}, {'tags': ['yoga', 'hiking']})

    assert result.factors['tags'] == 3.33
    assert result.shared_tags == ['yoga']


def test_empty_tag_set_is_not_evaluated():
    assert 'tags' not in _breakdown({'tags': []}, {'tags': ['yoga']}).factors


def test_malformed_fields_are_ignored():
    profile_a = {
        'age': 'unknown',
        'lifestyle': {'cleanliness': 9, 'socialLevel': True},
        'budgetRange': [1500, 1000],
        'tags': 'yoga',
    }
    profile_b = {
        'age': 30,
        'lifestyle': {'cleanliness': 3, 'socialLevel': 3},
        'budgetRange': [1000, 1500],
        'tags': ['yoga'],
    }

    result = _breakdown(profile_a, profile_b)

    assert result.factors == {}
    assert result.score == 0


def test_score_is_symmetric():
    profiles = [
        {'age': 25, 'location': 'Boston', 'dealBreakers': ['smoking'],
         'lifestyle': {'cleanliness': 5, 'socialLevel': 2}, 'budgetRange': [900, 1400], 'tags': ['yoga']},
        {'age': 31, 'location': 'Boston, MA', 'lifestyle': {'cleanliness': 2, 'socialLevel': 5, 'smoking': True},
         'budgetRange': [1200, 1800], 'tags': ['yoga', 'gaming']},
        {'age': 40, 'dealBreakers': ['parties', 'pets'],
         'lifestyle': {'sleepSchedule': 'late', 'socialLevel': 4, 'pets': True}},
        {},
    ]

    for profile_a in profiles:
        for profile_b in profiles:
            assert compute_compatibility(profile_a, profile_b) == compute_compatibility(profile_b, profile_a)


def test_score_stays_within_range():
    extremes = [
        {'age': 18, 'location': 'a', 'lifestyle': {'cleanliness': 1, 'socialLevel': 1, 'sleepSchedule': 'x'},
         'dealBreakers': ['smoking', 'pets', 'parties'], 'budgetRange': [0, 1], 'tags': ['a']},
        {'age': 99, 'location': 'b', 'lifestyle': {'cleanliness': 5, 'socialLevel': 5, 'sleepSchedule': 'y',
                                                   'smoking': True, 'pets': True},
         'dealBreakers': ['smoking', 'pets', 'parties'], 'budgetRange': [5000, 9000], 'tags': ['b']},
    ]

    for profile_a in extremes:
        for profile_b in extremes:
            assert 0 <= compute_compatibility(profile_a, profile_b) <= 100


def test_snapshot_accepts_snake_case_and_legacy_preferences():
    snapshot = ProfileSnapshot.from_mapping({
        'age': 25,
        'lifestyle': {'social_level': 3, 'sleep_schedule': ' 22:00-07:00 '},
        'preferences': {'dealBreakers': ['Smoking', ' pets '], 'budgetRange': [1000, 1500]},
    })

    assert snapshot.age == 25
    assert snapshot.lifestyle == Lifestyle(social_level=3, sleep_schedule='22:00-07:00')
    assert snapshot.deal_breakers == frozenset({'smoking', 'pets'})
    assert snapshot.budget_range == (1000.0, 1500.0)


def test_snapshot_reads_flat_lifestyle_keys():
    snapshot = ProfileSnapshot.from_mapping({'cleanliness': 4, 'smoking': False})

    assert snapshot.lifestyle == Lifestyle(cleanliness=4, smoking=False)


def test_snapshots_can_be_scored_directly():
    snapshot = ProfileSnapshot(age=25, tags=frozenset({'yoga'}))

    assert compute_compatibility(snapshot, snapshot) == 20.0


def test_flags_for_a_strong_pair(perfect_profile_data):
    flags = compatibility_flags(_breakdown(perfect_profile_data, perfect_profile_data))

    assert 'Similar age' in flags['green_flags']
    assert 'Same area' in flags['green_flags']
    assert 'Same sleep schedule' in flags['green_flags']
    assert 'Shared interests: reading, yoga' in flags['green_flags']
    assert flags['red_flags'] == []


def test_flags_for_a_clashing_pair():
    profile_a = {'age': 22, 'location': 'Boston', 'dealBreakers': ['smoking'],
                 'lifestyle': {'sleepSchedule': 'early'}, 'budgetRange': [500, 800]}
    profile_b = {'age': 45, 'location': 'Denver', 'lifestyle': {'sleepSchedule': 'late', 'smoking': True},
                 'budgetRange': [2000, 3000]}

    flags = compatibility_flags(_breakdown(profile_a, profile_b))

    assert flags['green_flags'] == []
    assert set(flags['red_flags']) == {
        'Large age gap', 'Different areas', 'Different sleep schedules',
        'No budget overlap', 'Deal-breaker: smoking',
    }


@pytest.mark.parametrize('score, level', [
    (95, 'Excellent'),
    (85, 'Very Good'),
    (72.5, 'Good'),
    (60, 'Fair'),
    (50, 'Moderate'),
    (12, 'Low'),
    (None, 'Unknown'),
])
def test_compatibility_level_bands(score, level):
    assert compatibility_level(score) == level


def test_oversized_numbers_are_ignored():
    huge = 10 ** 400

    assert compute_compatibility({'age': huge}, {'age': 25}) == 0
    assert compute_compatibility({'budgetRange': [0, huge]}, {'budgetRange': [0, 10]}) == 0
    assert ProfileSnapshot.from_mapping({'age': huge, 'lifestyle': {'cleanliness': huge}}) == ProfileSnapshot()


def test_oversized_numbers_do_not_hide_other_factors(perfect_profile_data):
    profile = dict(perfect_profile_data, age=10 ** 400)

    result = _breakdown(profile, perfect_profile_data)

    assert 'age' not in result.factors
    assert result.score == 90.0
