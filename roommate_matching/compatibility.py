"""
Roommate compatibility scoring.

Two roommate profiles are scored from 0 to 100 by adding up independent
factor contributions:

    age         up to 10 points
    location    up to 15 points
    lifestyle   up to 50 points, reduced by deal-breaker penalties
    budget      up to 15 points
    tags        up to 10 points

A factor contributes only when both profiles carry data for it. Factors
that cannot be evaluated add nothing and the total is not re-normalized,
so a sparse pair scores lower than a complete pair with the same fit.

Everything here is pure: no database access, no shared state. Profiles
come in as ``ProfileSnapshot`` records, plain mappings, or anything with a
``to_snapshot()`` method (the stored ``UserProfile``).
"""
import logging
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

FACTOR_MAX_POINTS = {
    'age': 10.0,
    'location': 15.0,
    'lifestyle': 50.0,
    'budget': 15.0,
    'tags': 10.0,
}

DEAL_BREAKER_PENALTIES = {
    'smoking': 20.0,
    'pets': 15.0,
    'parties': 10.0,
}

# Social level above this counts as a party-goer for the "parties" deal-breaker
PARTY_SOCIAL_LEVEL = 3

SCALE_MIN = 1
SCALE_MAX = 5


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    elif not isinstance(value, (int, float, Decimal)):
        return None
    try:
        number = float(value)
    except (OverflowError, ValueError):
        # ints beyond float range, unparseable strings
        return None
    return number if math.isfinite(number) else None


def _as_scale(value: Any) -> Optional[float]:
    number = _as_number(value)
    if number is None or not SCALE_MIN <= number <= SCALE_MAX:
        return None
    return number


def _as_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _as_flag(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None


def _as_string_set(value: Any, lower: bool = False) -> FrozenSet[str]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return frozenset()
    items = set()
    for item in value:
        text = _as_text(item)
        if text:
            items.add(text.lower() if lower else text)
    return frozenset(items)


def _as_budget_range(value: Any) -> Optional[Tuple[float, float]]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    low, high = _as_number(value[0]), _as_number(value[1])
    if low is None or high is None or low > high:
        return None
    return low, high


def _first(data: Mapping, *keys: str) -> Any:
    """Return the first non-null value among ``keys``"""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class Lifestyle:
    """Lifestyle half of a profile; every field is optional"""

    cleanliness: Optional[float] = None
    social_level: Optional[float] = None
    sleep_schedule: Optional[str] = None
    smoking: Optional[bool] = None
    pets: Optional[bool] = None

    @classmethod
    def from_mapping(cls, data: Any) -> Optional['Lifestyle']:
        if not isinstance(data, Mapping):
            return None
        lifestyle = cls(
            cleanliness=_as_scale(data.get('cleanliness')),
            social_level=_as_scale(_first(data, 'social_level', 'socialLevel')),
            sleep_schedule=_as_text(_first(data, 'sleep_schedule', 'sleepSchedule')),
            smoking=_as_flag(data.get('smoking')),
            pets=_as_flag(data.get('pets')),
        )
        return None if lifestyle.is_empty else lifestyle

    @property
    def is_empty(self) -> bool:
        return all(
            value is None for value in (
                self.cleanliness, self.social_level, self.sleep_schedule, self.smoking, self.pets
            )
        )


@dataclass(frozen=True)
class ProfileSnapshot:
    """Read-only view of the profile fields the scorer looks at"""

    age: Optional[float] = None
    location: Optional[str] = None
    lifestyle: Optional[Lifestyle] = None
    deal_breakers: FrozenSet[str] = frozenset()
    budget_range: Optional[Tuple[float, float]] = None
    tags: FrozenSet[str] = frozenset()

    @classmethod
    def from_mapping(cls, data: Any) -> 'ProfileSnapshot':
        """
        Build a snapshot from loosely-typed profile data.

        Accepts snake_case or camelCase keys, a nested ``lifestyle`` mapping
        or flat lifestyle keys, and the legacy ``preferences`` block holding
        ``dealBreakers`` and ``budgetRange``. Values that are missing or of
        the wrong shape become absent; nothing here raises.
        """
        if not isinstance(data, Mapping):
            return cls()

        preferences = _first(data, 'preferences', 'roommate_preferences', 'roommatePreferences')
        if not isinstance(preferences, Mapping):
            preferences = {}

        lifestyle_data = data.get('lifestyle')
        lifestyle = Lifestyle.from_mapping(lifestyle_data if isinstance(lifestyle_data, Mapping) else data)

        deal_breakers = _first(data, 'deal_breakers', 'dealBreakers')
        if deal_breakers is None:
            deal_breakers = _first(preferences, 'deal_breakers', 'dealBreakers')

        budget_range = _first(data, 'budget_range', 'budgetRange')
        if budget_range is None:
            budget_range = _first(preferences, 'budget_range', 'budgetRange')
        if budget_range is None and data.get('budget_min') is not None and data.get('budget_max') is not None:
            budget_range = (data['budget_min'], data['budget_max'])

        age = _as_number(data.get('age'))

        return cls(
            age=age if age is not None and age >= 0 else None,
            location=_as_text(data.get('location')),
            lifestyle=lifestyle,
            deal_breakers=_as_string_set(deal_breakers, lower=True),
            budget_range=_as_budget_range(budget_range),
            tags=_as_string_set(data.get('tags')),
        )


@dataclass
class CompatibilityResult:
    """Score plus the per-factor points that produced it"""

    score: float
    factors: Dict[str, float] = field(default_factory=dict)
    deal_breaker_penalty: float = 0.0
    deal_breaker_violations: List[str] = field(default_factory=list)
    sleep_schedule_match: Optional[bool] = None
    shared_tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'factors': dict(self.factors),
            'deal_breaker_penalty': self.deal_breaker_penalty,
            'deal_breaker_violations': list(self.deal_breaker_violations),
            'sleep_schedule_match': self.sleep_schedule_match,
            'shared_tags': list(self.shared_tags),
        }


def compatibility_level(score: Optional[float]) -> str:
    """Human-readable band for a 0-100 score"""
    if score is None:
        return 'Unknown'
    if score >= 90:
        return 'Excellent'
    elif score >= 80:
        return 'Very Good'
    elif score >= 70:
        return 'Good'
    elif score >= 60:
        return 'Fair'
    elif score >= 50:
        return 'Moderate'
    return 'Low'


class CompatibilityCalculator:
    """Core compatibility scoring algorithm"""

    def calculate_compatibility(self, profile1: Any, profile2: Any) -> float:
        """Score two profiles from 0 to 100, rounded to 2 decimals"""
        return self.calculate_breakdown(profile1, profile2).score

    def calculate_breakdown(self, profile1: Any, profile2: Any) -> CompatibilityResult:
        try:
            snapshot1 = _coerce_profile(profile1)
            snapshot2 = _coerce_profile(profile2)
            if snapshot1 is None or snapshot2 is None:
                return CompatibilityResult(score=0.0)
            return self._score(snapshot1, snapshot2)
        except (TypeError, ValueError, ArithmeticError):
            logger.exception("Error calculating compatibility")
            return CompatibilityResult(score=0.0)

    def _score(self, profile1: ProfileSnapshot, profile2: ProfileSnapshot) -> CompatibilityResult:
        result = CompatibilityResult(score=0.0)

        age_points = self._calculate_age_compatibility(profile1, profile2)
        if age_points is not None:
            result.factors['age'] = age_points

        location_points = self._calculate_location_compatibility(profile1, profile2)
        if location_points is not None:
            result.factors['location'] = location_points

        self._calculate_lifestyle_compatibility(profile1, profile2, result)

        budget_points = self._calculate_budget_compatibility(profile1, profile2)
        if budget_points is not None:
            result.factors['budget'] = budget_points

        tag_points = self._calculate_tag_compatibility(profile1, profile2, result)
        if tag_points is not None:
            result.factors['tags'] = tag_points

        total = sum(result.factors.values())
        result.score = round(min(100.0, max(0.0, total)), 2)
        result.factors = {name: round(points, 2) for name, points in result.factors.items()}
        return result

    def _calculate_age_compatibility(self, profile1: ProfileSnapshot,
                                     profile2: ProfileSnapshot) -> Optional[float]:
        if profile1.age is None or profile2.age is None:
            return None

        age_diff = abs(profile1.age - profile2.age)
        if age_diff <= 3:
            return 10.0
        elif age_diff <= 5:
            return 7.0
        elif age_diff <= 8:
            return 4.0
        return 0.0

    def _calculate_location_compatibility(self, profile1: ProfileSnapshot,
                                          profile2: ProfileSnapshot) -> Optional[float]:
        if not profile1.location or not profile2.location:
            return None

        location1 = profile1.location.lower()
        location2 = profile2.location.lower()
        if location1 in location2 or location2 in location1:
            return 15.0
        # Different areas, possibly the same city
        return 5.0

    def _calculate_lifestyle_compatibility(self, profile1: ProfileSnapshot, profile2: ProfileSnapshot,
                                           result: CompatibilityResult) -> None:
        lifestyle1 = profile1.lifestyle
        lifestyle2 = profile2.lifestyle
        if lifestyle1 is None or lifestyle2 is None:
            return

        points = []

        if lifestyle1.cleanliness is not None and lifestyle2.cleanliness is not None:
            diff = abs(lifestyle1.cleanliness - lifestyle2.cleanliness)
            points.append(max(0.0, 10 - diff * 2))

        if lifestyle1.social_level is not None and lifestyle2.social_level is not None:
            diff = abs(lifestyle1.social_level - lifestyle2.social_level)
            points.append(max(0.0, 10 - diff * 2))

        if lifestyle1.sleep_schedule and lifestyle2.sleep_schedule:
            result.sleep_schedule_match = lifestyle1.sleep_schedule == lifestyle2.sleep_schedule
            # Different schedules are still manageable
            points.append(10.0 if result.sleep_schedule_match else 3.0)

        if not points:
            return

        penalty, violations = self._calculate_deal_breaker_penalty(profile1, lifestyle2)
        reverse_penalty, reverse_violations = self._calculate_deal_breaker_penalty(profile2, lifestyle1)
        result.deal_breaker_penalty = penalty + reverse_penalty
        result.deal_breaker_violations = violations + reverse_violations

        average = sum(points) / len(points) * 5
        result.factors['lifestyle'] = max(0.0, average - result.deal_breaker_penalty)

    def _calculate_deal_breaker_penalty(self, owner: ProfileSnapshot,
                                        other: Lifestyle) -> Tuple[float, List[str]]:
        """Penalty for ``owner``'s deal-breakers found in ``other``'s lifestyle"""
        violations = []
        if 'smoking' in owner.deal_breakers and other.smoking:
            violations.append('smoking')
        if 'pets' in owner.deal_breakers and other.pets:
            violations.append('pets')
        if (
            'parties' in owner.deal_breakers
            and other.social_level is not None
            and other.social_level > PARTY_SOCIAL_LEVEL
        ):
            violations.append('parties')

        return sum(DEAL_BREAKER_PENALTIES[name] for name in violations), violations

    def _calculate_budget_compatibility(self, profile1: ProfileSnapshot,
                                        profile2: ProfileSnapshot) -> Optional[float]:
        if profile1.budget_range is None or profile2.budget_range is None:
            return None

        min1, max1 = profile1.budget_range
        min2, max2 = profile2.budget_range

        overlap = max(0.0, min(max1, max2) - max(min1, min2))
        total_range = max(max1 - min1, max2 - min2)
        if total_range <= 0:
            return 0.0

        return overlap / total_range * FACTOR_MAX_POINTS['budget']

    def _calculate_tag_compatibility(self, profile1: ProfileSnapshot, profile2: ProfileSnapshot,
                                     result: CompatibilityResult) -> Optional[float]:
        if not profile1.tags or not profile2.tags:
            return None

        common = profile1.tags & profile2.tags
        result.shared_tags = sorted(common)
        return len(common) / len(profile1.tags | profile2.tags) * FACTOR_MAX_POINTS['tags']


def _coerce_profile(profile: Any) -> Optional[ProfileSnapshot]:
    if profile is None:
        return None
    if isinstance(profile, ProfileSnapshot):
        return profile
    if isinstance(profile, Mapping):
        return ProfileSnapshot.from_mapping(profile)

    to_snapshot = getattr(profile, 'to_snapshot', None)
    if callable(to_snapshot):
        return to_snapshot()

    logger.debug("Unsupported profile type %s, scoring as absent", type(profile).__name__)
    return None


_calculator = CompatibilityCalculator()


def compute_compatibility(profile_a: Any, profile_b: Any) -> float:
    """Compatibility score of two profiles, 0-100 with 2 decimals; 0 if either is missing"""
    return _calculator.calculate_compatibility(profile_a, profile_b)


def compatibility_flags(result: CompatibilityResult) -> Dict[str, List[str]]:
    """Split a breakdown into things that work for the pair and things that may not"""
    factors = result.factors
    green_flags = []
    red_flags = []

    if factors.get('age', 0) >= 7:
        green_flags.append('Similar age')
    elif 'age' in factors and factors['age'] == 0:
        red_flags.append('Large age gap')

    if factors.get('location') == FACTOR_MAX_POINTS['location']:
        green_flags.append('Same area')
    elif 'location' in factors:
        red_flags.append('Different areas')

    if factors.get('lifestyle', 0) >= 40:
        green_flags.append('Similar lifestyle')

    if result.sleep_schedule_match:
        green_flags.append('Same sleep schedule')
    elif result.sleep_schedule_match is False:
        red_flags.append('Different sleep schedules')

    if factors.get('budget', 0) >= 10:
        green_flags.append('Compatible budgets')
    elif 'budget' in factors and factors['budget'] == 0:
        red_flags.append('No budget overlap')

    if result.shared_tags:
        green_flags.append('Shared interests: ' + ', '.join(result.shared_tags))

    for violation in result.deal_breaker_violations:
        red_flags.append(f'Deal-breaker: {violation}')

    return {'green_flags': green_flags, 'red_flags': red_flags}
