import json

from django.contrib.auth import get_user_model
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.http import require_GET, require_POST

from profiles.models import UserProfile
from .compatibility import compatibility_flags, compatibility_level
from .models import Match
from .services import MatchingError, MatchingService

User = get_user_model()


def _profile_data(user):
    try:
        profile = user.profile
    except UserProfile.DoesNotExist:
        return None

    return {
        'display_name': profile.display_name,
        'age': profile.age,
        'location': profile.location,
        'occupation': profile.occupation,
        'bio': profile.bio,
        'profile_image_url': profile.profile_image_url,
        'lifestyle': {
            'cleanliness': profile.cleanliness,
            'social_level': profile.social_level,
            'sleep_schedule': profile.sleep_schedule,
            'smoking': profile.smoking,
            'pets': profile.pets,
        } if profile.has_lifestyle else None,
        'budget_range': (
            [float(profile.budget_min), float(profile.budget_max)] if profile.budget_range else None
        ),
        'tags': profile.tags,
    }


def _user_data(user):
    return {
        'id': user.id,
        'name': user.display_name,
        'profile': _profile_data(user),
    }


def _match_data(match, user):
    score = float(match.compatibility_score) if match.compatibility_score is not None else None
    return {
        'id': match.id,
        'user': _user_data(match.other_user(user)),
        'compatibility_score': score,
        'compatibility_level': match.compatibility_level,
        'created_at': match.created_at.isoformat(),
    }


def _request_data(request):
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except json.JSONDecodeError:
            return None
        return data if isinstance(data, dict) else None
    return request.POST


@login_required
@require_GET
def swipe_candidates(request):
    """Profiles the user hasn't swiped on yet, best compatibility first"""
    matching_service = MatchingService()
    candidates = matching_service.get_swipe_candidates(request.user)

    return JsonResponse({
        'candidates': [
            {
                **_user_data(candidate.user),
                'compatibility_score': candidate.score,
            }
            for candidate in candidates
        ],
        'total_count': len(candidates),
    })


@login_required
@require_GET
def discover_users(request):
    """All other active profiles with their compatibility score"""
    matching_service = MatchingService()
    ranked = matching_service.get_discover_users(request.user)

    return JsonResponse({
        'users': [
            {
                **_user_data(candidate.user),
                'compatibility_score': round(candidate.score),
            }
            for candidate in ranked
        ],
        'total_count': len(ranked),
    })


@login_required
@require_POST
def swipe(request):
    """Record a like or pass; reports a match when the like is mutual"""
    data = _request_data(request)
    if data is None:
        return JsonResponse({'error': 'Invalid JSON body'}, status=400)

    swiped_id = data.get('swiped_id')
    action = data.get('action')
    if not swiped_id or not action:
        return JsonResponse({'error': 'Missing swiped_id or action'}, status=400)

    try:
        swiped_id = int(swiped_id)
    except (TypeError, ValueError):
        return JsonResponse({'error': 'swiped_id must be an integer'}, status=400)

    swiped_user = get_object_or_404(User, id=swiped_id)

    matching_service = MatchingService()
    try:
        outcome = matching_service.record_swipe(request.user, swiped_user, action)
    except MatchingError as e:
        return JsonResponse({'error': str(e)}, status=400)

    return JsonResponse({
        'swipe': {
            'id': outcome.swipe.id,
            'swiped_id': swiped_user.id,
            'action': outcome.swipe.action,
        },
        'match': _match_data(outcome.match, request.user) if outcome.match else None,
        'is_new_match': outcome.is_new_match,
    })


@login_required
@require_GET
def my_matches(request):
    matching_service = MatchingService()
    matches = matching_service.get_user_matches(request.user)

    return JsonResponse({
        'matches': [_match_data(match, request.user) for match in matches],
        'total_count': len(matches),
    })


@login_required
@require_GET
def compatibility_detail(request, user_id):
    """Detailed compatibility breakdown with another user"""
    other_user = get_object_or_404(User, id=user_id, is_active=True)

    if other_user == request.user:
        return JsonResponse({'error': 'Cannot calculate compatibility with yourself'}, status=400)

    matching_service = MatchingService()
    result = matching_service.calculate_compatibility(request.user, other_user)
    match = Match.between(request.user, other_user)

    return JsonResponse({
        'user': _user_data(other_user),
        'overall_score': result.score,
        'compatibility_level': compatibility_level(result.score),
        'breakdown': result.to_dict(),
        **compatibility_flags(result),
        'match': _match_data(match, request.user) if match and match.is_active else None,
    })


@login_required
@require_GET
def user_stats(request):
    return JsonResponse(MatchingService().get_user_stats(request.user))


@login_required
@require_GET
def admin_stats(request):
    if not request.user.is_staff:
        return JsonResponse({'error': 'Admin access required'}, status=403)
    return JsonResponse(MatchingService().get_admin_stats())
