from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST, require_http_methods

from .services import NotificationService

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200


@login_required
@require_GET
def notification_list(request):
    """Current user's notifications, newest first"""
    try:
        limit = int(request.GET.get('limit', DEFAULT_LIST_LIMIT))
    except (TypeError, ValueError):
        return JsonResponse({'error': 'limit must be an integer'}, status=400)
    if limit < 1:
        return JsonResponse({'error': 'limit must be at least 1'}, status=400)

    service = NotificationService()
    notifications = service.get_user_notifications(request.user, limit=min(limit, MAX_LIST_LIMIT))

    return JsonResponse({
        'notifications': [notification.to_dict() for notification in notifications],
        'total_count': len(notifications),
    })


@login_required
@require_GET
def unread_count(request):
    return JsonResponse(NotificationService().get_summary(request.user))


@login_required
@require_POST
def mark_read(request, notification_id):
    if not NotificationService().mark_as_read(notification_id, request.user):
        return JsonResponse({'error': 'Notification not found'}, status=404)
    return JsonResponse({'success': True})


@login_required
@require_POST
def mark_all_read(request):
    updated = NotificationService().mark_all_as_read(request.user)
    return JsonResponse({'success': True, 'updated': updated})


@login_required
@require_http_methods(['DELETE'])
def delete_notification(request, notification_id):
    if not NotificationService().delete_notification(notification_id, request.user):
        return JsonResponse({'error': 'Notification not found'}, status=404)
    return JsonResponse({'success': True})
