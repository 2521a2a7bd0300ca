import logging
from typing import Dict, List, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from .models import Notification

User = get_user_model()
logger = logging.getLogger(__name__)


def notification_group_name(user_id) -> str:
    return f'notifications_{user_id}'


class NotificationService:
    """Creates notifications and pushes them to connected clients"""

    def __init__(self):
        self.channel_layer = get_channel_layer()

    def create_notification(self, user: User, notification_type: str, title: str, message: str,
                            action_url: str = '', related_user: Optional[User] = None) -> Notification:
        notification = Notification.objects.create(
            user=user,
            notification_type=notification_type,
            title=title,
            message=message,
            action_url=action_url,
            related_user=related_user,
        )
        # Only tell clients about rows that actually committed
        transaction.on_commit(lambda: self.send_realtime_notification(notification))
        return notification

    def create_match_notification(self, user: User, matched_user: User,
                                  compatibility_score: Optional[float] = None) -> Notification:
        message = (
            f"You have a new match with {matched_user.display_name}! "
            f"Start a conversation to get to know each other."
        )
        if compatibility_score is not None:
            message += f" Compatibility score: {compatibility_score:.0f}%."

        return self.create_notification(
            user=user,
            notification_type=Notification.MATCH,
            title='New Match!',
            message=message,
            action_url='/matches',
            related_user=matched_user,
        )

    def create_system_notification(self, user: User, title: str, message: str,
                                   action_url: str = '') -> Notification:
        return self.create_notification(
            user=user,
            notification_type=Notification.SYSTEM,
            title=title,
            message=message,
            action_url=action_url,
        )

    def send_realtime_notification(self, notification: Notification):
        """Push a stored notification to the user's WebSocket group"""
        if not self.channel_layer:
            return

        payload = {
            'type': 'send_notification',
            'notification': {
                **notification.to_dict(),
                'timestamp': timezone.now().isoformat(),
            },
        }
        try:
            async_to_sync(self.channel_layer.group_send)(
                notification_group_name(notification.user_id),
                payload
            )
        except Exception as e:
            # The stored notification is still delivered on the next fetch
            logger.warning(f"Could not push notification {notification.id} to user {notification.user_id}: {str(e)}")

    def get_user_notifications(self, user: User, limit: int = 50) -> List[Notification]:
        return list(
            Notification.objects.filter(user=user)
            .select_related('related_user__profile')
            .order_by('-created_at', '-id')[:limit]
        )

    def get_unread_count(self, user: User) -> int:
        return Notification.objects.filter(user=user, is_read=False).count()

    def mark_as_read(self, notification_id, user: User) -> bool:
        """Mark one of the user's notifications read; False if it isn't theirs"""
        updated = Notification.objects.filter(id=notification_id, user=user).update(is_read=True)
        return updated > 0

    def mark_all_as_read(self, user: User) -> int:
        return Notification.objects.filter(user=user, is_read=False).update(is_read=True)

    def delete_notification(self, notification_id, user: User) -> bool:
        deleted, _ = Notification.objects.filter(id=notification_id, user=user).delete()
        return deleted > 0

    def get_summary(self, user: User) -> Dict:
        return {
            'unread_count': self.get_unread_count(user),
            'total_count': Notification.objects.filter(user=user).count(),
        }
