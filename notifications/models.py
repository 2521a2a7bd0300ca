from django.db import models
from django.contrib.auth import get_user_model
from django.utils import timezone

User = get_user_model()


class Notification(models.Model):
    """In-app notification for a single user"""

    MATCH = 'match'
    MESSAGE = 'message'
    PROFILE_VIEW = 'profile_view'
    SYSTEM = 'system'
    NOTIFICATION_TYPES = [
        (MATCH, 'Match'),
        (MESSAGE, 'Message'),
        (PROFILE_VIEW, 'Profile View'),
        (SYSTEM, 'System'),
    ]

    user = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    notification_type = models.CharField(max_length=20, choices=NOTIFICATION_TYPES)
    title = models.CharField(max_length=200)
    message = models.TextField()
    action_url = models.CharField(max_length=200, blank=True)
    related_user = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='+'
    )

    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'notifications_notification'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notification_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.get_notification_type_display()} for {self.user}: {self.title}"

    def to_dict(self):
        related = self.related_user
        return {
            'id': self.id,
            'type': self.notification_type,
            'title': self.title,
            'message': self.message,
            'is_read': self.is_read,
            'action_url': self.action_url,
            'created_at': self.created_at.isoformat(),
            'user_id': related.id if related else None,
            'user_name': related.display_name if related else None,
            'user_image': (
                related.profile.profile_image_url
                if related is not None and hasattr(related, 'profile') else None
            ),
        }
