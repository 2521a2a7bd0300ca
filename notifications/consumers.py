import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from .services import NotificationService, notification_group_name

logger = logging.getLogger(__name__)

UNAUTHENTICATED_CLOSE_CODE = 4001


class NotificationConsumer(AsyncWebsocketConsumer):
    """Pushes a user's notifications over WebSocket and accepts mark-read requests"""

    group_name = None

    async def connect(self):
        user = self.scope.get("user")
        if user is None or user.is_anonymous:
            await self.close(code=UNAUTHENTICATED_CLOSE_CODE)
            return

        self.user = user
        self.group_name = notification_group_name(user.id)
        await self.channel_layer.group_add(self.group_name, self.channel_name)
        await self.accept()
        logger.debug(f"Notification socket opened for user {user.id}")

    async def disconnect(self, close_code):
        if self.group_name:
            await self.channel_layer.group_discard(self.group_name, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        try:
            payload = json.loads(text_data or '')
        except json.JSONDecodeError:
            await self.send_error("Invalid JSON")
            return

        if not isinstance(payload, dict) or payload.get('type') != 'mark_read':
            await self.send_error("Unknown message type")
            return

        notification_id = payload.get('notification_id')
        if not notification_id:
            await self.send_error("notification_id is required")
            return

        marked = await self.mark_notification_read(notification_id)
        await self.send(text_data=json.dumps({
            'type': 'marked_read',
            'notification_id': notification_id,
            'success': marked,
        }))

    async def send_notification(self, event):
        """Forward a ``send_notification`` group event to the client"""
        await self.send(text_data=json.dumps({
            'type': 'notification',
            'notification': event['notification'],
        }))

    async def send_error(self, message):
        await self.send(text_data=json.dumps({'type': 'error', 'message': message}))

    @database_sync_to_async
    def mark_notification_read(self, notification_id):
        try:
            return NotificationService().mark_as_read(notification_id, self.user)
        except (TypeError, ValueError):
            return False
