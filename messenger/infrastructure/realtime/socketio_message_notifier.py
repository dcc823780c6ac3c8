# messenger/infrastructure/realtime/socketio_message_notifier.py
from __future__ import annotations

import logging

from messenger.core.interfaces.message_notifier import (
    NEW_MESSAGE_EVENT,
    MessageCreatedEvent,
    MessageNotifier,
    user_channel,
)
from messenger.infrastructure.realtime.socketio_server import socketio

logger = logging.getLogger(__name__)


class SocketIOMessageNotifier(MessageNotifier):
    def notify_message_created(self, event: MessageCreatedEvent) -> int:
        payload = event.payload()

        # cada usuário entra na sala for_user_<id> ao conectar
        for recipient_id in event.recipient_ids:
            socketio.emit(NEW_MESSAGE_EVENT, payload, room=user_channel(recipient_id))

        logger.debug(
            "new_message thread=%s message=%s emitido para %d sala(s)",
            event.thread_id,
            event.message_id,
            len(event.recipient_ids),
        )
        return len(event.recipient_ids)
