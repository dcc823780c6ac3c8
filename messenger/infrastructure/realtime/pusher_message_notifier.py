# messenger/infrastructure/realtime/pusher_message_notifier.py
from __future__ import annotations

import logging

import pusher

from messenger.config.settings import settings
from messenger.core.exceptions import ConflictError
from messenger.core.interfaces.message_notifier import (
    NEW_MESSAGE_EVENT,
    MessageCreatedEvent,
    MessageNotifier,
    user_channel,
)

logger = logging.getLogger(__name__)


def build_pusher_client() -> pusher.Pusher:
    if not (settings.pusher_app_id and settings.pusher_key and settings.pusher_secret):
        raise ConflictError("Pusher não configurado: informe PUSHER_APP_ID, PUSHER_KEY e PUSHER_SECRET.")

    return pusher.Pusher(
        app_id=settings.pusher_app_id,
        key=settings.pusher_key,
        secret=settings.pusher_secret,
        cluster=settings.pusher_cluster,
        ssl=settings.pusher_ssl,
    )


class PusherMessageNotifier(MessageNotifier):
    """Dispara ``new_message`` no canal ``for_user_<id>`` de cada destinatário."""

    def __init__(self, client: pusher.Pusher | None = None) -> None:
        self._client = client

    @property
    def client(self) -> pusher.Pusher:
        if self._client is None:
            self._client = build_pusher_client()
        return self._client

    def notify_message_created(self, event: MessageCreatedEvent) -> int:
        payload = event.payload()
        sent = 0
        for recipient_id in event.recipient_ids:
            self.client.trigger([user_channel(recipient_id)], NEW_MESSAGE_EVENT, payload)
            sent += 1

        logger.info(
            "pusher: new_message thread=%s message=%s destinatarios=%d",
            event.thread_id,
            event.message_id,
            sent,
        )
        return sent
