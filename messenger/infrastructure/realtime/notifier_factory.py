# messenger/infrastructure/realtime/notifier_factory.py
from __future__ import annotations

from messenger.config.settings import settings
from messenger.core.interfaces.message_notifier import MessageNotifier
from messenger.infrastructure.realtime.null_message_notifier import NullMessageNotifier


def build_message_notifier() -> MessageNotifier:
    if settings.push_driver == "pusher":
        from messenger.infrastructure.realtime.pusher_message_notifier import PusherMessageNotifier

        return PusherMessageNotifier()

    if settings.push_driver == "socketio":
        from messenger.infrastructure.realtime.socketio_message_notifier import SocketIOMessageNotifier

        return SocketIOMessageNotifier()

    return NullMessageNotifier()
