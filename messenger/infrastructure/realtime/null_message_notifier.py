# messenger/infrastructure/realtime/null_message_notifier.py
from __future__ import annotations

from messenger.core.interfaces.message_notifier import MessageCreatedEvent, MessageNotifier


class NullMessageNotifier(MessageNotifier):
    def notify_message_created(self, event: MessageCreatedEvent) -> int:
        return 0
