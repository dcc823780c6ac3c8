# messenger/core/interfaces/message_notifier.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class MessageCreatedEvent:
    thread_id: int
    message_id: int
    sender_id: int
    sender_name: str | None
    thread_subject: str
    thread_url: str
    body: str | None
    text: str
    html: str = ""
    recipient_ids: tuple[int, ...] = field(default_factory=tuple)

    @property
    def div_id(self) -> str:
        return f"thread_{self.thread_id}"

    def payload(self) -> dict[str, Any]:
        return {
            "thread_id": self.thread_id,
            "div_id": self.div_id,
            "sender_name": self.sender_name,
            "thread_url": self.thread_url,
            "thread_subject": self.thread_subject,
            "message": self.body,
            "html": self.html,
            "text": self.text,
        }


def user_channel(user_id: int) -> str:
    return f"for_user_{int(user_id)}"


NEW_MESSAGE_EVENT = "new_message"


class MessageNotifier(Protocol):
    def notify_message_created(self, event: MessageCreatedEvent) -> int:
        """Entrega o evento a cada destinatário; devolve quantos foram notificados."""
        ...
