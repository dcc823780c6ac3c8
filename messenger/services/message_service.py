# messenger/services/message_service.py
from __future__ import annotations

import logging

from messenger.config.settings import settings
from messenger.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from messenger.core.interfaces.message_notifier import MessageCreatedEvent, MessageNotifier
from messenger.infrastructure.database.models.message_model import MessageModel
from messenger.infrastructure.database.models.thread_model import ThreadModel
from messenger.repositories.message_repository import MessageRepository
from messenger.repositories.participant_repository import ParticipantRepository
from messenger.repositories.thread_repository import ThreadRepository
from messenger.repositories.user_repository import UserRepository
from messenger.services.thread_service import ThreadService

logger = logging.getLogger(__name__)


def preview(body: str | None, limit: int) -> str:
    text = (body or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


class MessageService:
    def __init__(
        self,
        *,
        thread_repo: ThreadRepository,
        part_repo: ParticipantRepository,
        msg_repo: MessageRepository,
        user_repo: UserRepository,
        thread_service: ThreadService,
        notifier: MessageNotifier,
    ) -> None:
        self._thread_repo = thread_repo
        self._part_repo = part_repo
        self._msg_repo = msg_repo
        self._user_repo = user_repo
        self._threads = thread_service
        self._notifier = notifier

    def _sender_company_id(self, *, user_id: int, as_company: bool) -> int | None:
        if not as_company:
            return None
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise NotFoundError("Usuário não encontrado.")
        if user.company_id is None:
            raise ConflictError("Usuário não está vinculado a uma empresa.")
        return int(user.company_id)

    def _add_message(self, *, thread: ThreadModel, user_id: int, body: str, company_id: int | None) -> MessageModel:
        body = (body or "").strip()
        if not body:
            raise ConflictError("Mensagem inválida: informe o texto.")

        msg = self._msg_repo.add(
            MessageModel(
                thread_id=thread.id,
                user_id=user_id,
                company_id=company_id,
                body=body,
            )
        )
        # toda mensagem gravada atualiza a thread
        self._thread_repo.touch(thread.id)
        return msg

    def create_thread(
        self,
        *,
        user_id: int,
        subject: str,
        body: str,
        recipients: list[int] | None = None,
        as_company: bool = False,
        max_participants: int | None = None,
    ) -> tuple[ThreadModel, MessageModel]:
        subject = (subject or "").strip()
        if not subject:
            raise ConflictError("Assunto inválido: informe o assunto.")

        company_id = self._sender_company_id(user_id=user_id, as_company=as_company)

        limit = max_participants if max_participants is not None else settings.default_max_participants
        thread = self._thread_repo.add(ThreadModel(subject=subject, max_participants=limit))

        msg = self._add_message(thread=thread, user_id=user_id, body=body, company_id=company_id)

        # remetente já entra como lido
        self._part_repo.ensure(thread_id=thread.id, user_id=user_id, company_id=company_id)
        self._threads.mark_as_read(thread.id, user_id)

        if recipients:
            self._threads.add_participant(thread, recipients)

        logger.info("thread=%s criada por user=%s message=%s", thread.id, user_id, msg.id)
        return thread, msg

    def reply(
        self,
        *,
        thread_id: int,
        user_id: int,
        body: str,
        recipients: list[int] | None = None,
        as_company: bool = False,
    ) -> MessageModel:
        thread = self._threads.get_thread_or_404(thread_id)
        company_id = self._sender_company_id(user_id=user_id, as_company=as_company)

        # quem arquivou volta a ver a thread
        self._threads.activate_all_participants(thread.id)

        msg = self._add_message(thread=thread, user_id=user_id, body=body, company_id=company_id)

        self._part_repo.ensure(thread_id=thread.id, user_id=user_id, company_id=company_id)
        self._threads.mark_as_read(thread.id, user_id)

        if recipients:
            self._threads.add_participant(thread, recipients)

        logger.info("thread=%s resposta de user=%s message=%s", thread.id, user_id, msg.id)
        return msg

    def get_message_row(self, message_id: int):
        row = self._msg_repo.get_row(message_id=message_id)
        if row is None:
            raise NotFoundError("Mensagem não encontrada.")
        return row  # (msg, sender, company)

    def recipients(self, msg: MessageModel):
        return [
            (participant, user)
            for (participant, user) in self._part_repo.list_rows(thread_id=msg.thread_id)
            if participant.user_id != msg.user_id
        ]

    def delete_message(self, *, thread_id: int, message_id: int, user_id: int) -> None:
        self._threads.get_thread_or_404(thread_id)

        msg, _sender, _company = self.get_message_row(message_id)
        if msg.thread_id != thread_id:
            raise NotFoundError("Mensagem não encontrada.")
        if msg.user_id != user_id:
            raise ForbiddenError("Apenas o remetente pode excluir a mensagem.")

        if not self._msg_repo.soft_delete(message_id=message_id):
            raise NotFoundError("Mensagem não encontrada.")

        self._thread_repo.touch(thread_id)

    # -------------------------
    # Push
    # -------------------------

    def build_event(self, *, message_id: int, thread_url: str, html: str = "") -> MessageCreatedEvent:
        msg, sender, _company = self.get_message_row(message_id)
        thread = self._threads.get_thread_or_404(msg.thread_id)

        recipient_ids = tuple(
            uid for uid in dict.fromkeys(self._threads.participants_user_ids(thread.id))
            if uid != msg.user_id
        )

        return MessageCreatedEvent(
            thread_id=int(thread.id),
            message_id=int(msg.id),
            sender_id=int(msg.user_id),
            sender_name=sender.name if sender is not None else None,
            thread_subject=thread.subject,
            thread_url=thread_url,
            body=msg.body,
            text=preview(msg.body, settings.message_preview_length),
            html=html,
            recipient_ids=recipient_ids,
        )

    def notify_new_message(self, *, message_id: int, thread_url: str, html: str = "") -> int:
        """Avisa os demais participantes; falha no push não derruba a requisição."""
        if not settings.push_enabled:
            return 0

        event = self.build_event(message_id=message_id, thread_url=thread_url, html=html)
        if not event.recipient_ids:
            return 0

        try:
            return self._notifier.notify_message_created(event)
        except Exception:
            logger.exception("falha ao notificar new_message thread=%s message=%s", event.thread_id, event.message_id)
            return 0
