# messenger/services/thread_service.py
from __future__ import annotations

import logging
from collections.abc import Iterable

from messenger.core.clock import as_utc
from messenger.core.exceptions import ConflictError, NotFoundError
from messenger.infrastructure.database.models.participant_model import ParticipantModel
from messenger.infrastructure.database.models.thread_model import ThreadModel
from messenger.infrastructure.database.models.user_model import UserModel
from messenger.repositories.message_repository import MessageRepository
from messenger.repositories.participant_repository import ParticipantRepository
from messenger.repositories.thread_repository import ThreadRepository
from messenger.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class ThreadScope:
    ALL = "all"
    MINE = "mine"
    NEW = "new"
    STARRED = "starred"

    CHOICES = (ALL, MINE, NEW, STARRED)


def _as_id_list(user_ids: int | Iterable[int]) -> list[int]:
    if isinstance(user_ids, int):
        return [user_ids]
    out: list[int] = []
    for x in user_ids:
        uid = int(x)
        if uid not in out:
            out.append(uid)
    return out


class ThreadService:
    def __init__(
        self,
        *,
        thread_repo: ThreadRepository,
        part_repo: ParticipantRepository,
        msg_repo: MessageRepository,
        user_repo: UserRepository,
    ) -> None:
        self._thread_repo = thread_repo
        self._part_repo = part_repo
        self._msg_repo = msg_repo
        self._user_repo = user_repo

    # -------------------------
    # Consulta
    # -------------------------

    def get_thread_or_404(self, thread_id: int) -> ThreadModel:
        thread = self._thread_repo.get_by_id(thread_id)
        if thread is None:
            raise NotFoundError(f"Thread com ID: {thread_id} não encontrada.")
        return thread

    def list_threads(self, *, user_id: int, scope: str = ThreadScope.ALL, limit: int = 50, offset: int = 0) -> list[ThreadModel]:
        if scope == ThreadScope.MINE:
            return self._thread_repo.list_for_user(user_id, limit=limit, offset=offset)
        if scope == ThreadScope.NEW:
            return self._thread_repo.list_for_user_with_new_messages(user_id, limit=limit, offset=offset)
        if scope == ThreadScope.STARRED:
            return self._thread_repo.list_starred_for_user(user_id, limit=limit, offset=offset)
        if scope == ThreadScope.ALL:
            return self._thread_repo.list_all_latest(limit=limit, offset=offset)
        raise ConflictError(f"Escopo inválido: {scope}. Use um de {', '.join(ThreadScope.CHOICES)}.")

    def list_between(self, user_ids: list[int], *, limit: int = 50, offset: int = 0) -> list[ThreadModel]:
        return self._thread_repo.list_between(user_ids, limit=limit, offset=offset)

    def search_by_subject(self, subject: str, *, limit: int = 50, offset: int = 0) -> list[ThreadModel]:
        return self._thread_repo.list_by_subject(subject, limit=limit, offset=offset)

    def list_items(self, *, user_id: int, threads: list[ThreadModel]) -> list[dict]:
        """Monta os itens da listagem com estado de leitura do usuário."""
        thread_ids = [t.id for t in threads]
        participations = self._part_repo.map_for_user(user_id=user_id, thread_ids=thread_ids)
        unread_counts = self._msg_repo.count_unread_by_thread(user_id=user_id, thread_ids=thread_ids)

        out = []
        for thread in threads:
            participant = participations.get(thread.id)
            out.append(
                {
                    "thread": thread,
                    "latest_message": self._msg_repo.latest_row_in_thread(thread_id=thread.id),
                    "is_unread": self._is_unread(thread, participant),
                    "unread_count": unread_counts.get(thread.id, 0),
                    "starred": bool(participant.starred) if participant else False,
                    "participants_string": self.participants_string(thread.id, user_id=user_id),
                }
            )
        return out

    def participants_user_ids(self, thread_id: int, user_id: int | None = None) -> list[int]:
        """Ids de todos os participantes (inclusive arquivados); ``user_id`` é acrescentado se informado."""
        ids = self._part_repo.list_user_ids(thread_id=thread_id, include_deleted=True)
        if user_id is not None:
            ids.append(int(user_id))
        return ids

    def participant_rows(self, thread_id: int):
        return self._part_repo.list_rows(thread_id=thread_id)

    def users_not_in_thread(self, thread_id: int, user_id: int) -> list[UserModel]:
        return self._user_repo.list_active_excluding(self.participants_user_ids(thread_id, user_id))

    def participants_string(self, thread_id: int, user_id: int | None = None, separator: str = ", ") -> str:
        names = [
            user.name
            for (_participant, user) in self._part_repo.list_rows(thread_id=thread_id)
            if user_id is None or user.id != user_id
        ]
        return separator.join(names)

    def has_participant(self, thread_id: int, user_id: int) -> bool:
        return self._part_repo.get(thread_id=thread_id, user_id=user_id) is not None

    def has_max_participants(self, thread: ThreadModel) -> bool:
        if thread.max_participants is None:
            return False
        return self._part_repo.count_active(thread_id=thread.id) >= thread.max_participants

    def creator(self, thread_id: int) -> UserModel | None:
        row = self._msg_repo.first_row_in_thread(thread_id=thread_id)
        if row is None:
            return None
        _msg, sender, _company = row
        return sender

    def latest_message(self, thread_id: int):
        return self._msg_repo.latest_row_in_thread(thread_id=thread_id)

    # -------------------------
    # Leitura
    # -------------------------

    def _is_unread(self, thread: ThreadModel, participant: ParticipantModel | None) -> bool:
        if participant is None:
            return False
        if participant.last_read is None:
            return True
        return as_utc(thread.updated_at) > as_utc(participant.last_read)

    def is_unread(self, thread: ThreadModel, user_id: int) -> bool:
        return self._is_unread(thread, self._part_repo.get(thread_id=thread.id, user_id=user_id))

    def mark_as_read(self, thread_id: int, user_id: int) -> bool:
        # não participante: nada a fazer
        return self._part_repo.set_last_read(thread_id=thread_id, user_id=user_id)

    def user_unread_messages(self, thread_id: int, user_id: int):
        return self._msg_repo.list_unread_in_thread(thread_id=thread_id, user_id=user_id)

    def user_unread_messages_count(self, thread_id: int, user_id: int) -> int:
        return len(self.user_unread_messages(thread_id, user_id))

    def unread_messages_count(self, user_id: int) -> int:
        return self._msg_repo.count_unread_for_user(user_id=user_id)

    # -------------------------
    # Participantes
    # -------------------------

    def add_participant(self, thread: ThreadModel, user_ids: int | Iterable[int]) -> list[ParticipantModel]:
        ids = _as_id_list(user_ids)
        if not ids:
            return []

        users = {u.id: u for u in self._user_repo.list_by_ids(ids)}
        missing = [uid for uid in ids if uid not in users]
        if missing:
            raise NotFoundError(f"Usuário(s) não encontrado(s): {', '.join(str(x) for x in missing)}.")

        if thread.max_participants is not None:
            new_ids = [uid for uid in ids if not self.has_participant(thread.id, uid)]
            total = self._part_repo.count_active(thread_id=thread.id) + len(new_ids)
            if total > thread.max_participants:
                raise ConflictError(
                    f"A thread permite no máximo {thread.max_participants} participantes."
                )

        added = [self._part_repo.ensure(thread_id=thread.id, user_id=uid) for uid in ids]
        logger.info("thread=%s participantes adicionados=%s", thread.id, ids)
        return added

    def remove_participant(self, thread_id: int, user_ids: int | Iterable[int]) -> int:
        removed = self._part_repo.soft_delete_users(thread_id=thread_id, user_ids=_as_id_list(user_ids))
        logger.info("thread=%s participantes arquivados=%d", thread_id, removed)
        return removed

    def activate_all_participants(self, thread_id: int) -> int:
        return self._part_repo.restore_all(thread_id=thread_id)

    def archive(self, thread_id: int, user_id: int) -> None:
        self.get_thread_or_404(thread_id)
        if not self.remove_participant(thread_id, user_id):
            raise NotFoundError("Você não participa desta thread.")

    def star(self, thread_id: int, user_id: int) -> None:
        self._set_starred(thread_id, user_id, True)

    def unstar(self, thread_id: int, user_id: int) -> None:
        self._set_starred(thread_id, user_id, False)

    def _set_starred(self, thread_id: int, user_id: int, starred: bool) -> None:
        self.get_thread_or_404(thread_id)
        ok = self._part_repo.set_starred(thread_id=thread_id, user_id=user_id, starred=starred)
        if not ok:
            raise NotFoundError("Você não participa desta thread.")

    # -------------------------
    # Detalhe (show)
    # -------------------------

    def get_thread_detail(self, thread_id: int, user_id: int) -> dict:
        thread = self.get_thread_or_404(thread_id)

        detail = {
            "thread": thread,
            "messages": self._msg_repo.list_rows_by_thread(thread_id=thread.id),
            "participants": self.participant_rows(thread.id),
            "users": self.users_not_in_thread(thread.id, user_id),
        }

        self.mark_as_read(thread.id, user_id)
        return detail
