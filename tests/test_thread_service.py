import pytest

from messenger.core.exceptions import ConflictError, NotFoundError
from messenger.repositories.participant_repository import ParticipantRepository


def _thread(uow, sender, recipients, subject="Orçamento", body="Olá"):
    thread, msg = uow.messages.create_thread(
        user_id=sender, subject=subject, body=body, recipients=recipients
    )
    return thread, msg


# ----------------------
# Leitura / não lidas
# ----------------------

def test_new_thread_is_read_for_sender_and_unread_for_recipients(uow):
    ana, bia = uow.add_user("Ana"), uow.add_user("Bia")
    thread, _ = _thread(uow, ana, [bia])

    assert uow.threads.is_unread(thread, ana) is False
    assert uow.threads.is_unread(thread, bia) is True
    assert uow.threads.unread_messages_count(bia) == 1
    assert uow.threads.unread_messages_count(ana) == 0


def test_mark_as_read_clears_unread_until_next_reply(uow):
    ana, bia = uow.add_user("Ana"), uow.add_user("Bia")
    thread, _ = _thread(uow, ana, [bia])

    assert uow.threads.mark_as_read(thread.id, bia) is True
    assert uow.threads.is_unread(thread, bia) is False
    assert uow.threads.user_unread_messages_count(thread.id, bia) == 0

    uow.messages.reply(thread_id=thread.id, user_id=ana, body="Alguma novidade?")

    assert uow.threads.is_unread(thread, bia) is True
    assert [m.body for m in uow.threads.user_unread_messages(thread.id, bia)] == ["Alguma novidade?"]


def test_mark_as_read_for_non_participant_is_noop(uow):
    ana, bia, caio = uow.add_user("Ana"), uow.add_user("Bia"), uow.add_user("Caio")
    thread, _ = _thread(uow, ana, [bia])

    assert uow.threads.mark_as_read(thread.id, caio) is False
    assert uow.threads.is_unread(thread, caio) is False


def test_own_messages_never_count_as_unread(uow):
    ana, bia = uow.add_user("Ana"), uow.add_user("Bia")
    thread, _ = _thread(uow, ana, [bia])
    uow.messages.reply(thread_id=thread.id, user_id=bia, body="Resposta da Bia")

    # Bia respondeu: o last_read dela foi atualizado e a mensagem dela não conta
    assert uow.threads.unread_messages_count(bia) == 0
    assert uow.threads.unread_messages_count(ana) == 1


def test_archived_participant_has_no_unread_messages(uow):
    ana, bia = uow.add_user("Ana"), uow.add_user("Bia")
    thread, _ = _thread(uow, ana, [bia])

    uow.threads.archive(thread.id, bia)

    assert uow.threads.unread_messages_count(bia) == 0
    assert uow.threads.has_participant(thread.id, bia) is False


def test_deleted_message_is_not_unread(uow):
    ana, bia = uow.add_user("Ana"), uow.add_user("Bia")
    thread, msg = _thread(uow, ana, [bia])

    uow.messages.delete_message(thread_id=thread.id, message_id=msg.id, user_id=ana)

    assert uow.threads.unread_messages_count(bia) == 0
    assert uow.threads.latest_message(thread.id) is None


# ----------------------
# Escopos
# ----------------------

def test_scopes_for_user_new_and_starred(uow):
    ana, bia, caio = uow.add_user("Ana"), uow.add_user("Bia"), uow.add_user("Caio")
    t1, _ = _thread(uow, ana, [bia], subject="Primeira")
    t2, _ = _thread(uow, ana, [caio], subject="Segunda")

    assert {t.id for t in uow.threads.list_threads(user_id=bia, scope="all")} == {t1.id, t2.id}
    assert [t.id for t in uow.threads.list_threads(user_id=bia, scope="mine")] == [t1.id]
    assert [t.id for t in uow.threads.list_threads(user_id=bia, scope="new")] == [t1.id]

    uow.threads.mark_as_read(t1.id, bia)
    assert uow.threads.list_threads(user_id=bia, scope="new") == []

    uow.threads.star(t1.id, bia)
    assert [t.id for t in uow.threads.list_threads(user_id=bia, scope="starred")] == [t1.id]
    uow.threads.unstar(t1.id, bia)
    assert uow.threads.list_threads(user_id=bia, scope="starred") == []


def test_all_latest_orders_by_last_activity(uow):
    ana, bia = uow.add_user("Ana"), uow.add_user("Bia")
    t1, _ = _thread(uow, ana, [bia], subject="Antiga")
    t2, _ = _thread(uow, ana, [bia], subject="Nova")

    assert [t.id for t in uow.threads.list_threads(user_id=ana)] == [t2.id, t1.id]

    uow.messages.reply(thread_id=t1.id, user_id=bia, body="subindo")
    assert [t.id for t in uow.threads.list_threads(user_id=ana)] == [t1.id, t2.id]


def test_invalid_scope_is_rejected(uow):
    ana = uow.add_user("Ana")
    with pytest.raises(ConflictError):
        uow.threads.list_threads(user_id=ana, scope="lixo")


def test_between_requires_every_user(uow):
    ana, bia, caio = uow.add_user("Ana"), uow.add_user("Bia"), uow.add_user("Caio")
    t1, _ = _thread(uow, ana, [bia])
    t2, _ = _thread(uow, ana, [bia, caio])

    assert {t.id for t in uow.threads.list_between([ana, bia])} == {t1.id, t2.id}
    assert [t.id for t in uow.threads.list_between([bia, caio])] == [t2.id]
    assert uow.threads.list_between([]) == []


def test_search_by_subject_is_case_insensitive(uow):
    ana, bia = uow.add_user("Ana"), uow.add_user("Bia")
    t1, _ = _thread(uow, ana, [bia], subject="Contrato de Locação")
    _thread(uow, ana, [bia], subject="Outro assunto")

    assert [t.id for t in uow.threads.search_by_subject("contrato")] == [t1.id]


# ----------------------
# Participantes
# ----------------------

def test_participants_user_ids_include_archived_and_extra_user(uow):
    ana, bia, caio = uow.add_user("Ana"), uow.add_user("Bia"), uow.add_user("Caio")
    thread, _ = _thread(uow, ana, [bia])
    uow.threads.remove_participant(thread.id, bia)

    assert uow.threads.participants_user_ids(thread.id) == [ana, bia]
    assert uow.threads.participants_user_ids(thread.id, caio) == [ana, bia, caio]


def test_users_not_in_thread_excludes_participants_and_caller(uow):
    ana, bia, caio = uow.add_user("Ana"), uow.add_user("Bia"), uow.add_user("Caio")
    thread, _ = _thread(uow, ana, [bia])

    assert [u.id for u in uow.threads.users_not_in_thread(thread.id, ana)] == [caio]


def test_add_participant_accepts_single_id_and_restores_archived(uow):
    ana, bia = uow.add_user("Ana"), uow.add_user("Bia")
    thread, _ = _thread(uow, ana, [])

    uow.threads.add_participant(thread, bia)
    uow.threads.remove_participant(thread.id, [bia])
    uow.threads.add_participant(thread, [bia, bia])

    repo = ParticipantRepository(uow.session)
    assert repo.count_active(thread_id=thread.id) == 2
    assert repo.list_user_ids(thread_id=thread.id) == [ana, bia]


def test_add_unknown_participant_raises_not_found(uow):
    ana = uow.add_user("Ana")
    thread, _ = _thread(uow, ana, [])

    with pytest.raises(NotFoundError):
        uow.threads.add_participant(thread, [9999])


def test_max_participants_is_enforced(uow):
    ana, bia, caio = uow.add_user("Ana"), uow.add_user("Bia"), uow.add_user("Caio")
    thread, _ = uow.messages.create_thread(
        user_id=ana, subject="Dupla", body="só nós", recipients=[bia], max_participants=2
    )

    assert uow.threads.has_max_participants(thread) is True
    # quem já participa não conta de novo
    uow.threads.add_participant(thread, [bia])
    with pytest.raises(ConflictError):
        uow.threads.add_participant(thread, [caio])


def test_activate_all_participants_restores_archived(uow):
    ana, bia, caio = uow.add_user("Ana"), uow.add_user("Bia"), uow.add_user("Caio")
    thread, _ = _thread(uow, ana, [bia, caio])
    uow.threads.remove_participant(thread.id, [bia, caio])

    assert uow.threads.activate_all_participants(thread.id) == 2
    assert uow.threads.has_participant(thread.id, bia)
    assert uow.threads.has_participant(thread.id, caio)


def test_participants_string_skips_given_user(uow):
    ana, bia, caio = uow.add_user("Ana"), uow.add_user("Bia"), uow.add_user("Caio")
    thread, _ = _thread(uow, ana, [bia, caio])

    assert uow.threads.participants_string(thread.id) == "Ana, Bia, Caio"
    assert uow.threads.participants_string(thread.id, user_id=ana) == "Bia, Caio"


def test_creator_is_sender_of_first_message(uow):
    ana, bia = uow.add_user("Ana"), uow.add_user("Bia")
    thread, _ = _thread(uow, ana, [bia])
    uow.messages.reply(thread_id=thread.id, user_id=bia, body="oi")

    assert uow.threads.creator(thread.id).id == ana
    latest, sender, _company = uow.threads.latest_message(thread.id)
    assert (latest.body, sender.id) == ("oi", bia)


def test_star_requires_participation(uow):
    ana, bia, caio = uow.add_user("Ana"), uow.add_user("Bia"), uow.add_user("Caio")
    thread, _ = _thread(uow, ana, [bia])

    with pytest.raises(NotFoundError):
        uow.threads.star(thread.id, caio)


def test_missing_thread_raises_not_found(uow):
    with pytest.raises(NotFoundError, match="Thread com ID: 42"):
        uow.threads.get_thread_or_404(42)
