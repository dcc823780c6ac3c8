# messenger/api/routes/thread_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify, render_template, request, url_for

from messenger.api.middlewares.auth_middleware import current_user_id, require_auth
from messenger.api.schemas.thread_schema import (
    CreateThreadRequest,
    MessageResponse,
    ParticipantResponse,
    ParticipantsRequest,
    ReplyRequest,
    ReplyResponse,
    StoreThreadResponse,
    ThreadDetailResponse,
    ThreadListItemResponse,
    ThreadResponse,
    UnreadCountResponse,
    UserMiniResponse,
)
from messenger.entities.sender import SenderDisplay
from messenger.infrastructure.database.session import db_session
from messenger.infrastructure.realtime.notifier_factory import build_message_notifier
from messenger.repositories.company_repository import CompanyRepository
from messenger.repositories.message_repository import MessageRepository
from messenger.repositories.participant_repository import ParticipantRepository
from messenger.repositories.thread_repository import ThreadRepository
from messenger.repositories.user_repository import UserRepository
from messenger.services.message_service import MessageService
from messenger.services.thread_service import ThreadScope, ThreadService
from messenger.services.user_service import UserService

bp_messages = Blueprint("messages", __name__, url_prefix="/messages")


# -------------------------
# Helpers
# -------------------------

def _build_thread_service(session) -> ThreadService:
    return ThreadService(
        thread_repo=ThreadRepository(session),
        part_repo=ParticipantRepository(session),
        msg_repo=MessageRepository(session),
        user_repo=UserRepository(session),
    )


def _build_message_service(session) -> MessageService:
    return MessageService(
        thread_repo=ThreadRepository(session),
        part_repo=ParticipantRepository(session),
        msg_repo=MessageRepository(session),
        user_repo=UserRepository(session),
        thread_service=_build_thread_service(session),
        notifier=build_message_notifier(),
    )


def _pagination(default_limit: int = 50) -> tuple[int, int]:
    limit = max(1, min(int(request.args.get("limit", default_limit)), 200))
    offset = max(0, int(request.args.get("offset", 0)))
    return limit, offset


def _user_mini(u) -> UserMiniResponse:
    return UserMiniResponse(id=u.id, name=u.name, email=u.email, avatar_url=u.avatar_url)


def _message_response(row) -> MessageResponse:
    msg, sender, company = row
    display = SenderDisplay.from_row(msg, sender, company)
    return MessageResponse(
        id=msg.id,
        thread_id=msg.thread_id,
        user_id=msg.user_id,
        company_id=msg.company_id,
        body=msg.body,
        created_at=msg.created_at,
        updated_at=msg.updated_at,
        company_name=display.company_name,
        company_logo=display.company_logo,
        person_name=display.person_name,
        person_avatar=display.person_avatar,
    )


def _thread_response(thread) -> ThreadResponse:
    return ThreadResponse(
        id=thread.id,
        subject=thread.subject,
        max_participants=thread.max_participants,
        created_at=thread.created_at,
        updated_at=thread.updated_at,
    )


def _list_item_response(item: dict) -> dict:
    thread = item["thread"]
    latest = item["latest_message"]
    return ThreadListItemResponse(
        **_thread_response(thread).model_dump(),
        latest_message=_message_response(latest) if latest else None,
        is_unread=bool(item["is_unread"]),
        unread_count=int(item["unread_count"]),
        starred=bool(item["starred"]),
        participants_string=item["participants_string"],
    ).model_dump()


def _participant_response(row) -> ParticipantResponse:
    participant, user = row
    return ParticipantResponse(
        id=participant.id,
        user=_user_mini(user),
        company_id=participant.company_id,
        last_read=participant.last_read,
        starred=bool(participant.starred),
    )


def _thread_url(thread_id: int) -> str:
    return url_for("messages.show_thread", thread_id=thread_id, _external=True)


# -------------------------
# Rotas (consulta)
# -------------------------

@bp_messages.get("")
@require_auth
def list_threads():
    user_id = current_user_id()
    scope = request.args.get("scope", ThreadScope.ALL).strip().lower()
    limit, offset = _pagination()

    with db_session() as session:
        service = _build_thread_service(session)
        threads = service.list_threads(user_id=user_id, scope=scope, limit=limit, offset=offset)
        items = service.list_items(user_id=user_id, threads=threads)
        payload = [_list_item_response(x) for x in items]

    return jsonify(payload), 200


@bp_messages.get("/create")
@require_auth
def create_form():
    user_id = current_user_id()

    with db_session() as session:
        users = UserService(UserRepository(session), CompanyRepository(session)).list_other_users(user_id=user_id)
        payload = [_user_mini(u).model_dump() for u in users]

    return jsonify({"users": payload}), 200


@bp_messages.get("/unread")
@require_auth
def unread_count():
    user_id = current_user_id()

    with db_session() as session:
        count = _build_thread_service(session).unread_messages_count(user_id)

    return jsonify(UnreadCountResponse(msg_count=count).model_dump()), 200


@bp_messages.get("/<int:thread_id>")
@require_auth
def show_thread(thread_id: int):
    user_id = current_user_id()

    with db_session() as session:
        detail = _build_thread_service(session).get_thread_detail(thread_id, user_id)
        payload = ThreadDetailResponse(
            thread=_thread_response(detail["thread"]),
            messages=[_message_response(r) for r in detail["messages"]],
            participants=[_participant_response(r) for r in detail["participants"]],
            users=[_user_mini(u) for u in detail["users"]],
        ).model_dump()

    return jsonify(payload), 200


# -------------------------
# Rotas (mutação)
# -------------------------

@bp_messages.post("")
@require_auth
def store_thread():
    user_id = current_user_id()
    payload = CreateThreadRequest.model_validate(request.get_json(force=True))

    with db_session() as session:
        service = _build_message_service(session)
        thread, msg = service.create_thread(
            user_id=user_id,
            subject=payload.subject,
            body=payload.message,
            recipients=payload.recipients,
            as_company=payload.as_company,
            max_participants=payload.max_participants,
        )

        service.notify_new_message(message_id=msg.id, thread_url=_thread_url(thread.id))

        response = StoreThreadResponse(
            message=_message_response(service.get_message_row(msg.id)),
            thread=_thread_response(thread),
        ).model_dump()

    return jsonify(response), 201


@bp_messages.put("/<int:thread_id>")
@require_auth
def reply_thread(thread_id: int):
    user_id = current_user_id()
    payload = ReplyRequest.model_validate(request.get_json(force=True))

    with db_session() as session:
        service = _build_message_service(session)
        msg = service.reply(
            thread_id=thread_id,
            user_id=user_id,
            body=payload.message,
            recipients=payload.recipients,
            as_company=payload.as_company,
        )

        message = _message_response(service.get_message_row(msg.id))
        html = render_template("messenger/partials/html_message.html", message=message)

        service.notify_new_message(message_id=msg.id, thread_url=_thread_url(thread_id), html=html)

        thread = _build_thread_service(session).get_thread_or_404(thread_id)
        response = ReplyResponse(
            message=message,
            html=html,
            thread_subject=thread.subject,
        ).model_dump()

    return jsonify(response), 200


@bp_messages.post("/<int:thread_id>/read")
@require_auth
def mark_read(thread_id: int):
    user_id = current_user_id()

    with db_session() as session:
        service = _build_thread_service(session)
        service.get_thread_or_404(thread_id)
        service.mark_as_read(thread_id, user_id)

    return ("", 204)


@bp_messages.post("/<int:thread_id>/participants")
@require_auth
def add_participants(thread_id: int):
    payload = ParticipantsRequest.model_validate(request.get_json(force=True))

    with db_session() as session:
        service = _build_thread_service(session)
        thread = service.get_thread_or_404(thread_id)
        service.add_participant(thread, payload.user_ids)
        rows = service.participant_rows(thread_id)
        response = [_participant_response(r).model_dump() for r in rows]

    return jsonify(response), 200


@bp_messages.delete("/<int:thread_id>/participants/<int:user_id>")
@require_auth
def remove_participant(thread_id: int, user_id: int):
    with db_session() as session:
        service = _build_thread_service(session)
        service.get_thread_or_404(thread_id)
        service.remove_participant(thread_id, user_id)

    return ("", 204)


@bp_messages.post("/<int:thread_id>/star")
@require_auth
def star_thread(thread_id: int):
    user_id = current_user_id()

    with db_session() as session:
        _build_thread_service(session).star(thread_id, user_id)

    return jsonify({"starred": True}), 200


@bp_messages.delete("/<int:thread_id>/star")
@require_auth
def unstar_thread(thread_id: int):
    user_id = current_user_id()

    with db_session() as session:
        _build_thread_service(session).unstar(thread_id, user_id)

    return jsonify({"starred": False}), 200


@bp_messages.delete("/<int:thread_id>")
@require_auth
def archive_thread(thread_id: int):
    user_id = current_user_id()

    with db_session() as session:
        _build_thread_service(session).archive(thread_id, user_id)

    return ("", 204)


@bp_messages.delete("/<int:thread_id>/messages/<int:message_id>")
@require_auth
def delete_message(thread_id: int, message_id: int):
    user_id = current_user_id()

    with db_session() as session:
        _build_message_service(session).delete_message(
            thread_id=thread_id,
            message_id=message_id,
            user_id=user_id,
        )

    return ("", 204)
