# messenger/api/realtime/socket_handlers.py
from __future__ import annotations

import logging

from flask import request
from flask_socketio import disconnect, join_room

from messenger.api.middlewares.auth_middleware import bearer_token
from messenger.core.exceptions import UnauthorizedError
from messenger.core.interfaces.message_notifier import user_channel
from messenger.infrastructure.realtime.socketio_server import socketio
from messenger.infrastructure.security.jwt_provider import JwtProvider

logger = logging.getLogger(__name__)


def register_socket_handlers() -> None:
    @socketio.on("connect")
    def on_connect():
        # navegadores não mandam header no handshake: aceita ?token=
        token = bearer_token(request.headers, request.args)
        if not token:
            return disconnect()

        try:
            user_id = JwtProvider().user_id(token)
        except UnauthorizedError:
            logger.info("socket recusado: token inválido")
            return disconnect()

        join_room(user_channel(user_id))
        logger.debug("socket conectado user=%s sala=%s", user_id, user_channel(user_id))
