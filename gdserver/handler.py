"""
Transport-facing event handler.

The transport (websocket, socket.io, ...) hands every incoming client message
to `SessionEventHandler.handle` and sends the returned message back. This
module is the only place that turns core results and errors into protocol
messages, so the transport never sees raw exceptions.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Union

from .core.errors import OfflineError
from .core.objects import GameObject
from .core.player import Player
from .directory import PlayerDirectory
from .protocol import (
    Message, ClientMessageType, ErrorCode,
    auth_ok_message, auth_fail_message, result_message, object_message,
    error_message, closing_message
)

logger = logging.getLogger(__name__)


class BadRequest(Exception):
    """Malformed message payload."""


class _UnknownPlayer(Exception):
    """No player with the requested username."""


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise BadRequest(f"'{key}' must be a non-empty string")
    return value


def _optional_str(data: Dict[str, Any], key: str):
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise BadRequest(f"'{key}' must be a string")
    return value


class SessionEventHandler:
    """Routes client messages to Player operations."""

    def __init__(self, directory: PlayerDirectory):
        self.directory = directory
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Message]] = {
            ClientMessageType.AUTH.value: self._handle_auth,
            ClientMessageType.LOGOUT.value: self._handle_logout,
            ClientMessageType.MODIFY_PASSWORD.value: self._handle_modify_password,
            ClientMessageType.ADD_OBJECT.value: self._handle_add_object,
            ClientMessageType.REMOVE_OBJECT.value: self._handle_remove_object,
            ClientMessageType.UPDATE_OBJECTS.value: self._handle_update_objects,
            ClientMessageType.GET_OBJECT.value: self._handle_get_object,
        }

    def handle(self, message: Union[Message, str]) -> Message:
        """Handle one client message and return the reply."""
        if isinstance(message, str):
            try:
                message = Message.from_json(message)
            except (json.JSONDecodeError, ValueError):
                return error_message(ErrorCode.INVALID_JSON, "Invalid JSON message")

        handler = self._handlers.get(message.type) if isinstance(message.type, str) else None
        if handler is None:
            logger.warning("Unknown message type: %s", message.type)
            return error_message(ErrorCode.UNKNOWN_MESSAGE, f"Unknown message type: {message.type}")

        try:
            return handler(message.data)
        except BadRequest as e:
            logger.warning("Bad %s request: %s", message.type, e)
            return error_message(ErrorCode.BAD_REQUEST, str(e))
        except OfflineError:
            return error_message(ErrorCode.OFFLINE, "Player is not online")
        except _UnknownPlayer as e:
            return error_message(ErrorCode.UNKNOWN_PLAYER, f"Unknown player: {e}")

    def shutdown(self) -> Message:
        """Administrative shutdown: force everyone offline, return the broadcast."""
        count = self.directory.shutdown()
        return closing_message(count)

    def _player(self, data: Dict[str, Any]) -> Player:
        username = _require_str(data, "username")
        player = self.directory.get(username)
        if player is None:
            raise _UnknownPlayer(username)
        return player

    # Session

    def _handle_auth(self, data: Dict[str, Any]) -> Message:
        username = _require_str(data, "username")
        password = _require_str(data, "password")
        token = self.directory.authenticate(username, password)
        if not token:
            return auth_fail_message()
        player = self.directory.get(username)
        return auth_ok_message(token, player.uuid, player.is_mod())

    def _handle_logout(self, data: Dict[str, Any]) -> Message:
        player = self._player(data)
        ok = player.logout(_optional_str(data, "token"))
        return result_message(ClientMessageType.LOGOUT.value, ok)

    def _handle_modify_password(self, data: Dict[str, Any]) -> Message:
        player = self._player(data)
        ok = player.modify_password(
            token=_optional_str(data, "token"),
            old_password=_optional_str(data, "old_password"),
            new_password=_require_str(data, "new_password"),
        )
        return result_message(ClientMessageType.MODIFY_PASSWORD.value, ok)

    # Objects

    def _handle_add_object(self, data: Dict[str, Any]) -> Message:
        player = self._player(data)
        obj = _parse_object(data.get("object"))
        ok = player.add_object(_optional_str(data, "token"), obj)
        return result_message(ClientMessageType.ADD_OBJECT.value, ok)

    def _handle_remove_object(self, data: Dict[str, Any]) -> Message:
        player = self._player(data)
        ok = player.remove_object(
            _optional_str(data, "token"),
            name=_optional_str(data, "name"),
            uuid=_optional_str(data, "uuid"),
        )
        return result_message(ClientMessageType.REMOVE_OBJECT.value, ok)

    def _handle_update_objects(self, data: Dict[str, Any]) -> Message:
        player = self._player(data)
        raw = data.get("objects")
        if not isinstance(raw, list):
            raise BadRequest("'objects' must be a list")
        objects: List[GameObject] = [_parse_object(item) for item in raw]
        ok = player.update_objects(_optional_str(data, "token"), objects)
        return result_message(ClientMessageType.UPDATE_OBJECTS.value, ok)

    def _handle_get_object(self, data: Dict[str, Any]) -> Message:
        player = self._player(data)
        uuid = _optional_str(data, "uuid")
        name = _optional_str(data, "name")
        if uuid is not None:
            obj = player.get_object_by_uuid(uuid)
        elif name is not None:
            obj = player.get_object_by_name(name)
        else:
            raise BadRequest("GET_OBJECT needs 'uuid' or 'name'")
        return object_message(obj.to_dict() if obj is not None else None)


def _parse_object(raw: Any) -> GameObject:
    try:
        return GameObject.from_dict(raw)
    except ValueError as e:
        raise BadRequest(str(e)) from e
