"""Message protocol definitions for the session server."""
from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import json


class ClientMessageType(Enum):
    """Message types sent from client to server."""
    # Session
    AUTH = "AUTH"
    LOGOUT = "LOGOUT"
    MODIFY_PASSWORD = "MODIFY_PASSWORD"

    # Objects
    ADD_OBJECT = "ADD_OBJECT"
    REMOVE_OBJECT = "REMOVE_OBJECT"
    UPDATE_OBJECTS = "UPDATE_OBJECTS"
    GET_OBJECT = "GET_OBJECT"


class ServerMessageType(Enum):
    """Message types sent from server to client."""
    AUTH_OK = "AUTH_OK"
    AUTH_FAIL = "AUTH_FAIL"
    RESULT = "RESULT"
    OBJECT = "OBJECT"
    ERROR = "ERROR"
    CLOSING = "CLOSING"


class ErrorCode(Enum):
    """Codes carried by ERROR messages."""
    OFFLINE = "OFFLINE"
    UNKNOWN_PLAYER = "UNKNOWN_PLAYER"
    BAD_REQUEST = "BAD_REQUEST"
    UNKNOWN_MESSAGE = "UNKNOWN_MESSAGE"
    INVALID_JSON = "INVALID_JSON"


@dataclass
class Message:
    """Base message class for client/server communication."""
    type: str
    data: Dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> str:
        """Serialize message to JSON string."""
        return json.dumps({
            "type": self.type,
            "data": self.data
        })

    @classmethod
    def from_json(cls, json_str: str) -> 'Message':
        """Deserialize message from JSON string."""
        obj = json.loads(json_str)
        if not isinstance(obj, dict):
            raise ValueError("Message must be a JSON object")
        msg_type = obj.get("type", "")
        if not isinstance(msg_type, str):
            raise ValueError("Message type must be a string")
        data = obj.get("data", {})
        return cls(type=msg_type, data=data if isinstance(data, dict) else {})


# Server -> Client message builders
def auth_ok_message(token: str, player_uuid: str, moderator: bool) -> Message:
    """Build successful login message."""
    return Message(
        type=ServerMessageType.AUTH_OK.value,
        data={
            "token": token,
            "uuid": player_uuid,
            "moderator": moderator
        }
    )


def auth_fail_message() -> Message:
    """Build failed login message. Never says which credential was wrong."""
    return Message(type=ServerMessageType.AUTH_FAIL.value)


def result_message(action: str, ok: bool) -> Message:
    """Build the pass/fail result of a session or object operation."""
    return Message(
        type=ServerMessageType.RESULT.value,
        data={
            "action": action,
            "ok": ok
        }
    )


def object_message(obj: Optional[Dict[str, Any]]) -> Message:
    """Build object lookup reply. `obj` is None when nothing matched."""
    return Message(
        type=ServerMessageType.OBJECT.value,
        data={"object": obj}
    )


def error_message(code: ErrorCode, message: str) -> Message:
    """Build error message."""
    return Message(
        type=ServerMessageType.ERROR.value,
        data={
            "code": code.value,
            "message": message
        }
    )


def closing_message(players_logged_out: int) -> Message:
    """Build server closing broadcast."""
    return Message(
        type=ServerMessageType.CLOSING.value,
        data={"players_logged_out": players_logged_out}
    )
