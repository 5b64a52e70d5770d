"""Wire messages between the bridge and the WeChat agent."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from .types import (
    Chat,
    GroupInfo,
    ReplyInfo,
    User,
    UserInfo,
    _WireEnum,
    _enum,
    _int,
    _object,
    _opt_str,
    _present,
    _put,
    _str,
    _str_list,
)


class MessageType(_WireEnum):
    REQUEST = "request"
    RESPONSE = "response"


# The wire name of GET_QRCODE differs from its display name.
_DISPLAY_NAMES = {"GET_QRCODE": "get_qrcode"}


class _OperationEnum(_WireEnum):
    def __str__(self) -> str:
        return _DISPLAY_NAMES.get(self.name, self.value)


class RequestType(_OperationEnum):
    EVENT = "event"
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    LOGIN_QR = "login_qr"
    IS_LOGIN = "is_login"
    GET_SELF = "get_self"
    GET_USER_INFO = "get_user_info"
    GET_GROUP_INFO = "get_group_info"
    GET_GROUP_MEMBERS = "get_group_members"
    GET_GROUP_MEMBER_NICKNAME = "get_group_member_nickname"
    GET_FRIEND_LIST = "get_friend_list"
    GET_GROUP_LIST = "get_group_list"
    SEND_TEXT = "send_text"
    SEND_IMAGE = "send_image"
    SEND_VIDEO = "send_video"
    SEND_AUDIO = "send_audio"
    SEND_FILE = "send_file"
    SEND_EMOJI = "send_emoji"
    REVOKE_MSG = "revoke_msg"
    DOWNLOAD_IMAGE = "download_image"
    DOWNLOAD_VIDEO = "download_video"
    DOWNLOAD_AUDIO = "download_audio"
    DOWNLOAD_FILE = "download_file"
    SET_NICKNAME = "set_nickname"
    SET_AVATAR = "set_avatar"
    GET_QRCODE = "get_q_r_code"
    ACCEPT_FRIEND = "accept_friend"
    CREATE_GROUP = "create_group"
    SET_GROUP_NAME = "set_group_name"
    INVITE_GROUP_MEMBER = "invite_group_member"
    REMOVE_GROUP_MEMBER = "remove_group_member"
    QUIT_GROUP = "quit_group"
    REFRESH_CONTACTS = "refresh_contacts"
    SYNC_MESSAGES = "sync_messages"


class ResponseType(_OperationEnum):
    EVENT = "event"
    CONNECT = "connect"
    DISCONNECT = "disconnect"
    LOGIN_QR = "login_qr"
    IS_LOGIN = "is_login"
    GET_SELF = "get_self"
    GET_USER_INFO = "get_user_info"
    GET_GROUP_INFO = "get_group_info"
    GET_GROUP_MEMBERS = "get_group_members"
    GET_GROUP_MEMBER_NICKNAME = "get_group_member_nickname"
    GET_FRIEND_LIST = "get_friend_list"
    GET_GROUP_LIST = "get_group_list"
    SEND_TEXT = "send_text"
    SEND_IMAGE = "send_image"
    SEND_VIDEO = "send_video"
    SEND_AUDIO = "send_audio"
    SEND_FILE = "send_file"
    SEND_EMOJI = "send_emoji"
    REVOKE_MSG = "revoke_msg"
    DOWNLOAD_IMAGE = "download_image"
    DOWNLOAD_VIDEO = "download_video"
    DOWNLOAD_AUDIO = "download_audio"
    DOWNLOAD_FILE = "download_file"
    SET_NICKNAME = "set_nickname"
    SET_AVATAR = "set_avatar"
    GET_QRCODE = "get_q_r_code"
    ACCEPT_FRIEND = "accept_friend"
    CREATE_GROUP = "create_group"
    SET_GROUP_NAME = "set_group_name"
    INVITE_GROUP_MEMBER = "invite_group_member"
    REMOVE_GROUP_MEMBER = "remove_group_member"
    QUIT_GROUP = "quit_group"
    REFRESH_CONTACTS = "refresh_contacts"
    SYNC_MESSAGES = "sync_messages"


class EventType(_WireEnum):
    TEXT = "text"
    PHOTO = "photo"
    STICKER = "sticker"
    AUDIO = "audio"
    VIDEO = "video"
    FILE = "file"
    LOCATION = "location"
    NOTICE = "notice"
    APP = "app"
    REVOKE = "revoke"
    VOIP = "voip"
    SYSTEM = "system"


@dataclass
class ErrorResponse(Exception):
    """Error reported by the agent; also raisable as an exception."""

    code: str
    message: str
    http_status: int = 0

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}

    @classmethod
    def from_dict(cls, data: Any) -> "ErrorResponse":
        data = _object(data, "error")
        return cls(code=_str(data, "code"), message=_str(data, "message"))


@dataclass
class Request:
    request_type: RequestType
    data: Any = None

    def to_dict(self) -> dict:
        out: dict = {"type": self.request_type.value}
        _put(out, "data", self.data)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "Request":
        data = _object(data, "request")
        return cls(
            request_type=_enum(data, "type", RequestType),
            data=data.get("data"),
        )


@dataclass
class Response:
    response_type: ResponseType
    error: Optional[ErrorResponse] = None
    data: Any = None

    def to_dict(self) -> dict:
        out: dict = {"type": self.response_type.value}
        if self.error is not None:
            out["error"] = self.error.to_dict()
        _put(out, "data", self.data)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "Response":
        data = _object(data, "response")
        raw_error = data.get("error")
        return cls(
            response_type=_enum(data, "type", ResponseType),
            error=None if raw_error is None else ErrorResponse.from_dict(raw_error),
            data=data.get("data"),
        )

    def is_success(self) -> bool:
        return self.error is None

    def as_bool(self) -> Optional[bool]:
        return self.data if isinstance(self.data, bool) else None

    def as_user_info(self) -> Optional[UserInfo]:
        try:
            return UserInfo.from_dict(self.data)
        except ValueError:
            return None

    def as_group_info(self) -> Optional[GroupInfo]:
        try:
            return GroupInfo.from_dict(self.data)
        except ValueError:
            return None

    def as_user_list(self) -> Optional[list[UserInfo]]:
        if not isinstance(self.data, list):
            return None
        try:
            return [UserInfo.from_dict(item) for item in self.data]
        except ValueError:
            return None

    def as_group_list(self) -> Optional[list[GroupInfo]]:
        if not isinstance(self.data, list):
            return None
        try:
            return [GroupInfo.from_dict(item) for item in self.data]
        except ValueError:
            return None

    def as_string_list(self) -> Optional[list[str]]:
        if isinstance(self.data, list) and all(isinstance(item, str) for item in self.data):
            return list(self.data)
        return None

    def as_string(self) -> Optional[str]:
        return self.data if isinstance(self.data, str) else None


@dataclass
class Message:
    id: int
    mxid: str
    msg_type: MessageType
    data: Any = None

    @classmethod
    def request(cls, msg_id: int, mxid: str, request: Request) -> "Message":
        return cls(id=msg_id, mxid=mxid, msg_type=MessageType.REQUEST, data=request.to_dict())

    def as_request(self) -> Optional[Request]:
        if self.data is None:
            return None
        try:
            return Request.from_dict(self.data)
        except ValueError:
            return None

    def as_response(self) -> Optional[Response]:
        if self.data is None:
            return None
        try:
            return Response.from_dict(self.data)
        except ValueError:
            return None

    def to_dict(self) -> dict:
        out: dict = {"id": self.id, "mxid": self.mxid, "type": self.msg_type.value}
        _put(out, "data", self.data)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "Message":
        data = _object(data, "message")
        return cls(
            id=_int(data, "id"),
            mxid=_str(data, "mxid"),
            msg_type=_enum(data, "type", MessageType),
            data=data.get("data"),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, text: str) -> "Message":
        return cls.from_dict(json.loads(text))


@dataclass
class Event:
    id: str
    timestamp: int
    from_user: User
    chat: Chat
    event_type: EventType
    thread_id: Optional[str] = None
    content: Optional[str] = None
    mentions: list[str] = field(default_factory=list)
    reply: Optional[ReplyInfo] = None
    data: Any = None

    def to_dict(self) -> dict:
        out: dict = {"id": self.id}
        _put(out, "thread_id", self.thread_id)
        out["timestamp"] = self.timestamp
        out["from"] = self.from_user.to_dict()
        out["chat"] = self.chat.to_dict()
        out["type"] = self.event_type.value
        _put(out, "content", self.content)
        if self.mentions:
            out["mentions"] = list(self.mentions)
        if self.reply is not None:
            out["reply"] = self.reply.to_dict()
        _put(out, "data", self.data)
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "Event":
        data = _object(data, "event")
        raw_reply = data.get("reply")
        return cls(
            id=_str(data, "id"),
            thread_id=_opt_str(data, "thread_id"),
            timestamp=_int(data, "timestamp"),
            from_user=User.from_dict(_present(data, "from")),
            chat=Chat.from_dict(_present(data, "chat")),
            event_type=_enum(data, "type", EventType),
            content=_opt_str(data, "content"),
            mentions=_str_list(data, "mentions"),
            reply=None if raw_reply is None else ReplyInfo.from_dict(raw_reply),
            data=data.get("data"),
        )